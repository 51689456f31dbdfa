import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import exception_handler

from timetable.models import Lesson
from .models import AttendanceSession
from .permissions import IsSessionTeacherOrStaff, can_manage_lesson
from .serializers import (
    AttendanceRecordSerializer,
    AttendanceSessionSerializer,
    BulkMarkSerializer,
    OpenSessionSerializer,
    ReanchorSerializer,
    SessionRosterSerializer,
    StudentMarkSerializer,
)
from .services import (
    AlreadyFinalized,
    ConcurrencyConflict,
    NotFound,
    StateConflict,
    StudentMark,
    finalize_session,
    mark_bulk,
    mark_one,
    open_session,
    open_sessions_for_teacher,
    reanchor_session_to_week,
    session_roster,
)

logger = logging.getLogger(__name__)


def _error_response(message, code, http_status, errors=None):
    data = {'detail': message, 'code': code, 'status_code': http_status}
    if errors is not None:
        data['errors'] = errors
    return Response(data, status=http_status)


def attendance_exception_handler(exc, context):
    """Map attendance service errors onto HTTP responses.

    404 missing session/lesson, 403 finalized session, 400 invalid input,
    409 stale concurrency token or duplicate finalize.
    """
    if isinstance(exc, NotFound):
        return _error_response(exc.message, exc.code, status.HTTP_404_NOT_FOUND)
    if isinstance(exc, StateConflict):
        return _error_response(exc.message, exc.code, status.HTTP_403_FORBIDDEN)
    if isinstance(exc, (ConcurrencyConflict, AlreadyFinalized)):
        return _error_response(exc.message, exc.code, status.HTTP_409_CONFLICT)
    if isinstance(exc, DjangoValidationError):
        errors = exc.message_dict if hasattr(exc, 'error_dict') else exc.messages
        return _error_response('Invalid attendance data.', 'invalid', status.HTTP_400_BAD_REQUEST, errors)

    response = exception_handler(exc, context)
    if response is not None and isinstance(response.data, dict):
        response.data['status_code'] = response.status_code
    return response


class AttendanceSessionViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    queryset = AttendanceSession.objects.select_related('lesson', 'group')
    serializer_class = AttendanceSessionSerializer
    permission_classes = (IsAuthenticated, IsSessionTeacherOrStaff)

    def get_queryset(self):
        if self.action != 'list':
            return super().get_queryset()

        user = self.request.user
        if user.is_staff:
            queryset = super().get_queryset().exclude(status=AttendanceSession.Status.FINALIZED).order_by('-id')
        else:
            queryset = open_sessions_for_teacher(user)

        params = self.request.query_params
        group_id = params.get('group')
        if group_id and group_id.isdigit():
            queryset = queryset.filter(group_id=int(group_id))
        teacher_id = params.get('teacher')
        if teacher_id and teacher_id.isdigit():
            queryset = queryset.filter(teacher_id=int(teacher_id))
        day = params.get('day_of_week')
        if day and day.isdigit():
            queryset = queryset.filter(lesson__day_of_week=int(day))
        title = (params.get('lesson_title') or '').strip()
        if title:
            queryset = queryset.filter(lesson__title__icontains=title)
        return queryset

    @action(detail=False, methods=['post'], url_path='open')
    def open(self, request):
        """Open the session for a lesson, reusing this week's session when present."""
        ser = OpenSessionSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        lesson_id = ser.validated_data['lesson_id']

        lesson = Lesson.objects.filter(pk=lesson_id, is_active=True).first()
        if lesson is None:
            raise NotFound(f'Lesson {lesson_id} not found or inactive.')
        if not can_manage_lesson(request.user, lesson):
            raise PermissionDenied('You may only open sessions for your own lessons')

        session = open_session(lesson.pk, request.user, scheduled_at=ser.validated_data.get('date'))
        return Response(self.get_serializer(session).data, status=status.HTTP_200_OK)

    @action(detail=True, methods=['get'], url_path='roster')
    def roster(self, request, pk=None):
        session = self.get_object()
        data = session_roster(session.pk)
        return Response(SessionRosterSerializer(data).data)

    @action(detail=True, methods=['post'], url_path='mark')
    def mark(self, request, pk=None):
        session = self.get_object()
        ser = StudentMarkSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        record = mark_one(session.pk, StudentMark(**ser.validated_data), request.user)
        return Response(AttendanceRecordSerializer(record).data, status=status.HTTP_200_OK)

    @action(detail=True, methods=['post'], url_path='bulk-mark')
    def bulk_mark(self, request, pk=None):
        session = self.get_object()
        ser = BulkMarkSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        marks = [StudentMark(**rec) for rec in ser.validated_data['records']]
        mark_bulk(session.pk, marks, request.user)
        return Response(SessionRosterSerializer(session_roster(session.pk)).data, status=status.HTTP_200_OK)

    @action(detail=True, methods=['post'], url_path='finalize')
    def finalize(self, request, pk=None):
        session = self.get_object()
        finalize_session(session.pk)
        session.refresh_from_db()
        return Response(self.get_serializer(session).data)

    @action(detail=True, methods=['post'], url_path='reanchor')
    def reanchor(self, request, pk=None):
        """Move a session to another week. Destroys the session's records."""
        user = request.user
        if not (user.is_staff or user.is_superuser):
            raise PermissionDenied('Only staff may re-anchor attendance sessions')
        session = self.get_object()
        ser = ReanchorSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        session = reanchor_session_to_week(session.pk, ser.validated_data['date'])
        logger.info('User %s re-anchored session %s', user.get_username(), session.pk)
        return Response(self.get_serializer(session).data)
