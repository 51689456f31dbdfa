"""Resolve the canonical attendance session for a lesson and a calendar week.

A weekly lesson should map to one session per week no matter how many times
staff open it. Lookup order:

1. a session scheduled on the exact target day (any status),
2. otherwise the latest non-finalized session in the target's ISO week,
3. otherwise a new OPEN session at the target day and the lesson's start time.
"""
import logging

from django.db import transaction
from django.utils import timezone

from academics.models import AttendanceSession
from timetable.models import Lesson
from . import occurrence
from .exceptions import NotFound

logger = logging.getLogger(__name__)


def _get_active_lesson(lesson_id) -> Lesson:
    lesson = Lesson.objects.filter(pk=lesson_id, is_active=True).first()
    if lesson is None:
        raise NotFound(f'Lesson {lesson_id} not found or inactive.')
    return lesson


def find_same_day_session(lesson_id, day):
    start, end = occurrence.day_bounds(day)
    return (
        AttendanceSession.objects
        .filter(lesson_id=lesson_id, scheduled_at__gte=start, scheduled_at__lt=end)
        .order_by('-scheduled_at', '-id')
        .first()
    )


def find_weekly_session(lesson_id, day, exclude_id=None):
    """Latest non-finalized session for the lesson in `day`'s ISO week."""
    week_start, week_end = occurrence.iso_week_bounds(day)
    qs = (
        AttendanceSession.objects
        .filter(lesson_id=lesson_id, scheduled_at__gte=week_start, scheduled_at__lt=week_end)
        .exclude(status=AttendanceSession.Status.FINALIZED)
    )
    if exclude_id is not None:
        qs = qs.exclude(pk=exclude_id)
    return qs.order_by('-scheduled_at', '-id').first()


@transaction.atomic
def resolve_session(lesson_id, target_date, requesting_user=None) -> AttendanceSession:
    """Return the session for `lesson_id` around `target_date`, creating it if needed.

    `target_date` may be a date or a datetime; only its calendar day is used.
    A finalized same-day session is still returned; callers that intend to
    write must check its status.
    """
    lesson = _get_active_lesson(lesson_id)
    day = occurrence.local_date(target_date)

    session = find_same_day_session(lesson.pk, day)
    if session is not None:
        logger.debug('Reusing same-day session id=%s lesson=%s day=%s', session.pk, lesson.pk, day)
        return session

    session = find_weekly_session(lesson.pk, day)
    if session is not None:
        logger.debug('Reusing weekly session id=%s lesson=%s day=%s', session.pk, lesson.pk, day)
        return session

    session = AttendanceSession.objects.create(
        lesson=lesson,
        group_id=lesson.group_id,
        teacher_id=lesson.teacher_id,
        scheduled_at=occurrence.combine(day, lesson.start_time),
        status=AttendanceSession.Status.OPEN,
        opened_by=requesting_user if getattr(requesting_user, 'pk', None) else None,
    )
    logger.info(
        'Created attendance session id=%s lesson=%s scheduled_at=%s opened_by=%s',
        session.pk, lesson.pk, session.scheduled_at.isoformat(), getattr(requesting_user, 'pk', None),
    )
    return session


def open_session(lesson_id, requesting_user=None, scheduled_at=None, now=None) -> AttendanceSession:
    """Open (or reuse) a session, defaulting to the lesson's next occurrence."""
    if scheduled_at is None:
        lesson = _get_active_lesson(lesson_id)
        now = timezone.localtime(now) if now is not None else timezone.localtime()
        scheduled_at = occurrence.next_occurrence(lesson.day_of_week, lesson.start_time, now)
    return resolve_session(lesson_id, scheduled_at, requesting_user)


def open_sessions_for_teacher(teacher):
    return (
        AttendanceSession.objects
        .select_related('lesson', 'group')
        .filter(teacher=teacher)
        .exclude(status=AttendanceSession.Status.FINALIZED)
        .order_by('-id')
    )
