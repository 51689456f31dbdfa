from rest_framework import viewsets
from rest_framework.permissions import IsAuthenticated

from .models import Lesson
from .serializers import LessonSerializer


class LessonViewSet(viewsets.ReadOnlyModelViewSet):
    """Read-only lesson templates. Lessons are maintained through the admin."""
    queryset = Lesson.objects.select_related('group').filter(is_active=True)
    serializer_class = LessonSerializer
    permission_classes = (IsAuthenticated,)

    def get_queryset(self):
        queryset = super().get_queryset()
        user = self.request.user
        if not user.is_staff:
            queryset = queryset.filter(teacher=user)

        group_id = self.request.query_params.get('group')
        if group_id and group_id.isdigit():
            queryset = queryset.filter(group_id=int(group_id))

        day = self.request.query_params.get('day_of_week')
        if day and day.isdigit():
            queryset = queryset.filter(day_of_week=int(day))
        return queryset
