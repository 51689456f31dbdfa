from rest_framework import permissions


def can_manage_lesson(user, lesson) -> bool:
    """A lesson's own teacher, or any staff user, may run its attendance."""
    if not user or not user.is_authenticated:
        return False
    if user.is_staff or user.is_superuser:
        return True
    return lesson.teacher_id == user.pk


class IsSessionTeacherOrStaff(permissions.BasePermission):
    """Object-level check for attendance sessions.

    Reads and writes are limited to the teacher the session was captured for
    and to staff users. Listing is filtered in the viewset instead.
    """

    def has_object_permission(self, request, view, obj):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        if user.is_staff or user.is_superuser:
            return True
        return obj.teacher_id == user.pk
