"""Preconditions shared by every attendance write path.

Single marks, bulk marks and re-anchoring all go through these helpers so the
same request is accepted or refused the same way regardless of entry point.
"""
from django.core.exceptions import ValidationError

from academics.models import AttendanceRecord, AttendanceSession, Student
from .exceptions import NotFound, StateConflict


def get_session_or_404(session_id, for_update=False) -> AttendanceSession:
    qs = AttendanceSession.objects.all()
    if for_update:
        qs = qs.select_for_update()
    session = qs.filter(pk=session_id).first()
    if session is None:
        raise NotFound(f'Attendance session {session_id} not found.')
    return session


def ensure_session_writable(session: AttendanceSession):
    if session.is_finalized:
        raise StateConflict()


def ensure_student_in_group(session: AttendanceSession, student_id):
    belongs = Student.objects.filter(pk=student_id, group_id=session.group_id, is_active=True).exists()
    if not belongs:
        raise ValidationError(
            {'student_id': f'Student {student_id} is not an active member of this session\'s group.'}
        )


def validate_mark(mark):
    """Check a single mark's fields; returns the normalised late_minutes."""
    if mark.status not in AttendanceRecord.Status.values:
        raise ValidationError({'status': f'Unknown attendance status {mark.status!r}.'})

    late_minutes = mark.late_minutes
    if late_minutes is not None and late_minutes < 0:
        raise ValidationError({'late_minutes': 'Late minutes cannot be negative.'})
    if mark.status != AttendanceRecord.Status.LATE:
        # only meaningful for LATE
        late_minutes = None

    if mark.note is not None and len(mark.note) > 500:
        raise ValidationError({'note': 'Note may be at most 500 characters.'})
    return late_minutes
