"""Session state transitions: OPEN -> FINALIZED, and re-anchoring to a new week."""
import logging

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from academics.models import AttendanceSession
from timetable.models import Lesson
from . import occurrence
from .exceptions import AlreadyFinalized, NotFound
from .guards import get_session_or_404
from .session_resolver import find_weekly_session

logger = logging.getLogger(__name__)


def finalize_session(session_id):
    """Close a session for further attendance writes.

    The transition is a single conditional UPDATE keyed on the OPEN status, so
    two racing finalize calls (or a finalize racing a bulk mark holding the
    session row lock) cannot both succeed. A second call is rejected with
    `AlreadyFinalized` and leaves the first `end_time` untouched.
    """
    now = timezone.now()
    updated = (
        AttendanceSession.objects
        .filter(pk=session_id, status=AttendanceSession.Status.OPEN)
        .update(status=AttendanceSession.Status.FINALIZED, end_time=now)
    )
    if updated == 0:
        if not AttendanceSession.objects.filter(pk=session_id).exists():
            raise NotFound(f'Attendance session {session_id} not found.')
        raise AlreadyFinalized()
    logger.info('Finalized attendance session id=%s at %s', session_id, now.isoformat())


@transaction.atomic
def reanchor_session_to_week(session_id, new_date) -> AttendanceSession:
    """Reuse an existing session for another week.

    Moves `scheduled_at` to `new_date` at the lesson's start time, reopens the
    session and deletes every attendance record attached to it. Records of the
    previous week are lost unless archived beforehand.
    """
    session = get_session_or_404(session_id, for_update=True)
    lesson = Lesson.objects.filter(pk=session.lesson_id).first()
    if lesson is None:
        raise NotFound(f'Lesson {session.lesson_id} not found.')

    day = occurrence.local_date(new_date)
    other = find_weekly_session(lesson.pk, day, exclude_id=session.pk)
    if other is not None:
        raise ValidationError(
            {'date': f'Lesson {lesson.pk} already has open session {other.pk} in that week.'}
        )

    session.scheduled_at = occurrence.combine(day, lesson.start_time)
    session.status = AttendanceSession.Status.OPEN
    session.end_time = None
    session.save(update_fields=['scheduled_at', 'status', 'end_time'])

    deleted, _ = session.records.all().delete()
    logger.warning(
        'Re-anchored attendance session id=%s to %s; deleted %d attendance records',
        session.pk, session.scheduled_at.isoformat(), deleted,
    )
    return session
