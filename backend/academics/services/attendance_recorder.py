"""Record per-student attendance against a session.

Every call runs in one transaction that holds a row lock on the session, so
a concurrent `finalize_session` either waits for the batch to commit or is
seen by it. Individual records use optimistic concurrency: a writer must echo
the `row_version` it last read, and any mismatch aborts the whole batch.
"""
import logging
import uuid
from dataclasses import dataclass
from typing import Iterable, Optional

from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.utils import timezone

from academics.models import AttendanceRecord, AttendanceSession
from .exceptions import ConcurrencyConflict
from .guards import ensure_session_writable, ensure_student_in_group, get_session_or_404, validate_mark

logger = logging.getLogger(__name__)


@dataclass
class StudentMark:
    student_id: int
    status: str = AttendanceRecord.Status.PRESENT
    late_minutes: Optional[int] = None
    note: Optional[str] = None
    row_version: Optional[uuid.UUID] = None


def _as_token(value):
    if value is None or value == '':
        return None
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        raise ValidationError({'row_version': f'Malformed concurrency token {value!r}.'})


def _upsert_record(session: AttendanceSession, mark: StudentMark, marked_by) -> AttendanceRecord:
    late_minutes = validate_mark(mark)
    ensure_student_in_group(session, mark.student_id)
    token = _as_token(mark.row_version)
    now = timezone.now()
    marker_id = getattr(marked_by, 'pk', None)

    existing = AttendanceRecord.objects.filter(session=session, student_id=mark.student_id).first()
    if existing is None:
        if token is not None:
            # the record the caller read no longer exists
            raise ConcurrencyConflict()
        try:
            with transaction.atomic():
                return AttendanceRecord.objects.create(
                    session=session,
                    student_id=mark.student_id,
                    status=mark.status,
                    late_minutes=late_minutes,
                    note=mark.note,
                    marked_at=now,
                    marked_by_id=marker_id,
                    row_version=uuid.uuid4(),
                )
        except IntegrityError:
            # another writer created the record first
            raise ConcurrencyConflict()

    if token is None or token != existing.row_version:
        raise ConcurrencyConflict()

    new_version = uuid.uuid4()
    updated = (
        AttendanceRecord.objects
        .filter(pk=existing.pk, row_version=token)
        .update(
            status=mark.status,
            late_minutes=late_minutes,
            note=mark.note,
            marked_at=now,
            marked_by_id=marker_id,
            row_version=new_version,
        )
    )
    if updated == 0:
        raise ConcurrencyConflict()

    existing.status = mark.status
    existing.late_minutes = late_minutes
    existing.note = mark.note
    existing.marked_at = now
    existing.marked_by_id = marker_id
    existing.row_version = new_version
    return existing


def mark_one(session_id, mark: StudentMark, marked_by) -> AttendanceRecord:
    with transaction.atomic():
        session = get_session_or_404(session_id, for_update=True)
        ensure_session_writable(session)
        record = _upsert_record(session, mark, marked_by)
    logger.info(
        'Marked student=%s status=%s session=%s by=%s',
        mark.student_id, mark.status, session.pk, getattr(marked_by, 'pk', None),
    )
    return record


def mark_bulk(session_id, marks: Iterable[StudentMark], marked_by):
    """Apply a whole roster in one transaction: all marks are saved or none are."""
    marks = list(marks)
    with transaction.atomic():
        session = get_session_or_404(session_id, for_update=True)
        ensure_session_writable(session)

        if not marks:
            raise ValidationError({'records': 'At least one attendance mark is required.'})
        seen = set()
        for mark in marks:
            if mark.student_id in seen:
                raise ValidationError({'records': f'Student {mark.student_id} appears more than once.'})
            seen.add(mark.student_id)

        for mark in marks:
            _upsert_record(session, mark, marked_by)

    logger.info(
        'Bulk marked %d students session=%s by=%s',
        len(marks), session_id, getattr(marked_by, 'pk', None),
    )
