from .exceptions import AlreadyFinalized, AttendanceError, ConcurrencyConflict, NotFound, StateConflict
from .occurrence import next_occurrence
from .session_resolver import open_session, open_sessions_for_teacher, resolve_session
from .session_lifecycle import finalize_session, reanchor_session_to_week
from .attendance_recorder import StudentMark, mark_bulk, mark_one
from .roster import active_students, session_roster

__all__ = [
    'AlreadyFinalized',
    'AttendanceError',
    'ConcurrencyConflict',
    'NotFound',
    'StateConflict',
    'next_occurrence',
    'open_session',
    'open_sessions_for_teacher',
    'resolve_session',
    'finalize_session',
    'reanchor_session_to_week',
    'StudentMark',
    'mark_bulk',
    'mark_one',
    'active_students',
    'session_roster',
]
