"""Error kinds raised by the attendance services.

Each error is surfaced to the caller as-is; nothing in the services retries.
`StateConflict` subclasses Django's `PermissionDenied` so it reads as an
authorization refusal ("this session is closed"), distinct from
`django.core.exceptions.ValidationError` which signals malformed input.
"""
from django.core.exceptions import ObjectDoesNotExist, PermissionDenied


class AttendanceError(Exception):
    default_message = 'Attendance operation failed.'
    code = 'attendance_error'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFound(ObjectDoesNotExist):
    code = 'not_found'

    def __init__(self, message='Not found.'):
        self.message = message
        super().__init__(message)


class StateConflict(PermissionDenied):
    code = 'session_finalized'

    def __init__(self, message='Session is finalized; attendance can no longer be changed.'):
        self.message = message
        super().__init__(message)


class ConcurrencyConflict(AttendanceError):
    default_message = 'This record was changed by someone else. Reload and try again.'
    code = 'concurrency_conflict'


class AlreadyFinalized(AttendanceError):
    default_message = 'Session is already finalized.'
    code = 'already_finalized'
