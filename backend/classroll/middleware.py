import logging
import time
from typing import Callable

from django.conf import settings
from django.http import HttpRequest, HttpResponse

logger = logging.getLogger('django.request')


def _username(request):
    user = getattr(request, 'user', None)
    if user is None or not getattr(user, 'is_authenticated', False):
        return 'anonymous'
    return user.get_username()


class SlowRequestLoggingMiddleware:
    """Warn about API calls that take longer than ``SLOW_REQUEST_LOG_MS``.

    Attendance writes hold a row lock on the session for the whole batch, so
    a slow bulk-mark is usually the first sign of lock contention.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]):
        self.get_response = get_response
        self.enabled = bool(getattr(settings, 'SLOW_REQUEST_LOG_ENABLED', True))
        self.threshold_ms = int(getattr(settings, 'SLOW_REQUEST_LOG_MS', 1200))

    def __call__(self, request: HttpRequest):
        if not self.enabled:
            return self.get_response(request)

        started = time.perf_counter()
        response = self.get_response(request)
        elapsed_ms = (time.perf_counter() - started) * 1000.0

        if elapsed_ms >= self.threshold_ms:
            match = getattr(request, 'resolver_match', None)
            logger.warning(
                'SLOW_REQUEST method=%s path=%s view=%s status=%s duration_ms=%.2f user=%s',
                request.method,
                request.path,
                getattr(match, 'view_name', None),
                getattr(response, 'status_code', 'NA'),
                elapsed_ms,
                _username(request),
            )
        return response
