"""Calendar arithmetic for weekly lessons.

Days of the week follow ISO numbering throughout (Monday=1 .. Sunday=7), the
same numbering stored on `timetable.Lesson.day_of_week`.
"""
from datetime import date, datetime, time, timedelta

from django.utils import timezone


def next_occurrence(day_of_week: int, start_time: time, now: datetime) -> datetime:
    """Return the next meeting of a lesson held on `day_of_week` at `start_time`.

    When `now` already falls on the lesson's weekday the result is today at
    `start_time`, even if that time has passed, so a session can still be
    opened late in the day. The result carries `now`'s tzinfo.
    """
    today_iso = now.isoweekday()
    if today_iso == day_of_week:
        return datetime.combine(now.date(), start_time, tzinfo=now.tzinfo)

    delta = (day_of_week - today_iso + 7) % 7
    if delta == 0:
        delta = 7
    return datetime.combine(now.date() + timedelta(days=delta), start_time, tzinfo=now.tzinfo)


def local_date(value) -> date:
    """Coerce a date or datetime to a calendar date in the current timezone."""
    if isinstance(value, datetime):
        if timezone.is_aware(value):
            return timezone.localtime(value).date()
        return value.date()
    return value


def combine(day: date, at: time) -> datetime:
    """Aware datetime for `day` at wall-clock time `at` in the current timezone."""
    return timezone.make_aware(datetime.combine(day, at))


def day_bounds(day: date):
    """Half-open [start, end) window covering one calendar day."""
    start = combine(day, time.min)
    return start, combine(day + timedelta(days=1), time.min)


def iso_week_bounds(day: date):
    """Half-open window from the Monday of `day`'s ISO week to the next Monday.

    Uses `isoweekday()` so a Sunday belongs to the week that started on the
    preceding Monday.
    """
    monday = day - timedelta(days=day.isoweekday() - 1)
    return combine(monday, time.min), combine(monday + timedelta(days=7), time.min)
