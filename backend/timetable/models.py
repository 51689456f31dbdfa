from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models

DAYS_OF_WEEK = (
    (1, 'Monday'),
    (2, 'Tuesday'),
    (3, 'Wednesday'),
    (4, 'Thursday'),
    (5, 'Friday'),
    (6, 'Saturday'),
    (7, 'Sunday'),
)


class Lesson(models.Model):
    """A weekly-recurring class: one group, one teacher, one day and time window.

    Lessons are templates. Concrete dated meetings are `academics.AttendanceSession`
    rows created from them on demand; editing a lesson never rewrites the
    sessions it already produced.
    """
    title = models.CharField(max_length=100)
    day_of_week = models.PositiveSmallIntegerField(choices=DAYS_OF_WEEK)
    start_time = models.TimeField()
    end_time = models.TimeField()
    group = models.ForeignKey('academics.Group', on_delete=models.CASCADE, related_name='lessons')
    teacher = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name='lessons')
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = 'Lesson'
        verbose_name_plural = 'Lessons'
        ordering = ('day_of_week', 'start_time', 'title')

    def __str__(self):
        return f"{self.title} | {self.group} @ {self.get_day_of_week_display()} {self.start_time:%H:%M}"

    def clean(self):
        errors = {}
        if self.day_of_week is not None and not 1 <= self.day_of_week <= 7:
            errors['day_of_week'] = 'Day of week must be between 1 (Monday) and 7 (Sunday).'
        if self.start_time is not None and self.end_time is not None and self.end_time <= self.start_time:
            errors['end_time'] = 'End time must be after start time.'
        if errors:
            raise ValidationError(errors)
