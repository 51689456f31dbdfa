import uuid

from django.conf import settings
from django.db import models
from django.utils import timezone


class Group(models.Model):
    """A class group (cohort). Every student belongs to exactly one group."""
    name = models.CharField(max_length=128)
    code = models.CharField(max_length=32, unique=True)
    description = models.TextField(blank=True)

    class Meta:
        verbose_name = 'Group'
        verbose_name_plural = 'Groups'
        ordering = ('name',)

    def __str__(self):
        return f"{self.name} ({self.code})"


class Student(models.Model):
    group = models.ForeignKey(Group, on_delete=models.PROTECT, related_name='students')
    first_name = models.CharField(max_length=64)
    last_name = models.CharField(max_length=64)
    student_number = models.CharField(max_length=32, unique=True)
    phone = models.CharField(max_length=32, blank=True, null=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = 'Student'
        verbose_name_plural = 'Students'
        ordering = ('last_name', 'first_name')

    def __str__(self):
        return f"{self.student_number} - {self.full_name}"

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}".strip()


class AttendanceSession(models.Model):
    """One concrete, dated meeting of a weekly `timetable.Lesson`.

    - lesson: the template this session was opened from
    - group / teacher: copied from the lesson when the session is created so
      history survives later reassignment of the lesson
    - scheduled_at: date and time of the meeting
    - status: OPEN sessions accept attendance; FINALIZED sessions are read-only
    - end_time: stamped when the session is finalized
    """

    class Status(models.TextChoices):
        OPEN = 'OPEN', 'Open'
        FINALIZED = 'FINALIZED', 'Finalized'

    lesson = models.ForeignKey('timetable.Lesson', on_delete=models.PROTECT, related_name='attendance_sessions')
    group = models.ForeignKey(Group, on_delete=models.PROTECT, related_name='attendance_sessions')
    teacher = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name='attendance_sessions')
    scheduled_at = models.DateTimeField()
    status = models.CharField(max_length=16, choices=Status.choices, default=Status.OPEN)
    opened_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='+')
    created_at = models.DateTimeField(default=timezone.now)
    end_time = models.DateTimeField(null=True, blank=True)

    class Meta:
        verbose_name = 'Attendance Session'
        verbose_name_plural = 'Attendance Sessions'
        indexes = [
            models.Index(fields=['lesson', 'scheduled_at'], name='session_lesson_scheduled_idx'),
        ]

    def __str__(self):
        return f"AttendanceSession {self.lesson_id} @ {self.scheduled_at:%Y-%m-%d %H:%M} [{self.status}]"

    @property
    def is_finalized(self):
        return self.status == self.Status.FINALIZED


class AttendanceRecord(models.Model):
    """A single student's outcome in one session.

    `row_version` is rotated on every write; writers must echo the value they
    last read so lost updates are detected instead of silently overwritten.
    """

    class Status(models.TextChoices):
        PRESENT = 'PRESENT', 'Present'
        ABSENT = 'ABSENT', 'Absent'
        LATE = 'LATE', 'Late'
        EXCUSED = 'EXCUSED', 'Excused'

    session = models.ForeignKey(AttendanceSession, on_delete=models.CASCADE, related_name='records')
    student = models.ForeignKey(Student, on_delete=models.CASCADE, related_name='attendance_records')
    status = models.CharField(max_length=16, choices=Status.choices, default=Status.PRESENT)
    late_minutes = models.PositiveIntegerField(null=True, blank=True)
    note = models.CharField(max_length=500, blank=True, null=True)
    marked_at = models.DateTimeField(default=timezone.now)
    marked_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='+')
    row_version = models.UUIDField(default=uuid.uuid4)

    class Meta:
        verbose_name = 'Attendance Record'
        verbose_name_plural = 'Attendance Records'
        constraints = [
            models.UniqueConstraint(fields=['session', 'student'], name='unique_record_per_session_student'),
        ]

    def __str__(self):
        return f"{self.student_id} -> {self.get_status_display()} @ session {self.session_id}"
