from datetime import date, time

from django.contrib.auth import get_user_model

from academics.models import AttendanceSession, Group, Student
from academics.services import occurrence
from timetable.models import Lesson


class AttendanceFixtureMixin:
    """Group with three students and a Monday 09:00 lesson."""

    # 2025-03-10 is a Monday
    MONDAY = date(2025, 3, 10)

    def setUp(self):
        User = get_user_model()
        self.teacher = User.objects.create_user(username='teacher', password='pw')
        self.other_teacher = User.objects.create_user(username='other', password='pw')
        self.admin = User.objects.create_user(username='admin', password='pw', is_staff=True)

        self.group = Group.objects.create(name='Grade 5A', code='5A')
        self.other_group = Group.objects.create(name='Grade 5B', code='5B')

        self.ayse = Student.objects.create(group=self.group, first_name='Ayse', last_name='Demir', student_number='1001')
        self.burak = Student.objects.create(group=self.group, first_name='Burak', last_name='Arslan', student_number='1002')
        self.can = Student.objects.create(group=self.group, first_name='Can', last_name='Yilmaz', student_number='1003')
        self.outsider = Student.objects.create(group=self.other_group, first_name='Deniz', last_name='Kaya', student_number='2001')

        self.lesson = Lesson.objects.create(
            title='Mathematics',
            day_of_week=1,
            start_time=time(9, 0),
            end_time=time(9, 45),
            group=self.group,
            teacher=self.teacher,
        )

    def make_session(self, day, status=AttendanceSession.Status.OPEN, at=time(9, 0), lesson=None):
        lesson = lesson or self.lesson
        return AttendanceSession.objects.create(
            lesson=lesson,
            group=lesson.group,
            teacher=lesson.teacher,
            scheduled_at=occurrence.combine(day, at),
            status=status,
        )
