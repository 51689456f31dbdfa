from datetime import time

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.test import TestCase
from rest_framework.test import APITestCase

from academics.models import Group
from timetable.models import Lesson


class LessonValidationTests(TestCase):
    def setUp(self):
        self.teacher = get_user_model().objects.create_user(username='teacher')
        self.group = Group.objects.create(name='Grade 6', code='6')

    def _lesson(self, **kwargs):
        values = {
            'title': 'Physics', 'day_of_week': 3, 'start_time': time(10, 0), 'end_time': time(10, 45),
            'group': self.group, 'teacher': self.teacher,
        }
        values.update(kwargs)
        return Lesson(**values)

    def test_valid_lesson(self):
        lesson = self._lesson()
        lesson.full_clean()
        lesson.save()
        self.assertEqual(lesson.get_day_of_week_display(), 'Wednesday')

    def test_end_before_start_is_malformed(self):
        with self.assertRaises(ValidationError) as cm:
            self._lesson(end_time=time(9, 0)).full_clean()
        self.assertIn('end_time', cm.exception.message_dict)

    def test_day_out_of_range(self):
        with self.assertRaises(ValidationError) as cm:
            self._lesson(day_of_week=8).full_clean()
        self.assertIn('day_of_week', cm.exception.message_dict)


class LessonApiTests(APITestCase):
    def setUp(self):
        User = get_user_model()
        self.teacher = User.objects.create_user(username='teacher')
        self.other = User.objects.create_user(username='other')
        self.admin = User.objects.create_user(username='admin', is_staff=True)
        group = Group.objects.create(name='Grade 6', code='6')
        self.mine = Lesson.objects.create(title='Physics', day_of_week=1, start_time=time(9, 0), end_time=time(10, 0), group=group, teacher=self.teacher)
        self.theirs = Lesson.objects.create(title='History', day_of_week=2, start_time=time(9, 0), end_time=time(10, 0), group=group, teacher=self.other)
        Lesson.objects.create(title='Retired', day_of_week=1, start_time=time(11, 0), end_time=time(12, 0), group=group, teacher=self.teacher, is_active=False)

    def test_teacher_sees_own_active_lessons(self):
        self.client.force_authenticate(self.teacher)
        resp = self.client.get('/api/timetable/lessons/')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual([row['id'] for row in resp.data], [self.mine.pk])
        self.assertEqual(resp.data[0]['day_name'], 'Monday')

    def test_staff_filters_by_day(self):
        self.client.force_authenticate(self.admin)
        resp = self.client.get('/api/timetable/lessons/', {'day_of_week': 2})
        self.assertEqual([row['id'] for row in resp.data], [self.theirs.pk])
