from datetime import time

from rest_framework.test import APITestCase

from academics.models import AttendanceRecord, AttendanceSession
from timetable.models import Lesson
from .fixtures import AttendanceFixtureMixin


class AttendanceSessionApiTests(AttendanceFixtureMixin, APITestCase):
    base = '/api/academics/attendance-sessions/'

    def _open(self, date='2025-03-10'):
        return self.client.post(f'{self.base}open/', {'lesson_id': self.lesson.pk, 'date': date}, format='json')

    def test_requires_authentication(self):
        resp = self.client.get(self.base)
        self.assertIn(resp.status_code, (401, 403))

    def test_open_reuses_weekly_session(self):
        self.client.force_authenticate(self.teacher)
        first = self._open('2025-03-10')
        second = self._open('2025-03-13')

        self.assertEqual(first.status_code, 200)
        self.assertEqual(first.data['id'], second.data['id'])
        self.assertEqual(first.data['status'], 'OPEN')
        self.assertEqual(AttendanceSession.objects.count(), 1)

    def test_other_teacher_cannot_open(self):
        self.client.force_authenticate(self.other_teacher)
        resp = self._open()
        self.assertEqual(resp.status_code, 403)
        self.assertFalse(AttendanceSession.objects.exists())

    def test_open_unknown_lesson(self):
        self.client.force_authenticate(self.admin)
        resp = self.client.post(f'{self.base}open/', {'lesson_id': 999999}, format='json')
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.data['code'], 'not_found')

    def test_mark_finalize_and_refuse_further_writes(self):
        self.client.force_authenticate(self.teacher)
        session_id = self._open().data['id']

        resp = self.client.post(f'{self.base}{session_id}/bulk-mark/', {'records': [
            {'student_id': self.ayse.pk, 'status': 'ABSENT'},
            {'student_id': self.burak.pk, 'status': 'LATE', 'late_minutes': 4},
        ]}, format='json')
        self.assertEqual(resp.status_code, 200)
        rows = {row['student_id']: row for row in resp.data['students']}
        self.assertEqual(rows[self.ayse.pk]['status'], 'ABSENT')
        self.assertEqual(rows[self.can.pk]['status'], 'PRESENT')

        resp = self.client.post(f'{self.base}{session_id}/finalize/')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data['status'], 'FINALIZED')
        self.assertIsNotNone(resp.data['end_time'])

        resp = self.client.post(f'{self.base}{session_id}/finalize/')
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(resp.data['code'], 'already_finalized')

        resp = self.client.post(f'{self.base}{session_id}/mark/', {'student_id': self.can.pk, 'status': 'ABSENT'}, format='json')
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(resp.data['code'], 'session_finalized')
        self.assertFalse(AttendanceRecord.objects.filter(student=self.can).exists())

    def test_stale_token_returns_conflict(self):
        self.client.force_authenticate(self.teacher)
        session_id = self._open().data['id']
        url = f'{self.base}{session_id}/mark/'

        created = self.client.post(url, {'student_id': self.ayse.pk, 'status': 'ABSENT'}, format='json')
        token = created.data['row_version']
        updated = self.client.post(url, {'student_id': self.ayse.pk, 'status': 'PRESENT', 'row_version': token}, format='json')
        self.assertEqual(updated.status_code, 200)
        self.assertNotEqual(updated.data['row_version'], token)

        stale = self.client.post(url, {'student_id': self.ayse.pk, 'status': 'EXCUSED', 'row_version': token}, format='json')
        self.assertEqual(stale.status_code, 409)
        self.assertEqual(stale.data['code'], 'concurrency_conflict')
        self.assertEqual(AttendanceRecord.objects.get(student=self.ayse).status, 'PRESENT')

    def test_invalid_student_rejects_batch(self):
        self.client.force_authenticate(self.teacher)
        session_id = self._open().data['id']
        resp = self.client.post(f'{self.base}{session_id}/bulk-mark/', {'records': [
            {'student_id': self.ayse.pk, 'status': 'ABSENT'},
            {'student_id': self.outsider.pk, 'status': 'ABSENT'},
        ]}, format='json')
        self.assertEqual(resp.status_code, 400)
        self.assertIn('student_id', resp.data['errors'])
        self.assertFalse(AttendanceRecord.objects.exists())

    def test_empty_batch_is_invalid(self):
        self.client.force_authenticate(self.teacher)
        session_id = self._open().data['id']
        resp = self.client.post(f'{self.base}{session_id}/bulk-mark/', {'records': []}, format='json')
        self.assertEqual(resp.status_code, 400)

    def test_other_teacher_cannot_touch_session(self):
        session = self.make_session(self.MONDAY)
        self.client.force_authenticate(self.other_teacher)
        resp = self.client.get(f'{self.base}{session.pk}/roster/')
        self.assertEqual(resp.status_code, 403)

    def test_list_shows_only_own_open_sessions(self):
        own = self.make_session(self.MONDAY)
        self.make_session(self.MONDAY.replace(day=3), status=AttendanceSession.Status.FINALIZED)
        self.client.force_authenticate(self.teacher)
        resp = self.client.get(self.base)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual([row['id'] for row in resp.data], [own.pk])

        self.client.force_authenticate(self.other_teacher)
        self.assertEqual(self.client.get(self.base).data, [])

    def test_list_filters_by_lesson_title(self):
        maths = self.make_session(self.MONDAY)
        art = Lesson.objects.create(
            title='Art',
            day_of_week=2,
            start_time=time(10, 0),
            end_time=time(10, 45),
            group=self.group,
            teacher=self.teacher,
        )
        self.make_session(self.MONDAY.replace(day=11), at=time(10, 0), lesson=art)

        self.client.force_authenticate(self.admin)
        self.assertEqual(len(self.client.get(self.base).data), 2)
        resp = self.client.get(self.base, {'lesson_title': ' math '})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual([row['id'] for row in resp.data], [maths.pk])

    def test_reanchor_is_staff_only(self):
        session = self.make_session(self.MONDAY)
        self.client.force_authenticate(self.teacher)
        resp = self.client.post(f'{self.base}{session.pk}/reanchor/', {'date': '2025-03-17'}, format='json')
        self.assertEqual(resp.status_code, 403)

        self.client.force_authenticate(self.admin)
        resp = self.client.post(f'{self.base}{session.pk}/reanchor/', {'date': '2025-03-17'}, format='json')
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.data['scheduled_at'].startswith('2025-03-17'))

    def test_missing_session_is_404(self):
        self.client.force_authenticate(self.admin)
        resp = self.client.get(f'{self.base}424242/roster/')
        self.assertEqual(resp.status_code, 404)
