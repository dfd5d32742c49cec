import unittest

from freezegun import freeze_time

from api_case import ApiTestCase
from school_admin.models import User


def _teacher_payload(**overrides) -> dict:
    payload = {
        'username': 'kavya',
        'password': 'Teacher@123',
        'name': 'Kavya Pillai',
        'email': 'kavya@example.com',
        'salary': 40000,
        'panNumber': 'ABCDE1234F',
        'aadhaarNumber': '123412341234',
        'qualification': 'M.A English',
        'subjectSpecialization': ['English', 'History'],
        'joinDate': '2025-06-01',
        'designation': 'Teacher',
        'employeeId': 'EMP-101',
    }
    payload.update(overrides)
    return payload


class TeachersApiTests(ApiTestCase):
    def setUp(self):
        super().setUp()
        _, self.admin = self.make_user('admin')

    def _user_count(self) -> int:
        db = self._session_factory()
        try:
            return db.query(User).count()
        finally:
            db.close()

    def test_create_teacher_returns_user_with_profile_and_can_log_in(self):
        res = self.client.post('/api/teachers', headers=self.admin, json=_teacher_payload())
        self.assertEqual(res.status_code, 201, res.text)
        body = res.json()
        self.assertEqual(body['role'], 'teacher')
        self.assertEqual(body['profile']['employeeId'], 'EMP-101')
        self.assertEqual(body['profile']['salaryHistory'], [])

        login = self.client.post('/api/auth/login', json={'username': 'kavya', 'password': 'Teacher@123'})
        self.assertEqual(login.status_code, 200)

        listed = self.client.get('/api/teachers', headers=self.admin).json()
        self.assertEqual([row['username'] for row in listed], ['kavya'])
        self.assertEqual(listed[0]['profile']['subjectSpecialization'], ['English', 'History'])

    def test_duplicate_identity_or_employee_id_leaves_no_orphan_user(self):
        self.client.post('/api/teachers', headers=self.admin, json=_teacher_payload())
        before = self._user_count()

        same_email = self.client.post('/api/teachers', headers=self.admin, json=_teacher_payload(username='kavya2'))
        self.assertEqual(same_email.status_code, 409)
        same_employee = self.client.post(
            '/api/teachers',
            headers=self.admin,
            json=_teacher_payload(username='kavya3', email='kavya3@example.com'),
        )
        self.assertEqual(same_employee.status_code, 409)
        self.assertEqual(self._user_count(), before)

    def test_blank_subject_specialization_is_rejected(self):
        res = self.client.post('/api/teachers', headers=self.admin, json=_teacher_payload(subjectSpecialization=['  ']))
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.json()['field'], 'subjectSpecialization')
        self.assertEqual(self._user_count(), 1)

        user_id = self.client.post('/api/teachers', headers=self.admin, json=_teacher_payload()).json()['id']
        patched = self.client.patch(
            f'/api/teachers/{user_id}', headers=self.admin, json={'subjectSpecialization': ['', ' ']}
        )
        self.assertEqual(patched.status_code, 400)
        self.assertEqual(patched.json()['field'], 'subjectSpecialization')

        cleaned = self.client.patch(
            f'/api/teachers/{user_id}', headers=self.admin, json={'subjectSpecialization': [' Civics ', 'Civics']}
        )
        self.assertEqual(cleaned.json()['subjectSpecialization'], ['Civics'])

    def test_teachers_without_profile_are_listed_with_null_profile(self):
        self.make_user('teacher')
        listed = self.client.get('/api/teachers', headers=self.admin).json()
        self.assertEqual(len(listed), 1)
        self.assertIsNone(listed[0]['profile'])

    def test_update_profile(self):
        user_id = self.client.post('/api/teachers', headers=self.admin, json=_teacher_payload()).json()['id']
        res = self.client.patch(
            f'/api/teachers/{user_id}',
            headers=self.admin,
            json={'salary': 45000, 'designation': 'Senior Teacher'},
        )
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json()['salary'], 45000)
        self.assertEqual(res.json()['designation'], 'Senior Teacher')
        self.assertEqual(res.json()['qualification'], 'M.A English')

        bare_teacher, _ = self.make_user('teacher')
        missing = self.client.patch(f'/api/teachers/{bare_teacher}', headers=self.admin, json={'salary': 1})
        self.assertEqual(missing.status_code, 404)

    def test_salary_history_is_append_only_and_ordered(self):
        user_id = self.client.post('/api/teachers', headers=self.admin, json=_teacher_payload()).json()['id']
        with freeze_time('2026-04-30 17:00:00'):
            first = self.client.post(
                f'/api/teachers/{user_id}/pay-salary', headers=self.admin, json={'month': 'April 2026', 'amount': 40000}
            )
        with freeze_time('2026-05-02 11:00:00'):
            self.client.post(
                f'/api/teachers/{user_id}/pay-salary', headers=self.admin, json={'month': 'April 2026', 'amount': 500}
            )
        self.assertEqual(first.status_code, 200)
        self.assertEqual(len(first.json()['salaryHistory']), 1)

        history = self.client.get(f'/api/teachers/{user_id}/salary-history', headers=self.admin).json()
        self.assertEqual([(row['month'], row['amount']) for row in history], [('April 2026', 40000), ('April 2026', 500)])
        self.assertTrue(history[0]['paidAt'].startswith('2026-04-30T17:00:00'))

    def test_pay_salary_validation(self):
        user_id = self.client.post('/api/teachers', headers=self.admin, json=_teacher_payload()).json()['id']
        bad = self.client.post(f'/api/teachers/{user_id}/pay-salary', headers=self.admin, json={'month': '', 'amount': -5})
        self.assertEqual(bad.status_code, 400)
        missing = self.client.post('/api/teachers/999/pay-salary', headers=self.admin, json={'month': 'May', 'amount': 5})
        self.assertEqual(missing.status_code, 404)

    def test_referenced_teacher_cannot_be_deleted(self):
        user_id = self.client.post('/api/teachers', headers=self.admin, json=_teacher_payload()).json()['id']
        res = self.client.delete(f'/api/users/{user_id}', headers=self.admin)
        self.assertEqual(res.status_code, 409)
        self.assertIn('teacher profile', res.json()['detail'])


if __name__ == '__main__':
    unittest.main()
