import unittest

from api_case import ApiTestCase


class RoleGuardTests(ApiTestCase):
    def test_admin_only_routes_reject_other_roles(self):
        _, teacher = self.make_user('teacher')
        _, student = self.make_user('student')
        _, admin = self.make_user('admin')

        for headers in (teacher, student):
            res = self.client.get('/api/users', headers=headers)
            self.assertEqual(res.status_code, 403)
            self.assertEqual(res.json()['detail'], 'Insufficient permissions')
            self.assertEqual(self.client.get('/api/fees', headers=headers).status_code, 403)
            self.assertEqual(self.client.get('/api/analytics/dashboard', headers=headers).status_code, 403)

        self.assertEqual(self.client.get('/api/users', headers=admin).status_code, 200)

    def test_anonymous_request_is_401_before_role_check(self):
        res = self.client.post('/api/classes', json={'name': 'Grade 1', 'subjects': ['Maths']})
        self.assertEqual(res.status_code, 401)
        self.assertEqual(res.json()['detail'], 'Access token required')

    def test_student_me_requires_student_role(self):
        _, teacher = self.make_user('teacher')
        self.assertEqual(self.client.get('/api/students/me', headers=teacher).status_code, 403)

        _, student = self.make_user('student')
        res = self.client.get('/api/students/me', headers=student)
        self.assertEqual(res.status_code, 404)
        self.assertEqual(res.json()['detail'], 'Student record not found')

    def test_users_listing_hides_password_hash_and_filters_by_role(self):
        _, admin = self.make_user('admin')
        self.make_user('teacher')
        self.make_user('teacher')
        res = self.client.get('/api/users/role/teacher', headers=admin)
        self.assertEqual(res.status_code, 200)
        self.assertEqual(len(res.json()), 2)
        for row in res.json():
            self.assertEqual(row['role'], 'teacher')
            self.assertNotIn('passwordHash', row)

        bad = self.client.get('/api/users/role/janitor', headers=admin)
        self.assertEqual(bad.status_code, 400)
        self.assertEqual(bad.json()['field'], 'role')


if __name__ == '__main__':
    unittest.main()
