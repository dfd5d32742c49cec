import unittest
from datetime import datetime, timedelta, timezone

from freezegun import freeze_time

from api_case import ApiTestCase
from school_admin.core.security import create_access_token, encode_jwt


class _FixedClock:
    def __init__(self, moment: datetime):
        self._moment = moment

    def now(self) -> datetime:
        return self._moment


class AuthApiTests(ApiTestCase):
    def _register(self, **overrides):
        payload = {
            'username': 'asha',
            'password': 'Password@123',
            'role': 'teacher',
            'name': 'Asha Menon',
            'email': 'asha@example.com',
        }
        payload.update(overrides)
        return self.client.post('/api/auth/register', json=payload)

    def test_register_then_login_returns_token_with_same_role(self):
        created = self._register()
        self.assertEqual(created.status_code, 201)
        body = created.json()
        self.assertTrue(body['token'])
        self.assertEqual(body['user']['role'], 'teacher')
        self.assertNotIn('passwordHash', body['user'])
        self.assertNotIn('password', body['user'])

        login = self.client.post('/api/auth/login', json={'username': 'asha', 'password': 'Password@123'})
        self.assertEqual(login.status_code, 200)
        self.assertEqual(login.json()['user']['role'], 'teacher')

        me = self.client.get('/api/auth/me', headers={'Authorization': f"Bearer {login.json()['token']}"})
        self.assertEqual(me.status_code, 200)
        self.assertEqual(me.json()['username'], 'asha')
        self.assertEqual(me.json()['email'], 'asha@example.com')

    def test_duplicate_email_and_username_conflict(self):
        self.assertEqual(self._register().status_code, 201)

        same_email = self._register(username='asha2')
        self.assertEqual(same_email.status_code, 409)
        self.assertEqual(same_email.json()['detail'], 'Email already in use')

        same_username = self._register(email='other@example.com')
        self.assertEqual(same_username.status_code, 409)
        self.assertEqual(same_username.json()['detail'], 'Username already in use')

    def test_register_rejects_invalid_payload_with_field_errors(self):
        res = self._register(password='123', email='not-an-email', role='janitor')
        self.assertEqual(res.status_code, 400)
        body = res.json()
        self.assertEqual(body['detail'], 'Validation failed')
        fields = {err['field'] for err in body['errors']}
        self.assertIn('password', fields)
        self.assertIn('email', fields)
        self.assertIn('role', fields)

    def test_register_rejects_reserved_email_domains(self):
        res = self._register(email='asha@school.test')
        self.assertEqual(res.status_code, 400)
        self.assertEqual([err['field'] for err in res.json()['errors']], ['email'])

    @freeze_time('2026-02-10 08:30:00')
    def test_registration_time_comes_from_the_app_clock(self):
        created = self._register()
        self.assertTrue(created.json()['user']['createdAt'].startswith('2026-02-10T08:30:00'))

    def test_public_registration_accepts_every_role(self):
        for role in ('admin', 'teacher', 'student'):
            res = self._register(username=f'{role}-self', email=f'{role}@example.com', role=role)
            self.assertEqual(res.status_code, 201, res.text)
            login = self.client.post('/api/auth/login', json={'username': f'{role}-self', 'password': 'Password@123'})
            self.assertEqual(login.json()['user']['role'], role)

    def test_wrong_password_and_unknown_user_share_one_message(self):
        self._register()
        wrong_password = self.client.post('/api/auth/login', json={'username': 'asha', 'password': 'nope-nope'})
        unknown_user = self.client.post('/api/auth/login', json={'username': 'ghost', 'password': 'Password@123'})
        self.assertEqual(wrong_password.status_code, 401)
        self.assertEqual(unknown_user.status_code, 401)
        self.assertEqual(wrong_password.json(), unknown_user.json())
        self.assertEqual(wrong_password.json()['detail'], 'Invalid username or password')

    def test_missing_token_is_401_and_bad_tokens_are_403(self):
        missing = self.client.get('/api/auth/me')
        self.assertEqual(missing.status_code, 401)
        self.assertEqual(missing.json()['detail'], 'Access token required')

        garbage = self.client.get('/api/auth/me', headers={'Authorization': 'Bearer not.a.token'})
        self.assertEqual(garbage.status_code, 403)
        self.assertEqual(garbage.json()['detail'], 'Invalid or expired token')

        clock = _FixedClock(datetime.now(timezone.utc) - timedelta(days=8))
        expired = create_access_token(1, 'admin', 'a@example.com', time_provider=clock)
        res = self.client.get('/api/auth/me', headers={'Authorization': f'Bearer {expired}'})
        self.assertEqual(res.status_code, 403)

        no_role = encode_jwt({'sub': 1, 'exp': int((datetime.now(timezone.utc) + timedelta(hours=1)).timestamp())})
        res = self.client.get('/api/auth/me', headers={'Authorization': f'Bearer {no_role}'})
        self.assertEqual(res.status_code, 403)

    def test_me_for_deleted_user_is_404(self):
        user_id, headers = self.make_user('admin')
        _, other_admin = self.make_user('admin')
        self.assertEqual(self.client.delete(f'/api/users/{user_id}', headers=other_admin).status_code, 204)
        res = self.client.get('/api/auth/me', headers=headers)
        self.assertEqual(res.status_code, 404)


if __name__ == '__main__':
    unittest.main()
