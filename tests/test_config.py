import os
import unittest
from unittest.mock import patch

from school_admin import config


class ConfigTests(unittest.TestCase):
    def test_missing_required_settings_fail_fast(self):
        with patch.dict(os.environ, {}, clear=True):
            with self.assertRaises(RuntimeError) as ctx:
                config._load_settings(env_file=None)
        message = str(ctx.exception)
        self.assertIn('DATABASE_URL', message)
        self.assertIn('JWT_SECRET', message)

    def test_session_secret_is_accepted_as_signing_key(self):
        env = {'DATABASE_URL': 'sqlite:///./x.db', 'SESSION_SECRET': 'legacy-secret'}
        with patch.dict(os.environ, env, clear=True):
            loaded = config.Settings(_env_file=None)
        self.assertEqual(loaded.jwt_secret, 'legacy-secret')
        self.assertEqual(loaded.token_expiry_days, 7)


if __name__ == '__main__':
    unittest.main()
