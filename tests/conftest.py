import os


# Configuration refuses to load without these; tests point them at throwaway values.
os.environ.setdefault('DATABASE_URL', 'sqlite:///./test_school_admin.db')
os.environ.setdefault('JWT_SECRET', 'test-secret-value-for-token-signing-only')
os.environ.setdefault('APP_TIMEZONE', 'UTC')
