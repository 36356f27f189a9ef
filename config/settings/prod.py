"""
Production settings
"""
from .base import *  # noqa: F401,F403

DEBUG = False

# Production security settings
SECURE_SSL_REDIRECT = True
SESSION_COOKIE_SECURE = True
CSRF_COOKIE_SECURE = True
SECURE_CONTENT_TYPE_NOSNIFF = True
X_FRAME_OPTIONS = 'DENY'

# Production database (must be PostgreSQL)
# If DATABASE_URL is not set, this will raise an error (which is intentional)
_default_db = env.db('DATABASE_URL')  # noqa: F405
_default_db.setdefault('CONN_MAX_AGE', 60)
DATABASES['default'] = _default_db  # noqa: F405

# Chromium is provided by the container image; CHROME_PATH must point at it
PDF_PRODUCTION = env.bool('PDF_PRODUCTION', default=True)  # noqa: F405
