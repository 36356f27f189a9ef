"""
Test settings. In-memory SQLite so the suite runs without a PostgreSQL server.
"""
import os
import tempfile

os.environ.setdefault('DATABASE_URL', 'sqlite://:memory:')

from .base import *  # noqa: E402,F401,F403

DEBUG = False

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

MEDIA_ROOT = Path(tempfile.mkdtemp(prefix='orgsuite-media-'))  # noqa: F405
PDF_OUTPUT_DIR = MEDIA_ROOT / 'documents' / 'PDFs'
PDF_FONTS_DIR = MEDIA_ROOT / 'fonts'
PDF_PRODUCTION = False
CHROME_PATH = None

LOGGING['root']['level'] = 'WARNING'  # noqa: F405
