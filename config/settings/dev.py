"""
Development settings
"""
from .base import *  # noqa: F401,F403

DEBUG = True

# Playwright's bundled Chromium in development
PDF_PRODUCTION = env.bool('PDF_PRODUCTION', default=False)  # noqa: F405

# Email backend (console for development)
EMAIL_BACKEND = 'django.core.mail.backends.console.EmailBackend'

LOGGING['root']['level'] = env('LOG_LEVEL', default='DEBUG')  # noqa: F405
