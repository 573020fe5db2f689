"""
Settings for the test suite.

Local SQLite database, in-memory email outbox and a fixed admin token.
"""
import os

os.environ.setdefault('SECRET_KEY', 'test-secret-key-not-for-production')

from .settings import *  # noqa

DEBUG = False

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}
DATABASE_CONFIGURED = True

EMAIL_BACKEND = 'django.core.mail.backends.locmem.EmailBackend'
DEFAULT_FROM_EMAIL = 'web@zyph.tech'
CONTACT_EMAIL_TO = 'ventas@zyph.tech'

ADMIN_TOKEN = 'test-admin-token'

CONTACT_RATE_LIMIT_MAX = 5
CONTACT_RATE_LIMIT_WINDOW_MINUTES = 15
CONTACT_NOTIFICATION_TIMEOUT = 5

TRUST_PROXY = True
TRUST_PROXY_HOPS = 1
SECURE_SSL_REDIRECT = False

LOGGING['root']['level'] = 'WARNING'
LOGGING['loggers']['contact']['level'] = 'WARNING'

REST_FRAMEWORK = {**REST_FRAMEWORK, 'TEST_REQUEST_DEFAULT_FORMAT': 'json'}
