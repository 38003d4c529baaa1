"""Test settings: in-memory SQLite, eager Celery, quiet logs."""

from .base import *  # noqa: F401,F403

DEBUG = False

SECRET_KEY = 'test-secret-key'

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

BOOKING_DEFAULT_STATUS = 'confirmed'
BOOKING_CURRENCY = 'USD'

CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True
CELERY_BROKER_URL = 'memory://'
CELERY_RESULT_BACKEND = 'cache+memory://'

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

# Plain propagation to the root logger so pytest's caplog sees every record
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "loggers": {
        "apps": {"level": "DEBUG"},
        "shared": {"level": "DEBUG"},
    },
}
