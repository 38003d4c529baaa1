"""Base settings for all environments.

This configuration file defines the common settings used by the hotel
booking core in every environment. It follows Django's standard
configuration structure and integrates Django Rest Framework (input
validation), Celery (room occupancy sweeper) and structlog (JSON logs).
Environment-specific overrides live in `dev.py`, `prod.py` and `test.py`.
"""

import os
from pathlib import Path

import structlog
from django.core.exceptions import ImproperlyConfigured

# Optionally load .env file if using python-dotenv
from dotenv import load_dotenv

# Build paths inside the project like this: BASE_DIR / 'subdir'.
BASE_DIR = Path(__file__).resolve().parent.parent.parent

load_dotenv(BASE_DIR / ".env")


# Helper to get environment variables or raise
def get_env(var_name: str, default=None, required: bool = False):
    value = os.environ.get(var_name, default)
    if required and value in (None, ""):
        raise ImproperlyConfigured(f"Missing required environment variable: {var_name}")
    return value


# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = get_env('DJANGO_SECRET_KEY', 'replace-me-in-production')

# SECURITY WARNING: don't run with debug turned on in production!
DEBUG = get_env('DJANGO_DEBUG', 'False').lower() == 'true'

ALLOWED_HOSTS: list[str] = [
    host.strip() for host in get_env('DJANGO_ALLOWED_HOSTS', 'localhost').split(',') if host.strip()
]

# Application definition

INSTALLED_APPS = [
    'django.contrib.auth',
    'django.contrib.contenttypes',
    # Third‑party apps
    'rest_framework',
    # Domain apps
    'apps.rooms',
    'apps.guests',
    'apps.bookings',
    'apps.audit',
]

MIDDLEWARE: list[str] = []

# Database
# https://docs.djangoproject.com/en/5.0/ref/settings/#databases

DATABASES = {
    'default': {
        'ENGINE': get_env('DB_ENGINE', 'django.db.backends.sqlite3'),
        'NAME': get_env('DB_NAME', BASE_DIR / 'db.sqlite3'),
        'USER': get_env('DB_USER', ''),
        'PASSWORD': get_env('DB_PASSWORD', ''),
        'HOST': get_env('DB_HOST', ''),
        'PORT': get_env('DB_PORT', ''),
    }
}

# Internationalization
# https://docs.djangoproject.com/en/5.0/topics/i18n/

LANGUAGE_CODE = 'en-us'

TIME_ZONE = get_env('TIME_ZONE', 'UTC')

USE_I18N = True

USE_TZ = True

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# Django Rest Framework (serializers only, no views are exposed)
REST_FRAMEWORK = {
    'COERCE_DECIMAL_TO_STRING': True,
    'DATE_INPUT_FORMATS': ['iso-8601'],
}

# Booking core
BOOKING_DEFAULT_STATUS = get_env('BOOKING_DEFAULT_STATUS', 'confirmed')
BOOKING_CURRENCY = get_env('BOOKING_CURRENCY', 'USD')
ROOM_OCCUPANCY_SWEEP_SECONDS = int(get_env('ROOM_OCCUPANCY_SWEEP_SECONDS', '300'))

# Celery configuration (Broker and Result backend handled in environment)
CELERY_BROKER_URL = get_env('CELERY_BROKER_URL', 'redis://localhost:6379/0')
CELERY_RESULT_BACKEND = get_env('CELERY_RESULT_BACKEND', 'redis://localhost:6379/0')
CELERY_TIMEZONE = TIME_ZONE

# ============================================================================
# CELERY BEAT SCHEDULE (Periodic Tasks)
# ============================================================================

CELERY_BEAT_SCHEDULE = {
    # Room status follows in-house bookings
    "sync-room-occupancy": {
        "task": "bookings.sync_room_occupancy",
        "schedule": float(ROOM_OCCUPANCY_SWEEP_SECONDS),
        "options": {"expires": max(ROOM_OCCUPANCY_SWEEP_SECONDS - 10, 1)},
    },
}

# Logging
structlog.configure(
    processors=[
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

LOG_LEVEL = get_env('LOG_LEVEL', 'INFO')

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "json": {
            "()": "structlog.stdlib.ProcessorFormatter",
            "processor": structlog.processors.JSONRenderer(),
            "foreign_pre_chain": [
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.add_log_level,
            ],
        }
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "json",
            "level": "DEBUG",
        }
    },
    "root": {"handlers": ["console"], "level": "WARNING"},
    "loggers": {
        "django": {"handlers": ["console"], "level": "INFO", "propagate": False},
        "apps": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
        "shared": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
        "apps.audit": {"handlers": ["console"], "level": "WARNING", "propagate": False},
    },
}
