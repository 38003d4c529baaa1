"""Production settings for the hotel booking core.

This module extends the base settings with production specific
configuration. Ensure that sensitive values are provided via
environment variables.
"""

from .base import *  # noqa: F401,F403
from .base import get_env

# Never run with debug enabled in production
DEBUG = False

SECRET_KEY = get_env('DJANGO_SECRET_KEY', required=True)

# Allowed hosts should be defined explicitly via environment variable
ALLOWED_HOSTS = [
    host.strip() for host in get_env('DJANGO_ALLOWED_HOSTS', required=True).split(',') if host.strip()
]

DATABASES['default']['CONN_MAX_AGE'] = int(get_env('DB_CONN_MAX_AGE', '60'))  # noqa: F405
