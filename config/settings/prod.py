"""Production settings for ParkEase.

Extends the base settings with production specific configuration.
Sensitive values must come from environment variables; the database
must be PostgreSQL so slot allocation can take row locks.
"""

from .base import *  # noqa: F401,F403

# Never run with debug enabled in production
DEBUG = False

SECRET_KEY = get_env('DJANGO_SECRET_KEY', required=True)  # noqa: F405

# Allowed hosts should be defined explicitly via environment variable
ALLOWED_HOSTS = [host.strip() for host in get_env('DJANGO_ALLOWED_HOSTS', required=True).split(',') if host.strip()]  # noqa: F405

DATABASES['default']['ENGINE'] = get_env('DB_ENGINE', 'django.db.backends.postgresql')  # noqa: F405
DATABASES['default']['CONN_MAX_AGE'] = int(get_env('DB_CONN_MAX_AGE', '60'))  # noqa: F405

# Configure secure proxies and cookies
SECURE_PROXY_SSL_HEADER = ('HTTP_X_FORWARDED_PROTO', 'https')
CSRF_COOKIE_SECURE = True
SESSION_COOKIE_SECURE = True
