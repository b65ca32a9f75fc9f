"""Test settings for ParkEase.

In-memory SQLite, fast password hashing and quiet logs. Allocation
tests that need real concurrency run against the in-memory ledger in
``shared.infrastructure.memory`` instead of the database.
"""

from .base import *  # noqa: F401,F403

DEBUG = False

SECRET_KEY = 'test-secret-key'

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

STORAGES = {
    'default': {'BACKEND': 'django.core.files.storage.FileSystemStorage'},
    'staticfiles': {'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage'},
}

LOGGING['handlers']['console']['level'] = 'WARNING'  # noqa: F405
