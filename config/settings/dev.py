"""Development settings for ParkEase.

Extends the base settings with debug mode, permissive hosts and
readable console logs. Do not use these settings in production!
"""

import structlog

from .base import *  # noqa: F401,F403

# Enable debug mode for development
DEBUG = True

# Allow all hosts in development
ALLOWED_HOSTS = ['*']

# Human readable log lines instead of JSON
LOGGING['formatters']['json']['processor'] = structlog.dev.ConsoleRenderer()  # noqa: F405
