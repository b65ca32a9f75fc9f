"""Users app package.

A single user model serves owners and renters alike. Use
``apps.users.models.User`` as the AUTH_USER_MODEL throughout the
project.
"""
