"""Top-level package for Django configuration.

This package holds the ParkEase settings modules for each environment
and the WSGI and ASGI entry points.
"""
