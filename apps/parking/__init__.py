"""Parking app package.

Owners list parking spaces here. Each space carries one slot pool and
one hourly rate per vehicle category; slots are numbered once and
their numbers are never handed out again.
"""
