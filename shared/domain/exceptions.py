"""
Domain Errors

Every failure a command can surface to a caller. Each kind carries a
stable ``code`` so the API boundary can give it a distinct status and
clients can tell "try another slot" apart from "you may not do this".

Only ContentionError is retryable: the caller may re-run the whole
operation from scratch. All other kinds are permanent for the input.
"""


class DomainError(Exception):
    """Base class for expected, user-facing domain failures."""

    code = 'domain_error'
    retryable = False

    def __init__(self, message: str = ''):
        super().__init__(message or self.__class__.__doc__)
        self.message = message or self.__class__.__doc__


class NotFoundError(DomainError):
    """Requested entity does not exist."""
    code = 'not_found'


class InactiveError(DomainError):
    """Parking space is disabled."""
    code = 'inactive'


class InvalidIntervalError(DomainError):
    """End time must be after start time."""
    code = 'invalid_interval'


class NoAvailabilityError(DomainError):
    """No available slots for the selected time period."""
    code = 'no_availability'


class InvalidStateError(DomainError):
    """Operation is not allowed for the current booking status."""
    code = 'invalid_state'


class UnauthorizedError(DomainError):
    """Caller does not own the resource."""
    code = 'unauthorized'


class SlotNumberConflictError(DomainError):
    """Slot numbers would collide with numbers already issued."""
    code = 'slot_number_conflict'


class ContentionError(DomainError):
    """Could not acquire a lock in time. Retry the operation."""
    code = 'contention'
    retryable = True
