"""Domain errors raised by the vote store and the decision engine.

The HTTP layer maps each subclass to a status code (see ``datepoll.main``).
"""


class PollError(Exception):
    """Base class for all scheduling-poll errors."""


class NotFoundError(PollError):
    """A referenced event, candidate date or participant does not exist."""


class ConflictError(PollError):
    """The write collides with existing state (e.g. duplicate participant id)."""


class ForbiddenError(PollError):
    """The operation is not allowed for this event."""


class StorageError(PollError):
    """The persistence layer failed to read or write."""
