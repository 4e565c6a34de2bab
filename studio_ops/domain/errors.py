"""
Retainer domain errors.

All subclass ValueError so callers that only know about bad input can
keep catching ValueError.
"""


class RetainerError(ValueError):
    """Base class for retainer reporting failures"""


class RetainerNotFoundError(RetainerError):
    """No retainer is configured for the requested client"""


class InvalidTimeEntryError(RetainerError):
    """A time entry cannot be allocated (missing date, non-positive hours)"""


class InvalidDateRangeError(RetainerError):
    """Requested report window ends before it starts"""
