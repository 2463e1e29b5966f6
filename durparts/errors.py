"""Exceptions raised by durparts.

All of them are ``ValueError`` subclasses: they signal bad arguments and are
raised synchronously to the caller.
"""


class DurationError(ValueError):
    """Base class for durparts validation errors."""


class UnknownUnitError(DurationError):
    """A unit name outside the recognized units was supplied."""


class InvalidPartsError(DurationError):
    """A parts mapping could not be turned into a duration."""


class ConflictingArgumentsError(DurationError):
    """Mutually exclusive options were supplied together."""


class OutOfRangeError(DurationError):
    """A quantity is outside the range the operation accepts."""


class EmptyDurationError(DurationError):
    """The duration has no parts, so it has no smallest part either."""
