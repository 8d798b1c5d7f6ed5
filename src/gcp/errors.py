"""Exceptions raised by the coloring algorithms."""


class InvalidParameterError(ValueError):
    """Raised when an algorithm parameter is out of its valid range.

    Validation happens at the entry points, before any work is attempted.
    """
