"""Exceptions raised by pybrcheck.

Only caller misuse raises. A well-typed value that simply fails a rule (a
bad check digit, a malformed address, a weak password) is reported through
a ``False`` or ``None`` return value instead.
"""


class BrcheckError(Exception):
    """Base class for every error raised by pybrcheck."""


class InvalidInputError(BrcheckError, TypeError):
    """Raised when a validator receives ``None`` or a non-string argument."""


class InvalidLengthError(BrcheckError, ValueError):
    """Raised when a document has the wrong number of digits for formatting."""


class GenerationError(BrcheckError, RuntimeError):
    """Raised when synthetic document generation exhausts its attempts."""
