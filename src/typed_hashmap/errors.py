"""Exceptions and warnings raised by the typed_hashmap library."""


class HashmapError(Exception):
    """Base class for all typed_hashmap errors."""


class UnsupportedKindError(HashmapError, TypeError):
    """A vector's scalar kind is outside the supported key/value kinds.

    Raised when a hashmap is constructed, so no handle is produced.
    """


class CoercionError(HashmapError, TypeError):
    """A vector cannot be converted losslessly into the hashmap's bound kind.

    The failing call leaves the table unmodified.
    """


class HandleReleasedError(HashmapError, RuntimeError):
    """An operation was attempted on a hashmap that has been closed."""


class LengthMismatchWarning(UserWarning):
    """Key and value vectors differ in length and were truncated to the shorter one."""
