"""Error types raised by jsonmapper."""

from __future__ import annotations


class JsonMapError(Exception):
    """Base class for every error raised by jsonmapper."""

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = path

    def __str__(self) -> str:
        if self.path:
            return f"{self.message} (path: {self.path})"
        return self.message


class DecodeError(JsonMapError, ValueError):
    """Input is not valid JSON, or its top-level value is not an object."""


class EncodeError(JsonMapError, ValueError):
    """The document holds a value the codec cannot encode."""


class KeyNotFoundError(JsonMapError, KeyError):
    pass


class IndexOutOfRangeError(JsonMapError, IndexError):
    pass


class InvalidIndexError(JsonMapError, ValueError):
    """A non-integer step was applied to a sequence."""


class InvalidPathError(JsonMapError, ValueError):
    pass


class TypeMismatchError(JsonMapError, TypeError):
    pass


class UnsupportedOperatorError(JsonMapError, ValueError):
    pass


class UnsupportedComparisonError(JsonMapError, TypeError):
    """Ordering comparison between non-numeric values."""


class InvalidNumericTypeError(JsonMapError, TypeError):
    pass


class InvalidConditionError(JsonMapError, ValueError):
    pass


class ReadError(JsonMapError, OSError):
    pass


class WriteError(JsonMapError, OSError):
    pass
