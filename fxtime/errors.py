"""
Exception types.

Every error raised by the package derives from `FxTimeError` and from
the builtin exception closest in meaning, so callers can catch either
the specific class or e.g. a plain `ValueError`.
"""

from __future__ import annotations

from typing import Any


class FxTimeError(Exception):
    """Base class for all package errors."""


class InvalidArgumentError(FxTimeError, ValueError):
    """An argument has the wrong shape, e.g. unparsable date text."""


class OutOfRangeError(FxTimeError, LookupError):
    """An instant precedes the known transition history of a zone."""


class MalformedLengthError(FxTimeError, ValueError):
    """A record buffer is not a whole multiple of the record size."""

    def __init__(self, length: int, record_size: int) -> None:
        super().__init__(
            f"Odd length of passed data: {length} (not a multiple of {record_size})"
        )
        self.length = length
        self.record_size = record_size


class InvalidRecordError(FxTimeError, ValueError):
    """A decoded record violates its structural invariants."""

    def __init__(self, message: str, index: int, record: Any) -> None:
        super().__init__(message)
        self.index = index
        self.record = record


class UnimplementedFeatureError(FxTimeError, NotImplementedError):
    """A named operation exists but is not implemented."""


class ConfigurationError(FxTimeError, RuntimeError):
    """The environment cannot supply required data (e.g. a timezone table)."""
