"""Error taxonomy shared by the generation pipeline and the HTTP layer."""
from __future__ import annotations

from enum import StrEnum


class ErrorKind(StrEnum):
    """Closed classification of failures reported by the text generation boundary."""

    RATE_LIMITED = "rate_limited"
    TRANSIENT = "transient"
    FATAL = "fatal"


class PaletteServiceError(Exception):
    """Base class for errors raised by the palette service."""


class InputError(PaletteServiceError):
    """A required field for the requested mode is missing."""


class ConfigurationError(PaletteServiceError):
    """The text generation client could not be constructed."""


class ParseError(PaletteServiceError, ValueError):
    """Model output did not contain the structure a parser needs."""


class GenerationError(PaletteServiceError):
    """A single text generation call failed."""

    def __init__(self, message: str, *, kind: ErrorKind, status_code: int | None = None) -> None:
        super().__init__(message)
        self.kind = kind
        self.status_code = status_code

    @classmethod
    def from_status(cls, status_code: int, message: str) -> "GenerationError":
        if status_code == 429:
            kind = ErrorKind.RATE_LIMITED
        elif status_code >= 500:
            kind = ErrorKind.TRANSIENT
        else:
            kind = ErrorKind.FATAL
        return cls(message, kind=kind, status_code=status_code)
