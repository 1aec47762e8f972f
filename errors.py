from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ConversionError(Exception):
    """Standard error raised by the conversion pipeline.

    Parameters
    ----------
    code:
        Short machine readable error code.
    message:
        Human readable error message.
    """

    code: str
    message: str

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.code}: {self.message}"


class ChecklistError(ConversionError):
    """The input checklist is missing columns or cannot be read."""


class NameParsingError(ConversionError):
    """The GBIF name parser could not be reached or returned garbage."""


class IntegrityError(ConversionError):
    """Distribution rows reference taxa absent from the taxon core."""


__all__ = ["ConversionError", "ChecklistError", "NameParsingError", "IntegrityError"]
