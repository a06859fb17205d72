"""Typed errors for itinerary processing.

Content problems (bad rows, bad timings, odd dates) never raise; they are
skipped, defaulted or reported as diagnostics. These errors cover input the
pipeline cannot interpret at all.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class ItineraryError(Exception):
    """Base error for the itinerary service.

    Attributes:
        message: Human-readable error description
        cause: Optional underlying exception that caused this error
    """

    message: str
    cause: Optional[Exception] = field(default=None, repr=False)

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message

    def __post_init__(self) -> None:
        super().__init__(self.message)


@dataclass
class ProcessingError(ItineraryError):
    """The input grid (or the file it came from) is structurally unusable.

    Attributes:
        row: 1-based grid row where the problem was found, if any
    """

    row: Optional[int] = None


@dataclass
class UnsupportedFileError(ProcessingError):
    """Upload has an extension no loader handles."""

    filename: str = ""
