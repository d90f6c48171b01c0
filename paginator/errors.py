"""
Paginator errors.

Components raise these and never terminate the process; the CLI is the
single place that turns them into a diagnostic and an exit status.
"""

from __future__ import annotations


class PaginatorError(Exception):
    """Base class for every error raised by the paginator."""


class UsageError(PaginatorError):
    """Missing or unusable command-line input."""


class GeometryError(PaginatorError, ValueError):
    """Page geometry that cannot produce non-overlapping slots."""


class PageReadError(PaginatorError, OSError):
    """Reading the input failed."""


class PageWriteError(PaginatorError, OSError):
    """Seeking or writing an output slot failed."""

    def __init__(self, message: str, page_number: int | None = None) -> None:
        super().__init__(message)
        self.page_number = page_number


class TrailerError(PaginatorError, ValueError):
    """A page slot does not end with the expected trailer."""
