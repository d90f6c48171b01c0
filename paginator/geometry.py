"""
Page geometry - the fixed dimensions shared by the reflow engine and writer.
"""

from __future__ import annotations

from dataclasses import dataclass

from paginator.errors import GeometryError
from paginator.spec import (
    CHARACTERS_PER_LINE,
    LINES_PER_PAGE,
    RESERVED_TAIL_CHARACTERS,
    END_OF_PAGE,
    PAGE_NUMBER_BYTES,
    PAGE_NUMBER_FORMATS,
)


@dataclass(frozen=True)
class PageGeometry:
    """
    Immutable page dimensions.

    Usage:
        geometry = PageGeometry.default()
        small = PageGeometry(line_width=10, lines_per_page=3)
    """

    line_width: int = CHARACTERS_PER_LINE
    lines_per_page: int = LINES_PER_PAGE
    reserved_tail_chars: int = RESERVED_TAIL_CHARACTERS
    trailer_marker: int = END_OF_PAGE
    trailer_number_width: int = PAGE_NUMBER_BYTES

    def __post_init__(self) -> None:
        if self.line_width < 2:
            raise GeometryError(f"line_width must be at least 2, got {self.line_width}")
        if self.lines_per_page < 1:
            raise GeometryError(f"lines_per_page must be positive, got {self.lines_per_page}")
        if self.reserved_tail_chars < 0:
            raise GeometryError("reserved_tail_chars cannot be negative")
        if not 0 <= self.trailer_marker <= 0xFF:
            raise GeometryError(f"trailer_marker must fit in one byte, got {self.trailer_marker}")
        if self.trailer_number_width not in PAGE_NUMBER_FORMATS:
            raise GeometryError(
                f"trailer_number_width must be one of {sorted(PAGE_NUMBER_FORMATS)}, "
                f"got {self.trailer_number_width}"
            )
        if self.line_width - 1 - self.reserved_tail_chars < 1:
            raise GeometryError("last line of a full page has no room for content")
        if self.reserved_tail_chars < self.trailer_size:
            # A full page plus its trailer has to fit inside one slot
            raise GeometryError(
                f"reserved_tail_chars ({self.reserved_tail_chars}) is smaller than "
                f"the trailer ({self.trailer_size} bytes)"
            )
        if self.page_capacity_bytes < self.lines_per_page:
            raise GeometryError("page capacity is smaller than one byte per line")

    @classmethod
    def default(cls) -> PageGeometry:
        return cls()

    @property
    def page_capacity_bytes(self) -> int:
        """Size of the raw input window handed to the reflow engine."""
        return self.lines_per_page * self.line_width - self.reserved_tail_chars

    @property
    def slot_size(self) -> int:
        """Stride between page slots in the output."""
        return self.lines_per_page * self.line_width

    @property
    def trailer_size(self) -> int:
        return 1 + self.trailer_number_width

    @property
    def max_page_number(self) -> int:
        return (1 << (8 * self.trailer_number_width)) - 1

    def line_limit(self, line: int, final: bool = False) -> int:
        """Content bytes available on `line` (0-indexed), excluding the newline."""
        if not final and line == self.lines_per_page - 1:
            return self.line_width - 1 - self.reserved_tail_chars
        return self.line_width - 1
