"""
Paginator - reflow a byte stream into fixed-size, numbered pages.

Usage:
    from paginator import paginate, write_page, paginate_file

    page, consumed = paginate(chunk)
    paginate_file("book.txt", "output.txt")
"""

from paginator.driver import PaginationResult, paginate_file
from paginator.errors import (
    GeometryError,
    PageReadError,
    PageWriteError,
    PaginatorError,
    TrailerError,
    UsageError,
)
from paginator.geometry import PageGeometry
from paginator.reader import PageFileReader, RawChunk, read_chunk
from paginator.reflow import find_last_space, paginate, paginate_final
from paginator.writer import PageTrailer, slot_offset, write_page

__version__ = "1.0.0"

__all__ = [
    "GeometryError",
    "PageFileReader",
    "PageGeometry",
    "PageReadError",
    "PageTrailer",
    "PageWriteError",
    "PaginationResult",
    "PaginatorError",
    "RawChunk",
    "TrailerError",
    "UsageError",
    "find_last_space",
    "paginate",
    "paginate_file",
    "paginate_final",
    "read_chunk",
    "slot_offset",
    "write_page",
]
