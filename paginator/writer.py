"""
Page Writer - commits formatted pages to their fixed output slots.

Each page owns the byte range starting at (page_number - 1) * slot_size.
The page bytes and trailer go out in a single positioned write, so many
writers can share one file descriptor without touching its file position.
"""

from __future__ import annotations

import logging
import os
import struct
from dataclasses import dataclass
from typing import BinaryIO

from paginator.errors import PageWriteError
from paginator.geometry import PageGeometry
from paginator.spec import PAGE_NUMBER_FORMATS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PageTrailer:
    """Marker byte plus fixed-width little-endian page number."""

    marker: int
    page_number: int

    def pack(self, number_width: int) -> bytes:
        return bytes([self.marker]) + struct.pack(PAGE_NUMBER_FORMATS[number_width], self.page_number)

    @classmethod
    def unpack(cls, data: bytes, number_width: int) -> PageTrailer:
        """Decode a trailer from the first 1 + number_width bytes of `data`."""
        if len(data) < 1 + number_width:
            raise ValueError(f"trailer needs {1 + number_width} bytes, got {len(data)}")
        (page_number,) = struct.unpack_from(PAGE_NUMBER_FORMATS[number_width], data, 1)
        return cls(marker=data[0], page_number=page_number)

    @classmethod
    def for_page(cls, page_number: int, geometry: PageGeometry) -> PageTrailer:
        return cls(marker=geometry.trailer_marker, page_number=page_number)


def slot_offset(page_number: int, geometry: PageGeometry) -> int:
    """Byte offset of a page's slot. Depends only on the page number."""
    if page_number < 1:
        raise ValueError(f"page numbers start at 1, got {page_number}")
    return (page_number - 1) * geometry.slot_size


def encode_page(page: bytes, page_number: int, geometry: PageGeometry) -> bytes:
    """Page bytes followed by the page's trailer."""
    if page_number > geometry.max_page_number:
        raise ValueError(
            f"page {page_number} does not fit a {geometry.trailer_number_width}-byte trailer"
        )
    trailer = PageTrailer.for_page(page_number, geometry)
    return page + trailer.pack(geometry.trailer_number_width)


def write_page(
    sink: BinaryIO,
    page: bytes,
    page_number: int,
    geometry: PageGeometry | None = None,
) -> int:
    """
    Write `page` and its trailer at the page's slot in `sink`.

    `sink` must be backed by a real file descriptor (`sink.fileno()`), since
    the write goes through os.pwrite; in-memory streams such as BytesIO are
    rejected with PageWriteError.

    Returns the number of bytes written. Any OSError is raised as
    PageWriteError; a partially written output is not usable.
    """
    geometry = geometry or PageGeometry.default()
    offset = slot_offset(page_number, geometry)
    payload = encode_page(page, page_number, geometry)

    try:
        fd = sink.fileno()
        written = 0
        while written < len(payload):
            written += os.pwrite(fd, payload[written:], offset + written)
    except OSError as exc:
        raise PageWriteError(f"failed to write page {page_number}: {exc}", page_number) from exc

    logger.debug("wrote page %d: %d bytes at offset %d", page_number, written, offset)
    return written
