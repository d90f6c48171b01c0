"""
Readers - raw input windows and read-back of paginated output.

read_chunk() pulls one page-sized window from the input at a given offset.
PageFileReader opens a paginated output file and gives slot-indexed access
to its pages, checking each slot's trailer.
"""

from __future__ import annotations

import builtins
import os
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Iterator

from paginator.errors import PageReadError, TrailerError
from paginator.geometry import PageGeometry
from paginator.writer import PageTrailer, slot_offset


@dataclass(frozen=True)
class RawChunk:
    """A window of input bytes. `eof` is set when the read came up short."""

    offset: int
    data: bytes
    eof: bool

    def __len__(self) -> int:
        return len(self.data)


def read_chunk(source: BinaryIO, offset: int, size: int) -> RawChunk:
    """Read up to `size` bytes at `offset`, tolerating a short final read."""
    try:
        source.seek(offset)
        parts: list[bytes] = []
        remaining = size
        while remaining > 0:
            data = source.read(remaining)
            if not data:
                break
            parts.append(data)
            remaining -= len(data)
    except OSError as exc:
        raise PageReadError(f"failed to read input at offset {offset}: {exc}") from exc

    data = b"".join(parts)
    return RawChunk(offset=offset, data=data, eof=len(data) < size)


class PageFileReader:
    """
    Slot-indexed reader for paginated output.

    Usage:
        pages = PageFileReader.read("output.txt")

        with PageFileReader.open("output.txt") as reader:
            first = reader.get_page(1)
            assert reader.validate()
    """

    def __init__(self, handle: BinaryIO, geometry: PageGeometry | None = None) -> None:
        self._handle = handle
        self.geometry = geometry or PageGeometry.default()
        self.size = os.fstat(handle.fileno()).st_size

    @classmethod
    def open(cls, path: str | Path, geometry: PageGeometry | None = None) -> PageFileReader:
        return cls(builtins.open(path, "rb"), geometry)

    @classmethod
    def read(cls, path: str | Path, geometry: PageGeometry | None = None) -> list[bytes]:
        """Content of every page in the file, in page order."""
        with cls.open(path, geometry) as reader:
            return list(reader.pages())

    @property
    def page_count(self) -> int:
        slot = self.geometry.slot_size
        return (self.size + slot - 1) // slot

    def slot(self, page_number: int) -> bytes:
        """Raw bytes of a page's slot (the final slot may be short)."""
        if not 1 <= page_number <= self.page_count:
            raise IndexError(f"page {page_number} out of range 1..{self.page_count}")
        self._handle.seek(slot_offset(page_number, self.geometry))
        return self._handle.read(self.geometry.slot_size)

    def trailer_offset(self, page_number: int) -> int | None:
        """
        Position of the page's trailer within its slot, or None if absent.

        Only the last match counts, and everything after it must be slot
        padding (zero bytes, or nothing at the end of the file). A trailer
        pattern that merely appears inside the page text is not accepted.
        """
        expected = PageTrailer.for_page(page_number, self.geometry).pack(self.geometry.trailer_number_width)
        slot = self.slot(page_number)
        idx = slot.rfind(expected)
        if idx < 0 or slot[idx + len(expected):].strip(b"\x00"):
            return None
        return idx

    def get_page(self, page_number: int) -> bytes:
        """Page content, without trailer or slot padding."""
        idx = self.trailer_offset(page_number)
        if idx is None:
            raise TrailerError(f"no trailer found for page {page_number}")
        return self.slot(page_number)[:idx]

    def trailer(self, page_number: int) -> PageTrailer:
        idx = self.trailer_offset(page_number)
        if idx is None:
            raise TrailerError(f"no trailer found for page {page_number}")
        return PageTrailer.unpack(self.slot(page_number)[idx:], self.geometry.trailer_number_width)

    def pages(self) -> Iterator[bytes]:
        for page_number in range(1, self.page_count + 1):
            yield self.get_page(page_number)

    def validate(self) -> bool:
        """True when every slot carries the trailer for its own page number."""
        if self.page_count == 0:
            return False
        return all(self.trailer_offset(n) is not None for n in range(1, self.page_count + 1))

    def close(self) -> None:
        self._handle.close()

    def __enter__(self) -> PageFileReader:
        return self

    def __exit__(self, *args) -> None:
        self.close()
