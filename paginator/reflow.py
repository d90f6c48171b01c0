"""
Page Reflow Engine - wraps a raw byte window into one page of lines.

Rules:
  - Lines break just after the last ASCII space that fits (the space stays
    on the line it ends)
  - A token with no space in range is hard-cut at the line limit
  - The end of the window is the terminator: no line is emitted past it
    and no newline follows the last byte before it
  - A full page withholds the reserved tail on its last line; the final
    page does not, and is trimmed to the bytes it actually produced
"""

from __future__ import annotations

from paginator.geometry import PageGeometry
from paginator.spec import NEW_LINE, SPACE


def find_last_space(buffer: bytes, start: int, end: int) -> int:
    """
    Position just after the last space in buffer[start:end], scanning back
    from end - 1. Returns `end` unchanged when the range holds no space.
    """
    idx = buffer.rfind(SPACE, start, end)
    if idx < 0:
        return end
    return idx + 1


def paginate(
    chunk: bytes,
    geometry: PageGeometry | None = None,
    final: bool = False,
) -> tuple[bytes, int]:
    """
    Lay out one page from `chunk`.

    Returns (page_bytes, consumed) where `consumed` is how many raw bytes
    of `chunk` went into the page. It is the amount the next read offset
    advances by, so any partial word left at the end of the window is
    handed back to the next page.
    """
    geometry = geometry or PageGeometry.default()
    if len(chunk) > geometry.page_capacity_bytes:
        raise ValueError(
            f"chunk of {len(chunk)} bytes exceeds page capacity "
            f"({geometry.page_capacity_bytes})"
        )

    page = bytearray()
    end_of_data = len(chunk)
    cursor = 0

    for line in range(geometry.lines_per_page):
        limit = geometry.line_limit(line, final=final)
        line_end = cursor + limit

        if final and end_of_data <= line_end:
            cut = end_of_data  # the rest fits, no need to break early
        else:
            cut = find_last_space(chunk, cursor, line_end)

        page += chunk[cursor:cut]

        if cut >= end_of_data:
            cursor = end_of_data
            break

        page.append(NEW_LINE)
        cursor = cut

    return bytes(page), cursor


def paginate_final(chunk: bytes, geometry: PageGeometry | None = None) -> tuple[bytes, int]:
    """Lay out the last, possibly short, page of the input."""
    return paginate(chunk, geometry, final=True)

