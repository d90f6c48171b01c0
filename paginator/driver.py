"""
Driver - reads, reflows and dispatches pages until the input runs out.

Reading and reflowing are strictly sequential: each page's consumed byte
count decides where the next read starts. Writes go to a thread pool
because every page owns a disjoint slot of the output.
"""

from __future__ import annotations

import logging
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from pathlib import Path

from paginator.errors import PageReadError, PageWriteError
from paginator.geometry import PageGeometry
from paginator.reader import read_chunk
from paginator.reflow import paginate
from paginator.spec import OUTPUT_FILENAME
from paginator.writer import write_page

logger = logging.getLogger(__name__)

# Writes allowed in flight before the read loop waits for one to finish
MAX_PENDING_WRITES = 32


@dataclass(frozen=True)
class PaginationResult:
    pages: int
    bytes_read: int
    output_path: Path


def paginate_file(
    input_path: str | Path,
    output_path: str | Path = OUTPUT_FILENAME,
    geometry: PageGeometry | None = None,
    max_workers: int | None = None,
    max_pending_writes: int = MAX_PENDING_WRITES,
) -> PaginationResult:
    """
    Paginate `input_path` into `output_path` (truncated first).

    Raises PageReadError / PageWriteError on the first I/O failure; the
    output is incomplete in that case. A failed write is noticed before the
    next chunk is read, and at most `max_pending_writes` pages wait in memory.
    """
    if max_pending_writes < 1:
        raise ValueError(f"max_pending_writes must be positive, got {max_pending_writes}")
    geometry = geometry or PageGeometry.default()
    input_path = Path(input_path)
    output_path = Path(output_path)

    try:
        source = open(input_path, "rb")
    except OSError as exc:
        raise PageReadError(f"cannot open {input_path}: {exc}") from exc

    with source:
        try:
            sink = open(output_path, "wb")
        except OSError as exc:
            raise PageWriteError(f"cannot create {output_path}: {exc}") from exc

        with sink, ThreadPoolExecutor(max_workers=max_workers) as pool:
            pending: set[Future] = set()
            offset = 0
            page_number = 1

            while True:
                _drain(pending, max_pending_writes)
                chunk = read_chunk(source, offset, geometry.page_capacity_bytes)
                final = chunk.eof
                page, consumed = paginate(chunk.data, geometry, final=final)
                if final and consumed < len(chunk):
                    # Tail does not fit on one page: lay this one out as full and keep going
                    final = False
                    page, consumed = paginate(chunk.data, geometry)

                pending.add(pool.submit(write_page, sink, page, page_number, geometry))
                logger.debug(
                    "page %d: read %d bytes at %d, consumed %d, formatted %d",
                    page_number, len(chunk), offset, consumed, len(page),
                )
                offset += consumed
                if final:
                    break
                page_number += 1

            _drain(pending, 1)

    logger.info("wrote %d page(s) from %s to %s", page_number, input_path, output_path)
    return PaginationResult(pages=page_number, bytes_read=offset, output_path=output_path)


def _drain(pending: set[Future], limit: int) -> None:
    """
    Drop finished writes from `pending`, blocking until fewer than `limit`
    remain. The first failed write cancels the queued ones and is re-raised.
    """
    while True:
        done = {future for future in pending if future.done()}
        pending -= done
        for future in done:
            exc = None if future.cancelled() else future.exception()
            if exc is not None:
                for queued in pending:
                    queued.cancel()
                raise exc
        if len(pending) < limit:
            return
        wait(pending, return_when=FIRST_COMPLETED)
