"""
Paginated Output Format v1.0
============================

Layout (one slot per page, fixed stride):
    [0 * SLOT]  <page 1 bytes><marker><page number>   <- Page 1 slot
    [1 * SLOT]  <page 2 bytes><marker><page number>   <- Page 2 slot
    ...
    [(N-1) * SLOT]  <page N bytes><marker><page number>   <- Final page, trimmed

Page bytes:
    Up to LINES_PER_PAGE lines, each at most CHARACTERS_PER_LINE - 1 content
    bytes followed by NEW_LINE. The last line of a full page withholds
    RESERVED_TAIL_CHARACTERS so the trailer always fits inside the slot.

Trailer:
    1 byte      END_OF_PAGE marker
    4 bytes     page number, unsigned little-endian

Design Decisions:
    - Slot offset depends only on the page number: (n - 1) * SLOT_SIZE
    - Pages never overlap, so slots may be written in any order
    - Unused tail of a slot is left as a filesystem gap (zero bytes)
    - Raw bytes only, lines break after ASCII spaces
"""

# Page geometry
CHARACTERS_PER_LINE = 80
LINES_PER_PAGE = 25
RESERVED_TAIL_CHARACTERS = 5  # marker + page number

# Raw input window per page
AVAILABLE_CHARACTERS_PER_PAGE = LINES_PER_PAGE * CHARACTERS_PER_LINE - RESERVED_TAIL_CHARACTERS

# Byte stride between page slots in the output
SLOT_SIZE = LINES_PER_PAGE * CHARACTERS_PER_LINE

# Trailer
END_OF_PAGE = 12
PAGE_NUMBER_BYTES = 4

# Bytes the reflow engine cares about
NEW_LINE = 0x0A
SPACE = 0x20

# Output file, created fresh in the working directory on every run
OUTPUT_FILENAME = "output.txt"

# struct format codes for the page number field, keyed by width
PAGE_NUMBER_FORMATS = {
    1: "<B",
    2: "<H",
    4: "<I",
    8: "<Q",
}
