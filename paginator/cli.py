"""
Command-line entry point.

    paginator FILE
    python -m paginator FILE

Writes the paginated result to output.txt in the current directory.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys

from paginator.driver import paginate_file
from paginator.errors import PaginatorError, UsageError
from paginator.spec import OUTPUT_FILENAME

logger = logging.getLogger("paginator")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="paginator",
        description=f"Reflow a file into fixed-size numbered pages, written to {OUTPUT_FILENAME}.",
    )
    parser.add_argument("filename", nargs="?", help="File to paginate")
    return parser


def check_input(filename: str | None) -> str:
    """Return a readable input path or raise UsageError."""
    if not filename:
        raise UsageError("missing argument: filename")
    if not os.path.exists(filename):
        raise UsageError(f"File {filename} not found. Please, provide a valid filename")
    if not os.path.isfile(filename) or not os.access(filename, os.R_OK):
        raise UsageError(
            f"File {filename} could not be opened. Please, check permissions "
            "or any other cause that might be making the program fail"
        )
    return filename


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s", stream=sys.stderr)

    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        filename = check_input(args.filename)
    except UsageError as exc:
        parser.print_usage(sys.stdout)
        print(exc)
        return 1

    try:
        paginate_file(filename, OUTPUT_FILENAME)
    except (PaginatorError, OSError) as exc:
        print("error reading from or writing to the file")
        logger.error("%s", exc)
        return 1

    print("File is ready")
    return 0


if __name__ == "__main__":
    sys.exit(main())
