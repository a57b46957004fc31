"""Streaming reader for the delimited nutrition dataset file."""

import csv
import logging
import sys
from collections.abc import Iterator
from pathlib import Path

_logger = logging.getLogger(__name__)


def iter_rows(
    path: Path, delimiter: str = ",", max_lines: int | None = None
) -> Iterator[dict[str, str]]:
    """Yield dataset rows as header-keyed dicts, one physical line at a time.

    The file handle lives exactly as long as the generator: it is released on
    exhaustion, on ``close()`` after an early break, and on errors. Rows whose
    field count differs from the header, or that the parser rejects, are
    skipped. ``max_lines`` bounds the data lines read, skipped ones included.
    Raises ``OSError`` when the file cannot be opened.
    """
    _raise_field_size_limit()
    with path.open("r", encoding="utf-8", errors="replace", newline="") as handle:
        header_line = handle.readline()
        if not header_line:
            return
        header = [
            name.strip().strip('"')
            for name in _split(header_line, delimiter) or []
        ]
        read = 0
        skipped = 0
        for line in handle:
            if max_lines is not None and read >= max_lines:
                break
            read += 1
            values = _split(line, delimiter)
            if values is None or len(values) != len(header):
                skipped += 1
                continue
            yield dict(zip(header, (value.strip() for value in values), strict=True))
        if skipped:
            _logger.debug("Skipped %s malformed rows in %s", skipped, path)


def _raise_field_size_limit() -> None:
    # Open Food Facts rows carry very long ingredient and tag fields.
    limit = sys.maxsize
    while csv.field_size_limit() < limit:
        try:
            csv.field_size_limit(limit)
        except OverflowError:
            limit //= 2


def _split(line: str, delimiter: str) -> list[str] | None:
    """Parse one line, honouring quotes around embedded delimiters."""
    try:
        return next(csv.reader([line.rstrip("\r\n")], delimiter=delimiter))
    except (csv.Error, StopIteration):
        return None
