"""Batch loader: delimited text or file → raw rows for the record parser."""

from __future__ import annotations

import csv
import io
import logging
from pathlib import Path

from src.contracts.errors import EmptyBatchError

log = logging.getLogger(__name__)

_DELIMITERS = ",;\t|"


def _sniff_delimiter(header_line: str) -> str:
    try:
        return csv.Sniffer().sniff(header_line, delimiters=_DELIMITERS).delimiter
    except csv.Error:
        return ","


def read_rows(text: str) -> list[dict[str, str]]:
    """Split delimited text (header row required) into string-keyed rows.

    Raises:
        EmptyBatchError: If *text* is empty or whitespace-only.
    """
    if not text or not text.strip():
        raise EmptyBatchError()

    text = text.lstrip("\ufeff")
    header_line = next(line for line in text.splitlines() if line.strip())
    delimiter = _sniff_delimiter(header_line)

    reader = csv.DictReader(io.StringIO(text.strip()), delimiter=delimiter)
    if reader.fieldnames:
        reader.fieldnames = [name.strip() for name in reader.fieldnames]

    rows: list[dict[str, str]] = []
    for row in reader:
        # skip blank lines (DictReader yields them as all-None/empty rows)
        if not any((v or "").strip() for k, v in row.items() if k is not None):
            continue
        rows.append({k: v for k, v in row.items() if k is not None})

    log.debug("Read %d rows (delimiter=%r, columns=%s)", len(rows), delimiter, reader.fieldnames)
    return rows


def load_batch_file(path: str | Path) -> list[dict[str, str]]:
    """Read a batch file (UTF-8, BOM tolerated) into rows."""
    p = Path(path)
    text = p.read_text(encoding="utf-8-sig")
    rows = read_rows(text)
    log.info("Loaded %d rows from %s", len(rows), p.name)
    return rows
