"""Reading uploaded batch files into raw three-field records."""

from __future__ import annotations

import csv
import io
import logging
import os
from typing import List

from .errors import FileProcessingError

logger = logging.getLogger(__name__)

DEFAULT_MAX_BYTES = 5 * 1024 * 1024


def max_upload_bytes() -> int:
    return int(os.getenv("SOCKS_IMPORT_MAX_BYTES", str(DEFAULT_MAX_BYTES)))


def read_csv_records(content: bytes) -> List[List[str]]:
    """
    Decode a CSV upload into raw rows, cells kept verbatim.

    No header row is expected. Blank lines inside the file come back as
    records so the import pipeline rejects them; only trailing blank lines
    are dropped.
    """
    if len(content) > max_upload_bytes():
        logger.error("Batch file too large: %s bytes", len(content))
        raise FileProcessingError("File is too large to import.")
    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        logger.error("Batch file is not valid UTF-8: %s", exc)
        raise FileProcessingError("File must be UTF-8 encoded CSV.") from exc

    records: List[List[str]] = []
    try:
        for row in csv.reader(io.StringIO(text, newline="")):
            records.append(row if row else [""])
    except csv.Error as exc:
        logger.error("Malformed CSV in batch file: %s", exc)
        raise FileProcessingError(f"Error while processing file: {exc}") from exc
    while records and records[-1] == [""]:
        records.pop()
    return records
