"""
Upload decoding into a rectangular cell grid.

Responsibilities:
- encoding detection + decoding (CSV)
- dialect detection (CSV)
- first-worksheet extraction (XLSX)
- row width enforcement (pad short rows)

The returned report describes what was normalized on the way in.
"""

from __future__ import annotations

import csv
import io
import logging
from typing import Any, Dict, List, Tuple
from zipfile import BadZipFile

from charset_normalizer import from_bytes
from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from .errors import ProcessingError, UnsupportedFileError
from .rules import SNIFF_DELIMITERS, SNIFF_SAMPLE_BYTES, SUPPORTED_EXTENSIONS

logger = logging.getLogger(__name__)

Grid = List[List[Any]]


def decode_text(raw: bytes) -> Tuple[str, Dict[str, Any]]:
    """
    Decode upload bytes to text.

    Rules:
    - Detect encoding best-effort via charset-normalizer.
    - A UTF-8 BOM is consumed, never kept as part of the first cell.
    - If decode fails, fall back to UTF-8 with replacement characters and report it.
    - CRLF/CR newlines become LF.
    """
    detected = None
    match = from_bytes(raw).best()
    if match is not None:
        detected = match.encoding

    decode_used = detected or "utf-8"
    if raw.startswith(b"\xef\xbb\xbf") and (decode_used.lower().replace("-", "_") in ("utf_8", "utf8")):
        decode_used = "utf-8-sig"

    decode_fallback = False
    try:
        text = raw.decode(decode_used)
    except (UnicodeDecodeError, LookupError):
        decode_fallback = True
        try:
            text = raw.decode("utf-8-sig")
            decode_used = "utf-8-sig"
        except UnicodeDecodeError:
            # keep going deterministically with replacement characters
            text = raw.decode("utf-8", errors="replace")
            decode_used = "utf-8"

    if decode_fallback:
        logger.warning("Decoding with %s failed, fell back to %s", detected, decode_used)

    newlines_changed = "\r" in text
    text = text.replace("\r\n", "\n").replace("\r", "\n")

    return text, {
        "encoding": {
            "detected": detected,
            "decode_used": decode_used,
            "decode_fallback": decode_fallback,
        },
        "newlines": {"policy": "lf", "changed": newlines_changed},
    }


def _rectangularize(rows: List[List[Any]]) -> Tuple[Grid, Dict[str, Any]]:
    width = max((len(row) for row in rows), default=0)
    padded = 0
    grid: Grid = []

    for row in rows:
        if len(row) < width:
            padded += 1
            row = row + [None] * (width - len(row))
        grid.append(row)

    return grid, {
        "total_rows": len(grid),
        "columns": width,
        "short_rows_padded": padded,
        "policy": {"short_rows": "pad", "output_columns": "max_columns_seen"},
    }


def load_csv_grid(raw: bytes) -> Tuple[Grid, Dict[str, Any]]:
    text, report = decode_text(raw)

    # The title row is narrower than the table; sniff from the column headers on.
    sample = text.split("\n", 1)[1] if "\n" in text else text

    detected_delim = ","
    sniffed = False
    try:
        dialect = csv.Sniffer().sniff(sample[:SNIFF_SAMPLE_BYTES], delimiters=SNIFF_DELIMITERS)
        detected_delim = dialect.delimiter
        sniffed = True
    except csv.Error:
        detected_delim = ","  # default

    try:
        rows = [list(row) for row in csv.reader(io.StringIO(text, newline=""), delimiter=detected_delim)]
    except csv.Error as e:
        raise ProcessingError("Could not parse CSV content", cause=e) from e

    grid, width_report = _rectangularize(rows)
    report["delimiter"] = {"detected": detected_delim, "sniffed": sniffed}
    report["row_width"] = width_report
    return grid, report


def load_xlsx_grid(raw: bytes) -> Tuple[Grid, Dict[str, Any]]:
    """Cell values of the first worksheet; formulas resolve to their cached values."""
    try:
        workbook = load_workbook(io.BytesIO(raw), read_only=True, data_only=True)
    except (InvalidFileException, BadZipFile, KeyError, ValueError, OSError) as e:
        raise ProcessingError("Could not open workbook", cause=e) from e

    try:
        sheet = workbook.worksheets[0]
        rows = [list(row) for row in sheet.iter_rows(values_only=True)]
        sheet_name = sheet.title
    finally:
        workbook.close()

    grid, width_report = _rectangularize(rows)
    return grid, {"worksheet": sheet_name, "row_width": width_report}


def load_grid(filename: str, raw: bytes) -> Tuple[Grid, Dict[str, Any]]:
    """Dispatch on the file extension."""
    name = (filename or "").lower()
    if name.endswith(".csv"):
        return load_csv_grid(raw)
    if name.endswith(".xlsx"):
        return load_xlsx_grid(raw)
    raise UnsupportedFileError(
        f"Only {' or '.join(ext.lstrip('.').upper() for ext in SUPPORTED_EXTENSIONS)} files are supported",
        filename=filename,
    )
