"""
Core itinerary processing.

Responsibilities:
- row filtering (required cells, repeated header rows)
- grouping rows into day buckets (first row wins for city/date)
- meal detection per item, accumulated per day
- day duration from logged timings
- assembling the itinerary aggregate

Malformed content never raises: rows are dropped, timings skipped and the
title defaulted, each recorded as a diagnostic. Only a grid that cannot be
indexed at all raises ProcessingError.
"""

from __future__ import annotations

import logging
import re
from datetime import date, datetime, time
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .errors import ProcessingError
from .models import DayData, ItineraryData, ItineraryItem
from .rules import (
    COL_CATEGORY,
    COL_CITY,
    COL_DATE,
    COL_DAY,
    COL_DESCRIPTION,
    COL_TIMING,
    DEFAULT_TITLE,
    FULL_DAY_TEXT,
    HEADER_ROWS,
    HEADER_SENTINELS,
    MEAL_KEYWORDS,
    MINUTES_PER_DAY,
    ZERO_DURATION_TEXT,
)

logger = logging.getLogger(__name__)

_TIME_RE = re.compile(r"([0-9]{1,2}):([0-9]{2})")

Diagnostics = List[Dict[str, Any]]


def cell_text(value: Any) -> str:
    """
    Coerce a raw grid cell (str, number, date or empty) to text.

    Integral floats drop the trailing ".0" so a spreadsheet day of 1.0 keys
    the same bucket as "1". Midnight datetimes render as a plain ISO date and
    time cells as HH:MM, matching what a sheet shows.
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, datetime):
        if value.time() == datetime.min.time():
            return value.date().isoformat()
        return value.isoformat(sep=" ")
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, time):
        return value.strftime("%H:%M") if value.second == 0 else value.isoformat()
    return str(value)


def _cell(row: Sequence[Any], index: int) -> str:
    if index >= len(row):
        return ""
    return cell_text(row[index])


def _skip_reason(row: Sequence[Any]) -> Optional[str]:
    for index in (COL_DAY, COL_CITY, COL_DESCRIPTION):
        if _cell(row, index) == "":
            return "missing_required_cell"

    for index, sentinel in HEADER_SENTINELS.items():
        if _cell(row, index).strip().lower() == sentinel:
            return "repeated_header"

    return None


def is_data_row(row: Sequence[Any]) -> bool:
    """Day, city and description present, and not a stray header row."""
    return _skip_reason(row) is None


def _check_grid(grid: Any) -> None:
    if isinstance(grid, (str, bytes)) or not isinstance(grid, Sequence):
        raise ProcessingError(f"Grid must be a sequence of rows, got {type(grid).__name__}")

    for i, row in enumerate(grid):
        if isinstance(row, (str, bytes)) or not isinstance(row, Sequence):
            raise ProcessingError(
                f"Row {i + 1} must be a sequence of cells, got {type(row).__name__}",
                row=i + 1,
            )


def filter_rows(
    grid: Sequence[Sequence[Any]],
    diagnostics: Optional[Diagnostics] = None,
) -> List[Tuple[int, Sequence[Any]]]:
    """
    Return (row_number, row) for every usable data row after the header rows.

    Row numbers are 1-based grid positions. Dropped rows are only recorded
    when a diagnostics list is passed.
    """
    kept: List[Tuple[int, Sequence[Any]]] = []

    for i, row in enumerate(grid[HEADER_ROWS:], start=HEADER_ROWS + 1):
        reason = _skip_reason(row)
        if reason is None:
            kept.append((i, row))
            continue

        if diagnostics is not None:
            diagnostics.append({
                "row": i,
                "column": None,
                "issue": reason,
                "value": _cell(row, COL_DAY) or None,
                "action": "row_skipped",
            })

    return kept


def detect_meals(category: Any, description: Any) -> List[str]:
    """
    Meal keywords mentioned in an item, in keyword priority order.

    Plain substring match: "lunchbox" counts as lunch.
    """
    text = f"{cell_text(category)} {cell_text(description)}".lower()
    return [keyword for keyword in MEAL_KEYWORDS if keyword in text]


def group_days(rows: Sequence[Tuple[int, Sequence[Any]]]) -> Dict[str, DayData]:
    """Fold filtered rows into day buckets keyed by the day cell."""
    grouped: Dict[str, DayData] = {}

    for _, row in rows:
        key = _cell(row, COL_DAY)
        bucket = grouped.get(key)
        if bucket is None:
            bucket = DayData(day=key, city=_cell(row, COL_CITY), date=_cell(row, COL_DATE))
            grouped[key] = bucket

        category = _cell(row, COL_CATEGORY)
        description = _cell(row, COL_DESCRIPTION)
        item = ItineraryItem(
            timing=_cell(row, COL_TIMING).strip(),
            category=category,
            description=description,
        )
        bucket.add_item(item, detect_meals(category, description))

    return grouped


def _parse_minutes(
    timing: str,
    diagnostics: Optional[Diagnostics],
    row: Optional[int] = None,
    warn: bool = True,
) -> Optional[int]:
    match = _TIME_RE.fullmatch(timing)
    if not match:
        issue, message = "invalid_time_format", "Invalid time format: %s"
    else:
        hours, minutes = int(match.group(1)), int(match.group(2))
        if hours <= 23 and minutes <= 59:
            return hours * 60 + minutes
        issue, message = "invalid_time_value", "Invalid time value: %s"

    if warn:
        logger.warning(message, timing)

    if diagnostics is not None:
        diagnostics.append({
            "row": row,
            "column": "timing",
            "issue": issue,
            "value": timing,
            "action": "excluded_from_duration",
        })
    return None


def _elapsed_minutes(times: Sequence[int]) -> int:
    # a drop of more than 12h from the previous entry means the clock passed midnight
    offset = 0
    adjusted: List[int] = []
    for previous, minutes in zip([None] + list(times), times):
        if previous is not None and previous - minutes > MINUTES_PER_DAY // 2:
            offset += MINUTES_PER_DAY
        adjusted.append(minutes + offset)
    return max(adjusted) - min(adjusted)


def calculate_duration(
    items: Sequence[ItineraryItem],
    diagnostics: Optional[Diagnostics] = None,
) -> str:
    """
    Human-readable span between the first and last logged activity.

    The span from the earliest to the latest time. Entries are read in row
    order; one that is more than 12h earlier than the entry before it is taken
    to fall after midnight, so 23:00 then 01:00 spans 2 hours.
    """
    if not items:
        return ZERO_DURATION_TEXT

    times: List[int] = []
    for item in items:
        minutes = _parse_minutes(item.timing, diagnostics)
        if minutes is not None:
            times.append(minutes)

    if not times:
        return ZERO_DURATION_TEXT

    duration = _elapsed_minutes(times)

    if duration >= MINUTES_PER_DAY:
        return FULL_DAY_TEXT
    if duration % 60 == 0:
        return f"{duration // 60} hours"
    return f"{duration / 60:.1f} hours"


def _title(grid: Sequence[Sequence[Any]]) -> str:
    if not grid or len(grid[0]) < 2:
        return DEFAULT_TITLE
    return cell_text(grid[0][1]).strip() or DEFAULT_TITLE


def build_itinerary(grid: Sequence[Sequence[Any]]) -> Tuple[ItineraryData, Diagnostics]:
    """
    Assemble the itinerary aggregate and the diagnostics gathered on the way.

    Diagnostics cover dropped rows and timings that cannot feed a duration.
    """
    _check_grid(grid)

    diagnostics: Diagnostics = []
    rows = filter_rows(grid, diagnostics)
    days = group_days(rows)

    for row_number, row in rows:
        _parse_minutes(_cell(row, COL_TIMING).strip(), diagnostics, row_number, warn=False)

    itinerary = ItineraryData(title=_title(grid), days=days)
    logger.debug(
        "Processed %d data rows into %d days (%d warnings)",
        len(rows), len(days), len(diagnostics),
    )
    return itinerary, diagnostics


def process_itinerary(grid: Sequence[Sequence[Any]]) -> ItineraryData:
    """Grid in, itinerary out. No I/O, no persistence."""
    itinerary, _ = build_itinerary(grid)
    return itinerary
