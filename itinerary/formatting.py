"""
Display formatting for processed itineraries.

Pure helpers used by renderers (day views, text export, map overlay). They
never raise on odd input; unknown values fall back to a readable default.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any, Iterable, List, Optional, Tuple

from dateutil import parser as dateparser

from .models import DayData, DaySummary, ItemView, ItineraryData
from .processor import calculate_duration, cell_text
from .rules import (
    CATEGORY_ICONS,
    DATE_DISPLAY_FORMAT,
    DEFAULT_CATEGORY_ICON,
    EMPTY_TIME_TEXT,
    MEAL_KEYWORDS,
    MEAL_SEPARATOR,
    NO_MEALS_TEXT,
)

# en-US names, independent of the process locale
_WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

_DAY_NUMBER_RE = re.compile(r"-?\d+")
_ZONE_NAME_RE = re.compile(r"\s*\([^()]*\)\s*$")
_DATE_DEFAULT = datetime(2001, 1, 1)


def format_meals(meals: Iterable[str]) -> str:
    """
    "Breakfast & Dinner" style text, or "No meals detected".

    Lists keep their order (detection order for DayData.all_meals). Plain
    sets have no order, so they are put in keyword priority order first.
    """
    if isinstance(meals, (set, frozenset)):
        meals = sorted(meals, key=_meal_priority)
    meals = list(meals)
    if not meals:
        return NO_MEALS_TEXT
    return MEAL_SEPARATOR.join(meal[:1].upper() + meal[1:] for meal in meals)


def _meal_priority(meal: str) -> Tuple[int, str]:
    try:
        return MEAL_KEYWORDS.index(meal), meal
    except ValueError:
        return len(MEAL_KEYWORDS), meal


def format_time(value: Any) -> str:
    if not value:
        return EMPTY_TIME_TEXT
    return cell_text(value).strip()


def _render_date(value: date) -> str:
    return DATE_DISPLAY_FORMAT.format(
        weekday=_WEEKDAYS[value.weekday()],
        month=_MONTHS[value.month - 1],
        day=value.day,
        year=value.year,
    )


def _parse_date_text(text: str) -> Optional[datetime]:
    # JS Date.toString() output carries a "(Zone Name)" suffix dateutil rejects
    candidates = [text, _ZONE_NAME_RE.sub("", text), text.split("GMT")[0]]
    for candidate in candidates:
        if not candidate.strip():
            continue
        try:
            return dateparser.parse(candidate, default=_DATE_DEFAULT)
        except (ValueError, OverflowError):
            continue
    return None


def format_date(value: Any) -> str:
    """
    "Thu, May 1, 2025" for dates and parseable date strings.

    Missing date parts are filled from 2001-01-01, never from today.
    Anything else comes back as text, cut before a trailing "GMT..." suffix.
    """
    if isinstance(value, (date, datetime)):
        return _render_date(value)

    text = cell_text(value)
    parsed = _parse_date_text(text)
    if parsed is not None:
        return _render_date(parsed)

    return text.split("GMT")[0].strip()


def get_category_icon(category: Any) -> str:
    """Inline SVG for the category; a plain circle for anything unknown."""
    key = cell_text(category).strip().lower()
    return CATEGORY_ICONS.get(key, DEFAULT_CATEGORY_ICON)


def day_sort_key(day_key: str) -> Tuple[int, int, str]:
    """
    Order day keys by the number they carry ("2" < "10", "Day 3" -> 3).

    Keys without a number sort after numbered ones, by text.
    """
    match = _DAY_NUMBER_RE.search(day_key)
    if match is None:
        return 1, 0, day_key
    return 0, int(match.group()), day_key


def ordered_days(itinerary: ItineraryData) -> List[DayData]:
    return [itinerary.days[key] for key in sorted(itinerary.days, key=day_sort_key)]


def summarize_day(day: DayData) -> DaySummary:
    """Everything a renderer shows for one day, already formatted."""
    return DaySummary(
        day=day.day,
        city=day.city,
        date=format_date(day.date),
        duration=calculate_duration(day.items),
        meals=format_meals(day.all_meals),
        items=[
            ItemView(
                time=format_time(item.timing),
                category=item.category,
                description=item.description,
                icon=get_category_icon(item.category),
            )
            for item in day.items
        ],
    )
