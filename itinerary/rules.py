"""
Deterministic itinerary rules.

Fixed constants shared by the processing pipeline and the formatters.
"""

HEADER_ROWS = 2  # title row + column-header row
DEFAULT_TITLE = "Travel Itinerary"

# Column layout: day, city, date, timing, category, description
COL_DAY = 0
COL_CITY = 1
COL_DATE = 2
COL_TIMING = 3
COL_CATEGORY = 4
COL_DESCRIPTION = 5

HEADER_SENTINELS = {COL_DAY: "day", COL_CITY: "city"}

# Priority order matters: detection returns keywords in this order.
MEAL_KEYWORDS = ("breakfast", "brunch", "lunch", "dinner")
NO_MEALS_TEXT = "No meals detected"
MEAL_SEPARATOR = " & "

MINUTES_PER_DAY = 1440
FULL_DAY_TEXT = "Full day"
ZERO_DURATION_TEXT = "0 hours"

EMPTY_TIME_TEXT = "Time"
DATE_DISPLAY_FORMAT = "{weekday}, {month} {day}, {year}"

_SVG_OPEN = (
    '<svg xmlns="http://www.w3.org/2000/svg" width="16" height="16" viewBox="0 0 24 24" '
    'fill="none" stroke="currentColor" stroke-width="2" stroke-linecap="round" '
    'stroke-linejoin="round">'
)

CATEGORY_ICONS = {
    "sightseeing": _SVG_OPEN
    + '<circle cx="12" cy="12" r="10"/>'
    + '<path d="M12 2a14.5 14.5 0 0 0 0 20 14.5 14.5 0 0 0 0-20"/><path d="M2 12h20"/></svg>',
    "food": _SVG_OPEN
    + '<path d="M7 10h10"/><path d="M7 14h10"/><circle cx="12" cy="12" r="9"/></svg>',
    "transportation": _SVG_OPEN
    + '<path d="M5 18H3c-.6 0-1-.4-1-1V7c0-.6.4-1 1-1h10c.6 0 1 .4 1 1v11"/>'
    + '<path d="M14 9h4l4 4v4c0 .6-.4 1-1 1h-2"/><circle cx="7" cy="18" r="2"/>'
    + '<path d="M15 18H9"/><circle cx="17" cy="18" r="2"/></svg>',
    "accommodation": _SVG_OPEN
    + '<path d="M3 9v9a2 2 0 0 0 2 2h14a2 2 0 0 0 2-2V9"/>'
    + '<path d="M21 9V7a2 2 0 0 0-2-2H5a2 2 0 0 0-2 2v2"/><path d="M6 14h12"/></svg>',
    "activity": _SVG_OPEN
    + '<circle cx="12" cy="12" r="10"/><path d="m16 12-4-4-4 4"/><path d="m16 12-4 4-4-4"/></svg>',
}
DEFAULT_CATEGORY_ICON = _SVG_OPEN + '<circle cx="12" cy="12" r="10"/></svg>'

# Upload decoding, same policy as the CSV normalizer this grew from.
SUPPORTED_EXTENSIONS = (".csv", ".xlsx")
SNIFF_DELIMITERS = [",", ";", "\t", "|"]
SNIFF_SAMPLE_BYTES = 4096
