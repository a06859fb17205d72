"""Plain-text export of an itinerary, one block per day in day order."""

from __future__ import annotations

from typing import List

from .formatting import ordered_days, summarize_day
from .models import ItineraryData

RULE = "-" * 40


def render_text(itinerary: ItineraryData) -> str:
    lines: List[str] = [itinerary.title, ""]

    for day in ordered_days(itinerary):
        summary = summarize_day(day)
        lines.append(f"Day {summary.day} - {summary.city} ({summary.date})")
        lines.append(RULE)
        for item in summary.items:
            lines.append(f"{item.time} - {item.category}: {item.description}")
        lines.append(f"Meals: {summary.meals}")
        lines.append(f"Duration: {summary.duration}")
        lines.append("")

    return "\n".join(lines)
