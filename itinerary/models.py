from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class ItineraryItem(BaseModel):
    timing: str = ""
    category: str = ""
    description: str = ""


class DayData(BaseModel):
    """
    One day bucket.

    `all_meals` is an insertion-ordered, deduplicated list of meal keywords
    accumulated as items are added (first detection first).
    """

    day: str
    city: str
    date: str = ""
    items: List[ItineraryItem] = Field(default_factory=list)
    all_meals: List[str] = Field(default_factory=list)

    def add_item(self, item: ItineraryItem, meals: List[str]) -> None:
        self.items.append(item)
        for meal in meals:
            if meal not in self.all_meals:
                self.all_meals.append(meal)


class ItineraryData(BaseModel):
    title: str
    # Key order is not day order; see formatting.ordered_days.
    days: Dict[str, DayData] = Field(default_factory=dict)


class RowDiagnostic(BaseModel):
    row: Optional[int] = None
    column: Optional[str] = None
    issue: str
    value: Optional[str] = None
    action: str


class ReportSummary(BaseModel):
    rows: int = 0
    days: int = 0
    items: int = 0
    warnings: int = 0


class ProcessingReport(BaseModel):
    summary: ReportSummary
    source: Dict[str, Any] = Field(default_factory=dict)
    warnings: List[RowDiagnostic] = Field(default_factory=list)


class CreateItineraryResponse(BaseModel):
    id: str
    itinerary: ItineraryData
    report: ProcessingReport


class StoredItinerary(BaseModel):
    id: str
    user_id: str
    itinerary: ItineraryData
    created_at: datetime
    updated_at: datetime


class ItinerarySummary(BaseModel):
    id: str
    title: str
    days: int


class ItemView(BaseModel):
    time: str
    category: str
    description: str
    icon: str


class DaySummary(BaseModel):
    day: str
    city: str
    date: str
    duration: str
    meals: str
    items: List[ItemView] = Field(default_factory=list)


class MapLocation(BaseModel):
    name: str
    lat: float
    lng: float


class MapView(BaseModel):
    locations: List[MapLocation] = Field(default_factory=list)
    center: Optional[MapLocation] = None
    zoom: Optional[int] = Field(default=None, examples=[None])
    distance_km: float = 0.0


class HealthResponse(BaseModel):
    ok: bool = True
