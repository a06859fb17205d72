import logging
from functools import lru_cache
from typing import List, Optional

from fastapi import Depends, FastAPI, File, Form, HTTPException, Response, UploadFile
from fastapi.responses import PlainTextResponse

from .config import Settings, get_settings
from .errors import ProcessingError, UnsupportedFileError
from .export import render_text
from .formatting import ordered_days, summarize_day
from .geo import itinerary_locations, map_view
from .loaders import load_grid
from .models import (
    CreateItineraryResponse,
    DaySummary,
    HealthResponse,
    ItineraryData,
    ItinerarySummary,
    MapView,
    ProcessingReport,
    ReportSummary,
)
from .processor import build_itinerary
from .store import InMemoryItineraryStore

logging.basicConfig(
    level=get_settings().log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="itinerary-processor",
    description="Spreadsheet travel itineraries grouped into days with meals and durations",
    version="0.1.0",
)


@lru_cache
def get_store() -> InMemoryItineraryStore:
    return InMemoryItineraryStore()


def _load_itinerary(itinerary_id: str, store: InMemoryItineraryStore) -> ItineraryData:
    record = store.get(itinerary_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Itinerary not found")
    return record.itinerary


@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}


@app.post("/itineraries", response_model=CreateItineraryResponse, status_code=201)
async def create_itinerary(
    file: UploadFile = File(...),
    user_id: Optional[str] = Form(None),
    settings: Settings = Depends(get_settings),
    store: InMemoryItineraryStore = Depends(get_store),
):
    raw = await file.read(settings.max_upload_bytes + 1)
    if len(raw) > settings.max_upload_bytes:
        raise HTTPException(status_code=413, detail="File too large")

    try:
        grid, source_report = load_grid(file.filename, raw)
        itinerary, warnings = build_itinerary(grid)
    except UnsupportedFileError as e:
        raise HTTPException(status_code=422, detail=e.message)
    except ProcessingError as e:
        logger.warning("Could not process %s: %s", file.filename, e)
        raise HTTPException(status_code=422, detail="Could not process file")

    itinerary_id = store.create(itinerary, user_id or settings.default_user_id)

    return CreateItineraryResponse(
        id=itinerary_id,
        itinerary=itinerary,
        report=ProcessingReport(
            summary=ReportSummary(
                rows=len(grid),
                days=len(itinerary.days),
                items=sum(len(day.items) for day in itinerary.days.values()),
                warnings=len(warnings),
            ),
            source=source_report,
            warnings=warnings,
        ),
    )


@app.get("/itineraries", response_model=List[ItinerarySummary])
def list_itineraries(
    user_id: Optional[str] = None,
    settings: Settings = Depends(get_settings),
    store: InMemoryItineraryStore = Depends(get_store),
):
    return store.list_for_user(user_id or settings.default_user_id)


@app.get("/itineraries/{itinerary_id}", response_model=ItineraryData)
def get_itinerary(itinerary_id: str, store: InMemoryItineraryStore = Depends(get_store)):
    return _load_itinerary(itinerary_id, store)


@app.get("/itineraries/{itinerary_id}/days", response_model=List[DaySummary])
def get_day_summaries(itinerary_id: str, store: InMemoryItineraryStore = Depends(get_store)):
    itinerary = _load_itinerary(itinerary_id, store)
    return [summarize_day(day) for day in ordered_days(itinerary)]


@app.get("/itineraries/{itinerary_id}/map", response_model=MapView)
def get_map(itinerary_id: str, store: InMemoryItineraryStore = Depends(get_store)):
    itinerary = _load_itinerary(itinerary_id, store)
    return map_view(itinerary_locations(itinerary))


@app.get("/itineraries/{itinerary_id}/export", response_class=PlainTextResponse)
def export_itinerary(itinerary_id: str, store: InMemoryItineraryStore = Depends(get_store)):
    return render_text(_load_itinerary(itinerary_id, store))


@app.delete("/itineraries/{itinerary_id}", status_code=204)
def delete_itinerary(itinerary_id: str, store: InMemoryItineraryStore = Depends(get_store)):
    if not store.delete(itinerary_id):
        raise HTTPException(status_code=404, detail="Itinerary not found")
    return Response(status_code=204)
