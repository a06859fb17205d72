"""In-memory itinerary repository keyed by itinerary id."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Dict, List, Optional

from .models import ItineraryData, ItinerarySummary, StoredItinerary

logger = logging.getLogger(__name__)


class InMemoryItineraryStore:
    """Holds snapshots of processed itineraries; callers get copies, never the stored object."""

    def __init__(self) -> None:
        self._records: Dict[str, StoredItinerary] = {}

    def create(self, itinerary: ItineraryData, user_id: str) -> str:
        itinerary_id = f"itinerary_{uuid.uuid4().hex}"
        now = datetime.now()
        self._records[itinerary_id] = StoredItinerary(
            id=itinerary_id,
            user_id=user_id,
            itinerary=itinerary.model_copy(deep=True),
            created_at=now,
            updated_at=now,
        )
        logger.info("Created itinerary %s for user %s", itinerary_id, user_id)
        return itinerary_id

    def get(self, itinerary_id: str) -> Optional[StoredItinerary]:
        record = self._records.get(itinerary_id)
        if record is None:
            return None
        return record.model_copy(deep=True)

    def list_for_user(self, user_id: str) -> List[ItinerarySummary]:
        return [
            ItinerarySummary(id=record.id, title=record.itinerary.title, days=len(record.itinerary.days))
            for record in sorted(self._records.values(), key=lambda r: r.created_at)
            if record.user_id == user_id
        ]

    def update(self, itinerary_id: str, itinerary: ItineraryData) -> bool:
        record = self._records.get(itinerary_id)
        if record is None:
            return False

        self._records[itinerary_id] = record.model_copy(
            update={"itinerary": itinerary.model_copy(deep=True), "updated_at": datetime.now()}
        )
        logger.info("Updated itinerary %s", itinerary_id)
        return True

    def delete(self, itinerary_id: str) -> bool:
        if self._records.pop(itinerary_id, None) is None:
            return False
        logger.info("Deleted itinerary %s", itinerary_id)
        return True
