"""
Map overlay support: static city coordinates and great-circle estimates.

There is no geocoding service behind this; cities outside the table are
simply left off the map.
"""

from __future__ import annotations

import math
from typing import List, Optional, Sequence

from .formatting import ordered_days
from .models import ItineraryData, MapLocation, MapView

EARTH_RADIUS_KM = 6371.0

CITY_COORDINATES = {
    "paris": (48.8566, 2.3522),
    "london": (51.5074, -0.1278),
    "new york": (40.7128, -74.0060),
    "tokyo": (35.6762, 139.6503),
    "rome": (41.9028, 12.4964),
    "sydney": (-33.8688, 151.2093),
    "barcelona": (41.3851, 2.1734),
    "amsterdam": (52.3676, 4.9041),
    "berlin": (52.5200, 13.4050),
    "madrid": (40.4168, -3.7038),
    "venice": (45.4408, 12.3155),
    "florence": (43.7696, 11.2558),
    "prague": (50.0755, 14.4378),
    "vienna": (48.2082, 16.3738),
    "athens": (37.9838, 23.7275),
    "dubai": (25.2048, 55.2708),
    "singapore": (1.3521, 103.8198),
    "bangkok": (13.7563, 100.5018),
    "hong kong": (22.3193, 114.1694),
    "seoul": (37.5665, 126.9780),
}

# (max deviation in degrees, zoom); anything wider gets the fallback zoom
ZOOM_STEPS = ((0.1, 11), (0.5, 10), (1, 9), (2, 8), (4, 7), (8, 6))
SINGLE_LOCATION_ZOOM = 12
WIDE_ZOOM = 5


def city_coordinates(city: str) -> Optional[MapLocation]:
    coords = CITY_COORDINATES.get((city or "").strip().lower())
    if coords is None:
        return None
    return MapLocation(name=city, lat=coords[0], lng=coords[1])


def haversine_km(a: MapLocation, b: MapLocation) -> float:
    lat1, lat2 = math.radians(a.lat), math.radians(b.lat)
    dlat = lat2 - lat1
    dlng = math.radians(b.lng - a.lng)

    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlng / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(h))


def itinerary_locations(itinerary: ItineraryData) -> List[MapLocation]:
    """Known cities in day order, consecutive repeats collapsed."""
    locations: List[MapLocation] = []
    for day in ordered_days(itinerary):
        location = city_coordinates(day.city)
        if location is None:
            continue
        if locations and locations[-1].name.lower() == location.name.lower():
            continue
        locations.append(location)
    return locations


def route_distance_km(locations: Sequence[MapLocation]) -> float:
    return sum(haversine_km(a, b) for a, b in zip(locations, locations[1:]))


def map_view(locations: Sequence[MapLocation]) -> MapView:
    """Center on the mean position and zoom out until every point fits."""
    if not locations:
        return MapView()

    center = MapLocation(
        name="center",
        lat=sum(loc.lat for loc in locations) / len(locations),
        lng=sum(loc.lng for loc in locations) / len(locations),
    )

    if len(locations) == 1:
        zoom = SINGLE_LOCATION_ZOOM
    else:
        spread = max(math.hypot(loc.lat - center.lat, loc.lng - center.lng) for loc in locations)
        zoom = next((z for limit, z in ZOOM_STEPS if spread < limit), WIDE_ZOOM)

    return MapView(
        locations=list(locations),
        center=center,
        zoom=zoom,
        distance_km=round(route_distance_km(locations), 1),
    )
