"""Great-circle distance and service-radius eligibility."""

from __future__ import annotations

import math
from typing import Optional

EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Return great-circle distance in kilometers between two lat/lng pairs."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dl = math.radians(lon2 - lon1)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dl / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def distance_km(
    client_lat: Optional[float],
    client_lng: Optional[float],
    provider_lat: Optional[float],
    provider_lng: Optional[float],
) -> Optional[float]:
    """Distance between client and provider, or None when either side is unknown."""
    if None in (client_lat, client_lng, provider_lat, provider_lng):
        return None
    return haversine_km(client_lat, client_lng, provider_lat, provider_lng)


def is_within_radius(
    distance: Optional[float],
    radius_km: float,
    provider_has_coordinates: bool,
) -> bool:
    """Decide whether a provider serves the client's location.

    A radius of 0 and a provider without coordinates both mean "serves
    everywhere". An unknown distance otherwise counts as outside.
    """
    if not provider_has_coordinates:
        return True
    if radius_km == 0:
        return True
    if distance is None:
        return False
    return distance <= radius_km
