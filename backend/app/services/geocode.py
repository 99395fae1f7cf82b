"""Address geocoding helper with Redis caching.

Provides a single entrypoint `geocode_address(address)` that returns a
`GeocodeResult` (lat/lng) or `None` when geocoding is unavailable.

- Reads the key from `settings.GOOGLE_MAPS_API_KEY` (env `GOOGLE_MAPS_API_KEY`).
- Uses Redis for coarse caching keyed by the normalized address string.
- Fails fast and returns `None` when:
  - No API key is configured,
  - The Google Geocoding API is unreachable or returns no results.

Provider matching treats `None` as "client distance unknown" rather than an
error.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
import logging

import anyio
import httpx

from app.core.config import settings
from app.utils.redis_cache import get_redis_client

logger = logging.getLogger(__name__)

GEOCODE_URL = "https://maps.googleapis.com/maps/api/geocode/json"
CACHE_KEY_PREFIX = "geo:addr:"


@dataclass
class GeocodeResult:
    lat: float
    lng: float


def _cache_key(address: str) -> str:
    return f"{CACHE_KEY_PREFIX}{' '.join(address.lower().split())}"


def _read_cache(key: str) -> Optional[GeocodeResult]:
    try:
        cached = get_redis_client().get(key)
    except Exception as exc:
        # Cache failures should never break geocoding
        logger.debug("Geocode cache read failed: %s", exc)
        return None
    if not cached:
        return None
    if isinstance(cached, bytes):
        cached = cached.decode("utf-8")
    try:
        lat_s, lng_s = cached.split(",")
        return GeocodeResult(lat=float(lat_s), lng=float(lng_s))
    except ValueError:
        logger.debug("Ignoring malformed geocode cache entry %s", key)
        return None


def _write_cache(key: str, result: GeocodeResult) -> None:
    try:
        get_redis_client().setex(key, settings.GEOCODE_CACHE_TTL, f"{result.lat},{result.lng}")
    except Exception as exc:
        logger.debug("Geocode cache write failed: %s", exc)


async def geocode_address_async(address: str) -> Optional[GeocodeResult]:
    """Async geocoding with simple Redis caching.

    Returns `GeocodeResult` on success or `None` when geocoding is disabled
    or fails.
    """
    if not address or not address.strip(" ,"):
        return None

    key = _cache_key(address)
    cached = _read_cache(key)
    if cached is not None:
        return cached

    api_key = (settings.GOOGLE_MAPS_API_KEY or "").strip()
    if not api_key:
        # Geocoding is effectively disabled; do not attempt network calls.
        logger.info("GOOGLE_MAPS_API_KEY not set; skipping geocoding")
        return None

    try:
        async with httpx.AsyncClient(
            timeout=httpx.Timeout(settings.GEOCODE_TIMEOUT, connect=1.0)
        ) as http:
            res = await http.get(GEOCODE_URL, params={"address": address, "key": api_key})
            res.raise_for_status()
            data = res.json()
    except (httpx.HTTPError, ValueError) as exc:
        logger.warning("Geocoding failed for address %r: %s", address, exc)
        return None

    results = data.get("results") or []
    if not results:
        logger.info("Geocoding returned no results for %r (status=%s)", address, data.get("status"))
        return None
    loc = (results[0].get("geometry") or {}).get("location") or {}
    lat = loc.get("lat")
    lng = loc.get("lng")
    if lat is None or lng is None:
        return None
    result = GeocodeResult(lat=float(lat), lng=float(lng))
    _write_cache(key, result)
    return result


def geocode_address(address: str) -> Optional[GeocodeResult]:
    """Sync wrapper for `geocode_address_async`.

    Intended for sync FastAPI endpoints, which run in a worker thread.
    """
    if not address or not address.strip(" ,"):
        return None
    return anyio.run(geocode_address_async, address)
