"""
Nominatim-compatible geocoding client.

``geocode("Connaught Place")`` -> ``GeocodeResult`` or ``None`` when the
service knows no such place.  Both hits and misses are cached in a
``BoundedTTLCache`` keyed by the normalised query.
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from fleetroute.domain.entities import GeocodeResult, GeoPoint, InvalidCoordinates
from fleetroute.infrastructure.cache import BoundedTTLCache

logger = logging.getLogger(__name__)

_MISSING = object()


class GeocodingError(RuntimeError):
    """Raised when the geocoding service cannot be reached or answers badly."""


def normalise_query(query: str) -> str:
    return " ".join(query.split()).casefold()


class NominatimClient:
    def __init__(
        self,
        *,
        base_url: str,
        user_agent: str,
        timeout: float = 5.0,
        cache: Optional[BoundedTTLCache] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.cache = cache
        # Nominatim usage policy requires an identifying user agent
        self._headers = {"accept": "application/json", "user-agent": user_agent}

        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=httpx.Timeout(timeout))

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def geocode(self, query: str) -> Optional[GeocodeResult]:
        key = normalise_query(query)
        if not key:
            return None

        if self.cache is not None:
            cached = self.cache.get(key, _MISSING)
            if cached is not _MISSING:
                logger.debug("Geocode cache hit for %r", key)
                return cached

        result = await self._search(query)
        if self.cache is not None:
            self.cache.set(key, result)
        return result

    async def _search(self, query: str) -> Optional[GeocodeResult]:
        try:
            resp = await self._client.get(
                f"{self.base_url}/search",
                params={"q": query, "format": "json", "limit": 1},
                headers=self._headers,
            )
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPError as e:
            raise GeocodingError(f"geocoding request failed: {e!r}") from e
        except ValueError as e:
            raise GeocodingError("geocoding response is not JSON") from e

        if not isinstance(data, list):
            raise GeocodingError("geocoding response is not a list")
        if not data:
            logger.info("No geocoding match for %r", query)
            return None

        first = data[0]
        try:
            point = GeoPoint(float(first["lat"]), float(first["lon"])).validate()
        except (KeyError, TypeError, ValueError, InvalidCoordinates) as e:
            raise GeocodingError(f"malformed geocoding result: {e!r}") from e

        return GeocodeResult(point=point, display_name=first.get("display_name", query))
