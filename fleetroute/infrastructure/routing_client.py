"""
OSRM-compatible road-routing client.

Calls ``GET {base}/route/v1/{profile}/{lon,lat};{lon,lat}`` and converts the
returned routes to ``RouteEstimate`` objects (metres -> km, seconds ->
minutes, GeoJSON geometry kept as ``[[lon, lat], ...]``).  ``fetch_route``
keeps the primary route; ``fetch_routes`` asks for alternatives and keeps
every route in service order.

Retry policy
------------
* 408 / 425 / 429 / 5xx and transport errors are retried with exponential
  backoff (``backoff_base x 2^attempt``, capped at 2 s).
* Any other 4xx, an OSRM ``code`` other than ``"Ok"``, an empty route list
  or a malformed payload (including a negative or non-finite distance or
  duration) fails immediately.
"""

from __future__ import annotations

import asyncio
import logging
import math
from typing import Any, Final, Optional

import httpx

from fleetroute.domain.entities import GeoPoint, RouteEstimate
from fleetroute.domain.enums import RouteSource

logger = logging.getLogger(__name__)

_RETRYABLE_STATUS: Final[set[int]] = {408, 425, 429, 500, 502, 503, 504}
_MAX_BACKOFF_S: Final[float] = 2.0


class RoutingServiceError(RuntimeError):
    pass


class RoutingServiceRetryableError(RoutingServiceError):
    """A routing error that is likely transient and safe to retry."""


def _format_error(resp: httpx.Response) -> str:
    try:
        data = resp.json()
    except ValueError:
        data = None
    if isinstance(data, dict) and (data.get("code") or data.get("message")):
        return f"routing {resp.status_code} {data.get('code')}: {data.get('message')}"

    body = (resp.text or "").strip().replace("\n", " ")[:240]
    return f"routing HTTP {resp.status_code}: {body}" if body else f"routing HTTP {resp.status_code}"


def _route_list(data: Any) -> list[Any]:
    if not isinstance(data, dict):
        raise RoutingServiceError("routing response is not a JSON object")
    if data.get("code") != "Ok":
        raise RoutingServiceError(
            f"routing error code={data.get('code')} message={data.get('message')}"
        )

    routes = data.get("routes")
    if not isinstance(routes, list) or not routes:
        raise RoutingServiceError("routing service returned no routes")
    return routes


def _parse_one(route: Any) -> RouteEstimate:
    try:
        distance_m = float(route["distance"])
        duration_s = float(route["duration"])
    except (KeyError, TypeError, ValueError) as e:
        raise RoutingServiceError(f"malformed route: {e!r}") from e

    # json accepts NaN / Infinity literals
    if not (math.isfinite(distance_m) and math.isfinite(duration_s)):
        raise RoutingServiceError(
            f"non-finite route distance={distance_m} duration={duration_s}"
        )
    if distance_m < 0 or duration_s < 0:
        raise RoutingServiceError(
            f"negative route distance={distance_m} duration={duration_s}"
        )

    geometry = None
    geo = route.get("geometry")
    if isinstance(geo, dict) and isinstance(geo.get("coordinates"), list):
        try:
            geometry = [list(map(float, c)) for c in geo["coordinates"]]
        except (TypeError, ValueError) as e:
            raise RoutingServiceError(f"malformed route geometry: {e!r}") from e

    return RouteEstimate(
        distance_km=distance_m / 1000.0,
        duration_min=duration_s / 60.0,
        source=RouteSource.ROUTING_SERVICE,
        geometry=geometry,
    )


def parse_route(data: Any) -> RouteEstimate:
    """Convert an OSRM ``/route`` payload into a ``RouteEstimate`` (first route)."""
    return _parse_one(_route_list(data)[0])


def parse_routes(data: Any) -> list[RouteEstimate]:
    """Every route of an OSRM ``/route`` payload, in service order."""
    return [_parse_one(route) for route in _route_list(data)]


class OSRMClient:
    def __init__(
        self,
        *,
        base_url: str,
        profile: str = "driving",
        timeout: float = 5.0,
        max_retries: int = 2,
        backoff_base: float = 0.25,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.profile = profile
        self.timeout = timeout
        self.max_retries = max(0, int(max_retries))
        self.backoff_base = backoff_base

        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout, connect=min(timeout, 5.0)),
            headers={"accept": "application/json"},
        )

    @property
    def deadline_seconds(self) -> float:
        """Worst-case time for one look-up: every attempt plus every backoff."""
        backoff = sum(self._backoff(attempt) for attempt in range(self.max_retries))
        return self.timeout * (self.max_retries + 1) + backoff

    def _backoff(self, attempt: int) -> float:
        return min(self.backoff_base * (2**attempt), _MAX_BACKOFF_S)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def _url(self, origin: GeoPoint, destination: GeoPoint) -> str:
        coords = f"{origin.as_lon_lat()};{destination.as_lon_lat()}"
        return f"{self.base_url}/route/v1/{self.profile}/{coords}"

    async def fetch_route(
        self, origin: GeoPoint, destination: GeoPoint
    ) -> RouteEstimate:
        params = {"overview": "full", "geometries": "geojson"}
        data = await self._get_json(self._url(origin, destination), params)
        return parse_route(data)

    async def fetch_routes(
        self,
        origin: GeoPoint,
        destination: GeoPoint,
        *,
        alternatives: bool = True,
    ) -> list[RouteEstimate]:
        params = {
            "overview": "full",
            "geometries": "geojson",
            "alternatives": "true" if alternatives else "false",
        }
        data = await self._get_json(self._url(origin, destination), params)
        return parse_routes(data)

    async def _get_json(self, url: str, params: dict[str, str]) -> Any:
        last_err: Exception | None = None
        for attempt in range(self.max_retries + 1):
            try:
                resp = await self._client.get(url, params=params)

                if resp.status_code in _RETRYABLE_STATUS:
                    raise RoutingServiceRetryableError(_format_error(resp))
                if 400 <= resp.status_code < 600:
                    raise RoutingServiceError(_format_error(resp))

                try:
                    return resp.json()
                except ValueError as e:
                    raise RoutingServiceError("routing response is not JSON") from e

            except RoutingServiceRetryableError as e:
                last_err = e
            except httpx.TransportError as e:
                last_err = e

            if attempt < self.max_retries:
                delay = self._backoff(attempt)
                logger.debug(
                    "Routing attempt %d failed (%s); retrying in %.2fs",
                    attempt + 1, last_err, delay,
                )
                await asyncio.sleep(delay)

        detail = f"{type(last_err).__name__}: {last_err}" if last_err else "unknown error"
        raise RoutingServiceError(
            f"routing failed after {self.max_retries + 1} attempt(s) ({detail})"
        )
