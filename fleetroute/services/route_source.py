"""
Route Source Adapter
====================

Primary path:  the road-routing service (real road distance, duration and
               geometry).
Fallback path: Haversine distance plus a speed-based duration estimate.

Any routing failure (timeout, transport error, bad status, malformed or
empty payload) degrades to the fallback and is logged.  ``fetch_route`` and
``fetch_alternatives`` only raise ``InvalidCoordinates``, which is checked
before either path runs.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Optional, Protocol, TypeVar

from fleetroute.domain.distance import haversine_km
from fleetroute.domain.entities import GeoPoint, RouteEstimate
from fleetroute.domain.enums import RouteSource
from fleetroute.domain.pricing import CostModel
from fleetroute.infrastructure.routing_client import RoutingServiceError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RoutingBackend(Protocol):
    async def fetch_route(
        self, origin: GeoPoint, destination: GeoPoint
    ) -> RouteEstimate: ...


class RouteSourceAdapter:
    def __init__(
        self,
        backend: Optional[RoutingBackend],
        cost_model: CostModel,
        timeout_seconds: Optional[float] = None,
    ):
        self.backend = backend
        self.cost_model = cost_model
        self.timeout_seconds = timeout_seconds

    def fallback_estimate(
        self, origin: GeoPoint, destination: GeoPoint
    ) -> RouteEstimate:
        distance = haversine_km(origin, destination)
        return RouteEstimate(
            distance_km=distance,
            duration_min=self.cost_model.estimate_duration(distance),
            source=RouteSource.HAVERSINE,
        )

    async def fetch_route(
        self, origin: GeoPoint, destination: GeoPoint
    ) -> RouteEstimate:
        origin.validate()
        destination.validate()

        if self.backend is None:
            return self.fallback_estimate(origin, destination)

        estimate = await self._attempt(
            self.backend.fetch_route(origin, destination), origin, destination
        )
        return estimate or self.fallback_estimate(origin, destination)

    async def fetch_alternatives(
        self, origin: GeoPoint, destination: GeoPoint
    ) -> list[RouteEstimate]:
        """All routes the service offers, in service order; never empty.

        Backends without ``fetch_routes`` answer with their single route.
        """
        origin.validate()
        destination.validate()

        fetch_routes = getattr(self.backend, "fetch_routes", None)
        if fetch_routes is None:
            return [await self.fetch_route(origin, destination)]

        estimates = await self._attempt(
            fetch_routes(origin, destination), origin, destination
        )
        return estimates or [self.fallback_estimate(origin, destination)]

    async def _attempt(
        self, call: Awaitable[T], origin: GeoPoint, destination: GeoPoint
    ) -> Optional[T]:
        """Await a backend call; ``None`` when it failed (already logged)."""
        try:
            if self.timeout_seconds:
                return await asyncio.wait_for(call, timeout=self.timeout_seconds)
            return await call
        except asyncio.TimeoutError:
            logger.warning(
                "Routing timed out after %.1fs for %s -> %s; using Haversine estimate",
                self.timeout_seconds, origin, destination,
            )
        except RoutingServiceError as e:
            logger.warning(
                "Routing failed for %s -> %s (%s); using Haversine estimate",
                origin, destination, e,
            )
        except Exception:
            logger.exception(
                "Unexpected routing error for %s -> %s; using Haversine estimate",
                origin, destination,
            )
        return None
