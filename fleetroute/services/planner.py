"""
Route Planner
=============

One origin, N destinations, one optimization mode.  For a single pair,
``alternatives`` scores and ranks every route the routing service offers.

1. **Validate** -- an invalid origin fails the request; an invalid
   destination is rejected on its own and the rest of the batch goes on.
2. **Fetch**    -- every destination is looked up concurrently through the
   ``RouteSourceAdapter``; each look-up has its own timeout and falls back
   to the Haversine estimate individually.
3. **Score**    -- duration, cost and the weighted penalty score are
   computed per candidate.  Road conditions come from a
   ``ConditionsProvider``; the default one is neutral.
4. **Rank**     -- stable ascending sort on score (lower is better).

Complexity
----------
Let N = destinations.  N concurrent look-ups, O(N) scoring,
O(N log N) ranking.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Protocol, Sequence

from fleetroute.domain.entities import (
    GeoPoint,
    InvalidCoordinates,
    RouteCandidate,
    RouteEstimate,
    RouteFeatures,
)
from fleetroute.domain.enums import OptimizationMode
from fleetroute.domain.pricing import CostModel
from fleetroute.domain.scoring import rank, score, time_of_day_factor

from .route_source import RouteSourceAdapter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RoadConditions:
    traffic_factor: float = 0.0
    weather_impact: float = 0.0
    road_quality: float = 10.0


class ConditionsProvider(Protocol):
    def conditions(self, origin: GeoPoint, destination: GeoPoint) -> RoadConditions: ...


class NeutralConditions:
    """No live telemetry: free-flowing traffic, clear weather, perfect road."""

    def conditions(self, origin: GeoPoint, destination: GeoPoint) -> RoadConditions:
        return RoadConditions()


class StaticConditions:
    """Same caller-supplied conditions for every route in a request."""

    def __init__(self, road: RoadConditions):
        self.road = road

    def conditions(self, origin: GeoPoint, destination: GeoPoint) -> RoadConditions:
        return self.road


@dataclass(frozen=True)
class Destination:
    point: GeoPoint
    label: Optional[str] = None


@dataclass
class PlanResult:
    candidates: list[RouteCandidate] = field(default_factory=list)
    rejected: list[tuple[int, str]] = field(default_factory=list)  # (index, reason)

    @property
    def best(self) -> Optional[RouteCandidate]:
        return self.candidates[0] if self.candidates else None


class RoutePlanner:
    def __init__(
        self,
        source: RouteSourceAdapter,
        cost_model: CostModel,
        conditions: Optional[ConditionsProvider] = None,
    ):
        self.source = source
        self.cost_model = cost_model
        self.conditions = conditions or NeutralConditions()

    def build_candidate(
        self,
        origin: GeoPoint,
        destination: Destination,
        estimate: RouteEstimate,
        mode: OptimizationMode,
        departure: Optional[datetime] = None,
        conditions: Optional[ConditionsProvider] = None,
        alternative: Optional[int] = None,
    ) -> RouteCandidate:
        road = (conditions or self.conditions).conditions(origin, destination.point)
        features = RouteFeatures(
            distance_km=estimate.distance_km,
            duration_min=estimate.duration_min,
            traffic_factor=road.traffic_factor,
            weather_impact=road.weather_impact,
            road_quality=road.road_quality,
            time_of_day_factor=time_of_day_factor(departure),
        )
        return RouteCandidate(
            origin=origin,
            destination=destination.point,
            distance_km=round(estimate.distance_km, 2),
            duration_min=round(estimate.duration_min, 2),
            cost_estimate=self.cost_model.estimate_cost(
                estimate.distance_km, estimate.duration_min
            ),
            score=score(features, mode),
            mode=mode,
            source=estimate.source,
            features=features,
            label=destination.label,
            geometry=estimate.geometry,
            alternative=alternative,
        )

    async def estimate(
        self,
        origin: GeoPoint,
        destination: Destination,
        mode: OptimizationMode = OptimizationMode.BALANCED,
        departure: Optional[datetime] = None,
        conditions: Optional[ConditionsProvider] = None,
    ) -> RouteCandidate:
        """Single origin/destination candidate; raises on invalid points."""
        estimate = await self.source.fetch_route(origin, destination.point)
        return self.build_candidate(
            origin, destination, estimate, mode, departure, conditions
        )

    async def alternatives(
        self,
        origin: GeoPoint,
        destination: Destination,
        mode: OptimizationMode = OptimizationMode.BALANCED,
        departure: Optional[datetime] = None,
        conditions: Optional[ConditionsProvider] = None,
    ) -> list[RouteCandidate]:
        """Score every route the service offers for one pair, best first."""
        estimates = await self.source.fetch_alternatives(origin, destination.point)
        candidates = [
            self.build_candidate(
                origin, destination, est, mode, departure, conditions, alternative=i
            )
            for i, est in enumerate(estimates, start=1)
        ]
        logger.info(
            "Ranked %d alternative route(s) mode=%s (fallback=%s)",
            len(candidates), mode.value, estimates[0].is_fallback,
        )
        return rank(candidates)

    async def plan(
        self,
        origin: GeoPoint,
        destinations: Sequence[Destination],
        mode: OptimizationMode = OptimizationMode.BALANCED,
        departure: Optional[datetime] = None,
        conditions: Optional[ConditionsProvider] = None,
    ) -> PlanResult:
        origin.validate()

        result = PlanResult()
        valid: list[Destination] = []
        for idx, dest in enumerate(destinations):
            try:
                dest.point.validate()
            except InvalidCoordinates as e:
                result.rejected.append((idx, str(e)))
                continue
            valid.append(dest)

        estimates = await asyncio.gather(
            *(self.source.fetch_route(origin, d.point) for d in valid)
        )
        candidates = [
            self.build_candidate(origin, dest, est, mode, departure, conditions)
            for dest, est in zip(valid, estimates)
        ]
        result.candidates = rank(candidates)

        fallbacks = sum(1 for est in estimates if est.is_fallback)
        logger.info(
            "Planned %d route(s) mode=%s (%d fallback, %d rejected)",
            len(candidates), mode.value, fallbacks, len(result.rejected),
        )
        return result
