"""
Domain value objects for route estimation.

Patterns used
-------------
- **Value Objects**: every type here is a frozen dataclass.  A
  ``RouteCandidate`` is built per query, scored, ranked and thrown away;
  nothing mutates it after construction.
- ``GeoPoint.validate`` is the single place coordinate ranges are checked.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Optional

from .enums import OptimizationMode, RouteSource, VehicleClass


class InvalidCoordinates(ValueError):
    """Raised when a point is NaN or outside the lat/lng ranges."""


class CapacityExceeded(ValueError):
    """Raised when a booking asks for more seats than the vehicle class has."""


# ── Value Objects ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class GeoPoint:
    latitude: float
    longitude: float

    def validate(self) -> "GeoPoint":
        """Return ``self`` if the point is usable, else raise."""
        lat, lng = self.latitude, self.longitude
        if math.isnan(lat) or math.isnan(lng):
            raise InvalidCoordinates(f"NaN coordinate in ({lat}, {lng})")
        if not -90.0 <= lat <= 90.0:
            raise InvalidCoordinates(f"Latitude {lat} outside [-90, 90]")
        if not -180.0 <= lng <= 180.0:
            raise InvalidCoordinates(f"Longitude {lng} outside [-180, 180]")
        return self

    def as_lon_lat(self) -> str:
        return f"{self.longitude},{self.latitude}"


@dataclass(frozen=True)
class RouteFeatures:
    distance_km: float
    duration_min: float
    traffic_factor: float = 0.0
    weather_impact: float = 0.0
    road_quality: float = 10.0  # 0 (worst) .. 10 (best)
    time_of_day_factor: float = 0.0


@dataclass(frozen=True)
class RouteEstimate:
    distance_km: float
    duration_min: float
    source: RouteSource
    geometry: Optional[list[list[float]]] = None  # [[lon, lat], ...]

    @property
    def is_fallback(self) -> bool:
        return self.source is RouteSource.HAVERSINE


@dataclass(frozen=True)
class RouteCandidate:
    origin: GeoPoint
    destination: GeoPoint
    distance_km: float
    duration_min: float
    cost_estimate: float
    score: float
    mode: OptimizationMode
    source: RouteSource = RouteSource.HAVERSINE
    features: Optional[RouteFeatures] = None
    label: Optional[str] = None
    geometry: Optional[list[list[float]]] = field(default=None, repr=False)
    alternative: Optional[int] = None  # 1-based position in the routing service reply


@dataclass(frozen=True)
class GeocodeResult:
    point: GeoPoint
    display_name: str


@dataclass(frozen=True)
class BookingQuote:
    vehicle_class: VehicleClass
    distance_km: float
    duration_min: int
    base_cost: float
    distance_cost: float
    time_cost: float
    total_cost: float
