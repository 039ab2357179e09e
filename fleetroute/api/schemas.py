"""Pydantic request / response schemas for the REST API."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from fleetroute.domain.entities import (
    BookingQuote,
    GeocodeResult,
    GeoPoint,
    RouteCandidate,
)
from fleetroute.domain.enums import OptimizationMode, RouteSource, VehicleClass
from fleetroute.services.planner import Destination, RoadConditions


# ── Requests ──────────────────────────────────────────────────────────


class GeoPointIn(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)

    def to_domain(self) -> GeoPoint:
        return GeoPoint(self.latitude, self.longitude)


class DestinationIn(BaseModel):
    """Range-checked by the planner; a bad destination is rejected on its own."""

    latitude: float
    longitude: float
    label: Optional[str] = Field(None, max_length=120)

    def to_destination(self) -> Destination:
        return Destination(point=GeoPoint(self.latitude, self.longitude), label=self.label)


class RoadConditionsIn(BaseModel):
    traffic_factor: float = Field(0.0, ge=0)
    weather_impact: float = Field(0.0, ge=0)
    road_quality: float = Field(10.0, ge=0, le=10)

    def to_domain(self) -> RoadConditions:
        return RoadConditions(
            traffic_factor=self.traffic_factor,
            weather_impact=self.weather_impact,
            road_quality=self.road_quality,
        )


class RouteEstimateRequest(BaseModel):
    origin: GeoPointIn
    destination: DestinationIn
    mode: OptimizationMode = OptimizationMode.BALANCED
    departure: Optional[datetime] = Field(
        None, description="Departure time; drives the time-of-day factor."
    )
    conditions: Optional[RoadConditionsIn] = None


class RouteOptimizeRequest(BaseModel):
    origin: GeoPointIn
    destinations: list[DestinationIn] = Field(..., min_length=1, max_length=25)
    mode: OptimizationMode = OptimizationMode.BALANCED
    departure: Optional[datetime] = None
    conditions: Optional[RoadConditionsIn] = None


class LocationIn(BaseModel):
    """Either explicit coordinates or a free-text place name."""

    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    place: Optional[str] = Field(None, min_length=3, max_length=200)

    @model_validator(mode="after")
    def _coordinates_or_place(self) -> "LocationIn":
        has_coords = self.latitude is not None and self.longitude is not None
        if not has_coords and not self.place:
            raise ValueError("provide latitude and longitude, or a place name")
        return self

    def point(self) -> Optional[GeoPoint]:
        if self.latitude is None or self.longitude is None:
            return None
        return GeoPoint(self.latitude, self.longitude)


class BookingEstimateRequest(BaseModel):
    vehicle_class: VehicleClass
    pickup: LocationIn
    dropoff: LocationIn
    duration_min: Optional[int] = Field(None, ge=1, le=24 * 60)
    passengers: int = Field(1, ge=1, le=12)


# ── Responses ─────────────────────────────────────────────────────────


class GeoPointOut(BaseModel):
    latitude: float
    longitude: float

    @classmethod
    def from_domain(cls, p: GeoPoint) -> "GeoPointOut":
        return cls(latitude=p.latitude, longitude=p.longitude)


class RouteCandidateResponse(BaseModel):
    label: Optional[str] = None
    origin: GeoPointOut
    destination: GeoPointOut
    distance_km: float
    duration_min: float
    cost_estimate: float
    score: float
    mode: OptimizationMode
    source: RouteSource
    geometry: Optional[list[list[float]]] = None
    alternative: Optional[int] = None

    @classmethod
    def from_candidate(cls, c: RouteCandidate) -> "RouteCandidateResponse":
        return cls(
            label=c.label,
            origin=GeoPointOut.from_domain(c.origin),
            destination=GeoPointOut.from_domain(c.destination),
            distance_km=c.distance_km,
            duration_min=c.duration_min,
            cost_estimate=c.cost_estimate,
            score=c.score,
            mode=c.mode,
            source=c.source,
            geometry=c.geometry,
            alternative=c.alternative,
        )


class RejectedDestination(BaseModel):
    index: int
    reason: str


class RouteOptimizeResponse(BaseModel):
    mode: OptimizationMode
    candidates: list[RouteCandidateResponse] = []
    rejected: list[RejectedDestination] = []
    query_id: Optional[int] = None


class RouteAlternativesResponse(BaseModel):
    mode: OptimizationMode
    candidates: list[RouteCandidateResponse] = []


class RouteQueryResponse(BaseModel):
    id: int
    origin_lat: float
    origin_lng: float
    mode: OptimizationMode
    candidate_count: int
    best_label: Optional[str] = None
    best_destination_lat: Optional[float] = None
    best_destination_lng: Optional[float] = None
    best_distance_km: Optional[float] = None
    best_score: Optional[float] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class BookingQuoteResponse(BaseModel):
    vehicle_class: VehicleClass
    distance_km: float
    duration_min: int
    base_cost: float
    distance_cost: float
    time_cost: float
    total_cost: float

    model_config = {"from_attributes": True}

    @classmethod
    def from_quote(cls, q: BookingQuote) -> "BookingQuoteResponse":
        return cls.model_validate(q)


class GeocodeResponse(BaseModel):
    latitude: float
    longitude: float
    display_name: str

    @classmethod
    def from_result(cls, r: GeocodeResult) -> "GeocodeResponse":
        return cls(
            latitude=r.point.latitude,
            longitude=r.point.longitude,
            display_name=r.display_name,
        )


class CacheStatsResponse(BaseModel):
    size: int
    hits: int
    misses: int
    evictions: int
    ttl_seconds: float
    max_entries: int


class StatsResponse(BaseModel):
    route_queries: int


class HealthResponse(BaseModel):
    status: str = "ok"


class ErrorResponse(BaseModel):
    detail: str
