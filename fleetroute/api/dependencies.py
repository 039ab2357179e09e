"""FastAPI dependency injection helpers."""

from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from fleetroute.config import settings
from fleetroute.domain.pricing import BookingEstimator, CostModel
from fleetroute.infrastructure.database import async_session_factory
from fleetroute.infrastructure.geocoding_client import NominatimClient
from fleetroute.infrastructure.routing_client import OSRMClient
from fleetroute.services.planner import RoutePlanner
from fleetroute.services.route_source import RouteSourceAdapter


async def get_db() -> AsyncSession:  # type: ignore[misc]
    """Yield an async DB session; commit on success, rollback on error."""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def get_cost_model() -> CostModel:
    return CostModel(
        base_fare=settings.base_fare,
        distance_rate=settings.distance_rate,
        time_rate=settings.time_rate,
        assumed_speed_kmh=settings.assumed_speed_kmh,
    )


def get_booking_estimator() -> BookingEstimator:
    return BookingEstimator(
        distance_rate=settings.booking_distance_rate,
        time_rate=settings.booking_time_rate,
        min_duration_min=settings.booking_min_duration_min,
    )


def get_routing_backend(request: Request) -> Optional[OSRMClient]:
    """Shared routing client created in the app lifespan (None -> Haversine only)."""
    return getattr(request.app.state, "routing_client", None)


def get_geocoder(request: Request) -> Optional[NominatimClient]:
    return getattr(request.app.state, "geocoder", None)


def get_planner(
    backend: Optional[OSRMClient] = Depends(get_routing_backend),
    cost_model: CostModel = Depends(get_cost_model),
) -> RoutePlanner:
    # covers every retry of the client
    deadline = backend.deadline_seconds if backend is not None else None
    source = RouteSourceAdapter(backend, cost_model, timeout_seconds=deadline)
    return RoutePlanner(source, cost_model)
