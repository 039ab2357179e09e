"""
FastAPI application factory.

* Registers routes for route planning, bookings, geocoding and admin.
* Opens / closes the shared routing and geocoding HTTP clients via
  lifespan events.
* Applies rate-limiting middleware.
* Swagger / OpenAPI UI available at ``/docs``.
"""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from fleetroute.api.middleware import limiter
from fleetroute.api.routes import admin, bookings, geocoding, planning
from fleetroute.config import settings
from fleetroute.infrastructure.cache import BoundedTTLCache
from fleetroute.infrastructure.geocoding_client import NominatimClient
from fleetroute.infrastructure.routing_client import OSRMClient

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the external-service clients on startup; close on shutdown."""
    app.state.routing_client = OSRMClient(
        base_url=settings.routing_base_url,
        profile=settings.routing_profile,
        timeout=settings.routing_timeout_seconds,
        max_retries=settings.routing_max_retries,
    )
    app.state.geocoder = NominatimClient(
        base_url=settings.geocoding_base_url,
        user_agent=settings.geocoding_user_agent,
        timeout=settings.geocoding_timeout_seconds,
        cache=BoundedTTLCache(
            max_entries=settings.geocode_cache_size,
            ttl_seconds=settings.geocode_cache_ttl_seconds,
        ),
    )
    logger.info(
        "Routing via %s (profile=%s), geocoding via %s",
        settings.routing_base_url, settings.routing_profile, settings.geocoding_base_url,
    )
    yield
    await app.state.routing_client.aclose()
    await app.state.geocoder.aclose()


def create_app() -> FastAPI:
    app = FastAPI(
        title="FleetRoute API",
        description=(
            "Route estimation and ranking for fleet bookings: Haversine or "
            "road-network distance, duration and fare estimates, and "
            "mode-weighted route scoring (lower score is better)."
        ),
        version="1.0.0",
        lifespan=lifespan,
    )

    # Rate limiter
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Routers
    app.include_router(planning.router, prefix="/api/v1")
    app.include_router(bookings.router, prefix="/api/v1")
    app.include_router(geocoding.router, prefix="/api/v1")
    app.include_router(admin.router, prefix="/api/v1")

    return app
