"""
Admin / observability endpoints
===============================

GET /api/v1/admin/health -- simple health check
GET /api/v1/admin/cache  -- geocode cache statistics
GET /api/v1/admin/stats  -- recorded route planning requests
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from fleetroute.api.dependencies import get_db, get_geocoder
from fleetroute.api.middleware import limiter
from fleetroute.api.schemas import (
    CacheStatsResponse,
    ErrorResponse,
    HealthResponse,
    StatsResponse,
)
from fleetroute.config import settings
from fleetroute.infrastructure.geocoding_client import NominatimClient
from fleetroute.infrastructure.repositories import RouteQueryRepository

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/health", response_model=HealthResponse, summary="Health check")
async def health():
    return HealthResponse()


@router.get(
    "/cache",
    response_model=CacheStatsResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Geocode cache statistics",
)
@limiter.limit(settings.rate_limit)
async def cache_stats(
    request: Request,
    geocoder: Optional[NominatimClient] = Depends(get_geocoder),
):
    if geocoder is None or geocoder.cache is None:
        raise HTTPException(status_code=404, detail="Geocode cache not configured")
    return CacheStatsResponse(**geocoder.cache.snapshot())


@router.get("/stats", response_model=StatsResponse, summary="Route query statistics")
@limiter.limit(settings.rate_limit)
async def route_stats(request: Request, db: AsyncSession = Depends(get_db)):
    return StatsResponse(route_queries=await RouteQueryRepository(db).count())
