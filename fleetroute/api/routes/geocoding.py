"""
Geocoding endpoint
==================

GET /api/v1/geocode?q=... -- resolve a place name to coordinates
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from fleetroute.api.dependencies import get_geocoder
from fleetroute.api.middleware import limiter
from fleetroute.api.schemas import ErrorResponse, GeocodeResponse
from fleetroute.config import settings
from fleetroute.infrastructure.geocoding_client import GeocodingError, NominatimClient

router = APIRouter(tags=["geocoding"])


@router.get(
    "/geocode",
    response_model=GeocodeResponse,
    responses={404: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
    summary="Geocode a place name",
)
@limiter.limit(settings.rate_limit)
async def geocode(
    request: Request,
    q: str = Query(..., min_length=3, max_length=200),
    geocoder: Optional[NominatimClient] = Depends(get_geocoder),
):
    if geocoder is None:
        raise HTTPException(status_code=503, detail="Geocoding unavailable")
    try:
        result = await geocoder.geocode(q)
    except GeocodingError as e:
        raise HTTPException(status_code=502, detail=str(e))
    if result is None:
        raise HTTPException(status_code=404, detail="Place not found")
    return GeocodeResponse.from_result(result)
