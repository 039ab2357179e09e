"""
Booking endpoints
=================

POST /api/v1/bookings/estimate -- fare quote for a vehicle class

Pickup and drop-off may be given as coordinates or as place names; place
names are resolved through the geocoder first.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request

from fleetroute.api.dependencies import get_booking_estimator, get_geocoder
from fleetroute.api.middleware import limiter
from fleetroute.api.schemas import (
    BookingEstimateRequest,
    BookingQuoteResponse,
    ErrorResponse,
    LocationIn,
)
from fleetroute.config import settings
from fleetroute.domain.entities import CapacityExceeded, GeoPoint, InvalidCoordinates
from fleetroute.domain.pricing import BookingEstimator
from fleetroute.infrastructure.geocoding_client import GeocodingError, NominatimClient

router = APIRouter(prefix="/bookings", tags=["bookings"])


async def _resolve(
    location: LocationIn, role: str, geocoder: Optional[NominatimClient]
) -> GeoPoint:
    point = location.point()
    if point is not None:
        return point

    if geocoder is None:
        raise HTTPException(status_code=503, detail="Geocoding unavailable")
    try:
        found = await geocoder.geocode(location.place or "")
    except GeocodingError as e:
        raise HTTPException(status_code=502, detail=str(e))
    if found is None:
        raise HTTPException(
            status_code=404, detail=f"{role} location not found: {location.place}"
        )
    return found.point


@router.post(
    "/estimate",
    response_model=BookingQuoteResponse,
    responses={
        404: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    },
    summary="Quote a booking fare",
    description=(
        "Fare = vehicle-class base rate + distance x per-km rate + "
        "duration x per-minute rate.  Duration defaults to twice the "
        "distance in minutes with a minimum of 30."
    ),
)
@limiter.limit(settings.rate_limit)
async def estimate_booking(
    request: Request,
    body: BookingEstimateRequest,
    estimator: BookingEstimator = Depends(get_booking_estimator),
    geocoder: Optional[NominatimClient] = Depends(get_geocoder),
):
    pickup = await _resolve(body.pickup, "Pickup", geocoder)
    dropoff = await _resolve(body.dropoff, "Drop-off", geocoder)

    try:
        quote = estimator.quote(
            body.vehicle_class,
            pickup,
            dropoff,
            duration_min=body.duration_min,
            passengers=body.passengers,
        )
    except (CapacityExceeded, InvalidCoordinates) as e:
        raise HTTPException(status_code=422, detail=str(e))
    return BookingQuoteResponse.from_quote(quote)
