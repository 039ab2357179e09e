"""
Route planning endpoints
========================

POST /api/v1/routes/estimate           -- single origin/destination estimate
POST /api/v1/routes/alternatives       -- rank the service's alternative routes
POST /api/v1/routes/optimize           -- rank N destinations for one origin
GET  /api/v1/routes/history            -- recent planning requests, newest first
GET  /api/v1/routes/history/{query_id} -- one recorded planning request
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from fleetroute.api.dependencies import get_db, get_planner
from fleetroute.api.middleware import limiter
from fleetroute.api.schemas import (
    ErrorResponse,
    RejectedDestination,
    RouteAlternativesResponse,
    RouteCandidateResponse,
    RouteEstimateRequest,
    RouteOptimizeRequest,
    RouteOptimizeResponse,
    RouteQueryResponse,
)
from fleetroute.config import settings
from fleetroute.domain.entities import InvalidCoordinates
from fleetroute.domain.enums import OptimizationMode
from fleetroute.infrastructure.repositories import RouteQueryRepository
from fleetroute.services.planner import RoutePlanner, StaticConditions

router = APIRouter(prefix="/routes", tags=["routes"])


@router.post(
    "/estimate",
    response_model=RouteCandidateResponse,
    responses={422: {"model": ErrorResponse}},
    summary="Estimate distance, duration, cost and score for one route",
)
@limiter.limit(settings.rate_limit)
async def estimate_route(
    request: Request,
    body: RouteEstimateRequest,
    planner: RoutePlanner = Depends(get_planner),
):
    conditions = StaticConditions(body.conditions.to_domain()) if body.conditions else None
    try:
        candidate = await planner.estimate(
            body.origin.to_domain(),
            body.destination.to_destination(),
            mode=body.mode,
            departure=body.departure,
            conditions=conditions,
        )
    except InvalidCoordinates as e:
        raise HTTPException(status_code=422, detail=str(e))
    return RouteCandidateResponse.from_candidate(candidate)


@router.post(
    "/alternatives",
    response_model=RouteAlternativesResponse,
    responses={422: {"model": ErrorResponse}},
    summary="Rank the alternative routes between one origin and destination",
    description=(
        "Asks the routing service for alternative routes, scores each one and "
        "returns them best first.  ``alternative`` is the route's position in "
        "the service reply.  Without the service a single Haversine estimate "
        "is returned."
    ),
)
@limiter.limit(settings.rate_limit)
async def route_alternatives(
    request: Request,
    body: RouteEstimateRequest,
    planner: RoutePlanner = Depends(get_planner),
):
    conditions = StaticConditions(body.conditions.to_domain()) if body.conditions else None
    try:
        ranked = await planner.alternatives(
            body.origin.to_domain(),
            body.destination.to_destination(),
            mode=body.mode,
            departure=body.departure,
            conditions=conditions,
        )
    except InvalidCoordinates as e:
        raise HTTPException(status_code=422, detail=str(e))
    return RouteAlternativesResponse(
        mode=body.mode,
        candidates=[RouteCandidateResponse.from_candidate(c) for c in ranked],
    )


@router.post(
    "/optimize",
    response_model=RouteOptimizeResponse,
    responses={422: {"model": ErrorResponse}},
    summary="Rank candidate routes from one origin",
    description=(
        "Looks up every destination concurrently, falls back to a Haversine "
        "estimate for any that the routing service cannot answer, and returns "
        "candidates ordered by score (lower is better).  Destinations with "
        "invalid coordinates are listed in ``rejected``."
    ),
)
@limiter.limit(settings.rate_limit)
async def optimize_routes(
    request: Request,
    body: RouteOptimizeRequest,
    planner: RoutePlanner = Depends(get_planner),
    db: AsyncSession = Depends(get_db),
):
    origin = body.origin.to_domain()
    conditions = StaticConditions(body.conditions.to_domain()) if body.conditions else None
    try:
        result = await planner.plan(
            origin,
            [d.to_destination() for d in body.destinations],
            mode=body.mode,
            departure=body.departure,
            conditions=conditions,
        )
    except InvalidCoordinates as e:
        raise HTTPException(status_code=422, detail=str(e))

    query = await RouteQueryRepository(db).record(
        origin=origin, mode=body.mode, ranked=result.candidates
    )
    return RouteOptimizeResponse(
        mode=body.mode,
        candidates=[RouteCandidateResponse.from_candidate(c) for c in result.candidates],
        rejected=[RejectedDestination(index=i, reason=r) for i, r in result.rejected],
        query_id=query.id,
    )


@router.get(
    "/history",
    response_model=list[RouteQueryResponse],
    summary="List recent route planning requests",
)
@limiter.limit(settings.rate_limit)
async def route_history(
    request: Request,
    limit: int = Query(20, ge=1, le=100),
    mode: Optional[OptimizationMode] = None,
    db: AsyncSession = Depends(get_db),
):
    return await RouteQueryRepository(db).recent(limit=limit, mode=mode)


@router.get(
    "/history/{query_id}",
    response_model=RouteQueryResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Get one recorded route planning request",
)
@limiter.limit(settings.rate_limit)
async def route_history_entry(
    request: Request,
    query_id: int,
    db: AsyncSession = Depends(get_db),
):
    query = await RouteQueryRepository(db).get_by_id(query_id)
    if query is None:
        raise HTTPException(status_code=404, detail=f"Route query {query_id} not found")
    return query
