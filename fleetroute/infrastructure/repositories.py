"""
Repository Pattern -- abstracts DB access so domain logic stays DB-agnostic.

Each repository receives an ``AsyncSession`` (unit-of-work) and exposes
domain-relevant queries only.
"""

from __future__ import annotations

from typing import Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import RouteQueryModel
from fleetroute.domain.entities import GeoPoint, RouteCandidate
from fleetroute.domain.enums import OptimizationMode


class RouteQueryRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def record(
        self,
        *,
        origin: GeoPoint,
        mode: OptimizationMode,
        ranked: Sequence[RouteCandidate],
    ) -> RouteQueryModel:
        """Store a summary of one planning request; *ranked* is best-first."""
        best = ranked[0] if ranked else None
        row = RouteQueryModel(
            origin_lat=origin.latitude,
            origin_lng=origin.longitude,
            mode=mode,
            candidate_count=len(ranked),
            best_label=best.label if best else None,
            best_destination_lat=best.destination.latitude if best else None,
            best_destination_lng=best.destination.longitude if best else None,
            best_distance_km=best.distance_km if best else None,
            best_score=best.score if best else None,
        )
        self.session.add(row)
        await self.session.flush()
        return row

    async def get_by_id(self, query_id: int) -> Optional[RouteQueryModel]:
        return await self.session.get(RouteQueryModel, query_id)

    async def recent(
        self, limit: int = 20, mode: OptimizationMode | None = None
    ) -> list[RouteQueryModel]:
        query = select(RouteQueryModel).order_by(
            RouteQueryModel.created_at.desc(), RouteQueryModel.id.desc()
        )
        if mode:
            query = query.where(RouteQueryModel.mode == mode)
        result = await self.session.execute(query.limit(limit))
        return list(result.scalars().all())

    async def count(self) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(RouteQueryModel)
        )
        return result.scalar() or 0
