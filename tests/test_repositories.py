"""Tests for the route query history repository (SQLite)."""

import pytest

from fleetroute.domain.entities import GeoPoint, RouteCandidate
from fleetroute.domain.enums import OptimizationMode
from fleetroute.infrastructure.repositories import RouteQueryRepository

ORIGIN = GeoPoint(28.6139, 77.2090)


def _candidate(label: str, score: float) -> RouteCandidate:
    return RouteCandidate(
        origin=ORIGIN,
        destination=GeoPoint(28.7041, 77.1025),
        distance_km=14.44,
        duration_min=21.66,
        cost_estimate=331.6,
        score=score,
        mode=OptimizationMode.TIME,
        label=label,
    )


@pytest.mark.asyncio
async def test_record_stores_best_candidate(db_session):
    repo = RouteQueryRepository(db_session)
    row = await repo.record(
        origin=ORIGIN,
        mode=OptimizationMode.TIME,
        ranked=[_candidate("best", 3.1), _candidate("worse", 9.9)],
    )
    assert row.id is not None

    stored = await repo.get_by_id(row.id)
    assert stored.best_label == "best"
    assert stored.best_score == 3.1
    assert stored.candidate_count == 2
    assert stored.mode == OptimizationMode.TIME


@pytest.mark.asyncio
async def test_record_with_no_candidates(db_session):
    repo = RouteQueryRepository(db_session)
    row = await repo.record(origin=ORIGIN, mode=OptimizationMode.COST, ranked=[])
    assert row.candidate_count == 0
    assert row.best_label is None
    assert row.best_score is None


@pytest.mark.asyncio
async def test_recent_newest_first_and_limited(db_session):
    repo = RouteQueryRepository(db_session)
    for mode in (OptimizationMode.TIME, OptimizationMode.FUEL, OptimizationMode.COST):
        await repo.record(origin=ORIGIN, mode=mode, ranked=[_candidate("x", 1.0)])

    rows = await repo.recent(limit=2)
    assert [r.mode for r in rows] == [OptimizationMode.COST, OptimizationMode.FUEL]
    assert await repo.count() == 3

    fuel_only = await repo.recent(mode=OptimizationMode.FUEL)
    assert len(fuel_only) == 1
