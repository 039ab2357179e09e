"""
Shared test fixtures.

Uses an in-memory SQLite database (via aiosqlite) so tests run without
PostgreSQL.  External services are replaced with ``httpx.MockTransport``
handlers, so no test touches the network.
"""

from typing import AsyncGenerator, Callable

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from fleetroute.infrastructure.cache import BoundedTTLCache
from fleetroute.infrastructure.database import Base
from fleetroute.infrastructure.geocoding_client import NominatimClient
from fleetroute.infrastructure.routing_client import OSRMClient

# models must be imported so their tables register on Base.metadata
from fleetroute.infrastructure import models  # noqa: F401


# ── Test DB (SQLite in-memory) ────────────────────────────────────────

TEST_DB_URL = "sqlite+aiosqlite:///:memory:"

test_engine = create_async_engine(TEST_DB_URL, echo=False, poolclass=StaticPool)
TestSessionFactory = async_sessionmaker(
    test_engine, class_=AsyncSession, expire_on_commit=False
)


# ── Canned external-service payloads ──────────────────────────────────

DELHI = (28.6139, 77.2090)
ROHINI = (28.7041, 77.1025)


def osrm_payload(distance_m: float = 15_400.0, duration_s: float = 1_500.0) -> dict:
    return {
        "code": "Ok",
        "routes": [
            {
                "distance": distance_m,
                "duration": duration_s,
                "geometry": {
                    "type": "LineString",
                    "coordinates": [[DELHI[1], DELHI[0]], [ROHINI[1], ROHINI[0]]],
                },
            }
        ],
    }


NOMINATIM_PLACES = {
    "connaught place": [
        {"lat": "28.6315", "lon": "77.2167", "display_name": "Connaught Place, New Delhi"}
    ],
    "india gate": [
        {"lat": "28.6129", "lon": "77.2295", "display_name": "India Gate, New Delhi"}
    ],
}


def nominatim_handler(request: httpx.Request) -> httpx.Response:
    q = request.url.params.get("q", "").strip().lower()
    return httpx.Response(200, json=NOMINATIM_PLACES.get(q, []))


def make_osrm_client(
    handler: Callable[[httpx.Request], httpx.Response], **kwargs
) -> OSRMClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    kwargs.setdefault("backoff_base", 0.0)
    return OSRMClient(base_url="http://osrm.test", client=http, **kwargs)


def make_geocoder(
    handler: Callable[[httpx.Request], httpx.Response] = nominatim_handler,
    cache: BoundedTTLCache | None = None,
) -> NominatimClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return NominatimClient(
        base_url="http://nominatim.test",
        user_agent="fleetroute-tests",
        cache=cache,
        client=http,
    )


# ── Fixtures ──────────────────────────────────────────────────────────


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create tables, yield a session, then drop everything."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionFactory() as session:
        yield session

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
def geocoder() -> NominatimClient:
    return make_geocoder(cache=BoundedTTLCache(max_entries=16, ttl_seconds=60))


@pytest_asyncio.fixture
async def app(geocoder: NominatimClient):
    """App wired to SQLite, Haversine-only routing and the fake geocoder."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async def _test_db():
        async with TestSessionFactory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    from fleetroute.api.app import create_app
    from fleetroute.api.dependencies import (
        get_db,
        get_geocoder,
        get_routing_backend,
    )
    from fleetroute.api.middleware import limiter

    limiter.reset()
    application = create_app()
    application.dependency_overrides[get_db] = _test_db
    application.dependency_overrides[get_geocoder] = lambda: geocoder
    application.dependency_overrides[get_routing_backend] = lambda: None
    yield application

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
