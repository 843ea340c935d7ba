"""
Shared test fixtures.

Every database test gets its own SQLite file under tmp_path, so nothing
leaks between tests. Strava is never contacted: HTTP goes through
httpx.MockTransport and all sleeps are recorded instead of awaited.
"""

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from fitrecap.db.session import enable_sqlite_savepoints
from fitrecap.models.base import Base
from fitrecap.features.users.models import User
from fitrecap.features.activities.models import Activity  # noqa
from fitrecap.features.strava import StravaClient, StravaOAuth, StravaRateLimiter


# =============================================================================
# Time
# =============================================================================

class FakeClock:
    """Monotonic clock that only moves when something sleeps on it."""

    def __init__(self, start: float = 0.0):
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


# =============================================================================
# Database
# =============================================================================

@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'fitrecap.db'}")
    enable_sqlite_savepoints(engine.sync_engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def user(db):
    """Connected user with a Strava token pair."""
    user = User(
        email="runner@example.com",
        name="Runner",
        strava_access_token="access-1",
        strava_refresh_token="refresh-1",
        strava_token_expires_at=1700000000,
        strava_connected=True,
        strava_athlete_id=42,
    )
    db.add(user)
    await db.commit()
    return user


# =============================================================================
# HTTP
# =============================================================================

@pytest.fixture
def make_client(clock):
    """Build a StravaClient over a MockTransport with a fake-time limiter."""

    def _make(handler) -> StravaClient:
        http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        limiter = StravaRateLimiter(clock=clock, sleep=clock.sleep)
        return StravaClient(limiter=limiter, http_client=http)

    return _make


@pytest.fixture
def make_oauth():
    """Build a StravaOAuth over a MockTransport."""

    def _make(handler) -> StravaOAuth:
        http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return StravaOAuth(http_client=http)

    return _make
