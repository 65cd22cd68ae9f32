"""Shared test fixtures."""

import os

# Settings() requires JWT_SECRET; must be set before any src import.
os.environ.setdefault("JWT_SECRET", "test-secret-not-for-production")
os.environ.setdefault("STATE_BACKEND", "memory")

from collections.abc import AsyncIterator, Callable  # noqa: E402
from datetime import UTC, datetime, timedelta  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from src.main import app  # noqa: E402
from src.pm_engine.domain.context import OperationContext  # noqa: E402
from src.pm_engine.infrastructure.memory_store import InMemoryStateStore  # noqa: E402
from src.pm_engine.infrastructure.provider import get_state_store  # noqa: E402
from src.pm_gateway.auth.jwt_handler import create_access_token  # noqa: E402

NOW = datetime(2026, 1, 1, tzinfo=UTC)
END_TIME = NOW + timedelta(days=30)


@pytest.fixture
def store() -> InMemoryStateStore:
    return InMemoryStateStore()


@pytest.fixture
def ctx() -> Callable[[str | None], OperationContext]:
    """Build an OperationContext for a caller at the fixed test time."""

    def _make(caller: str | None, at: datetime = NOW) -> OperationContext:
        return OperationContext(caller=caller, timestamp=at)

    return _make


@pytest.fixture
def auth_headers() -> Callable[[str], dict[str, str]]:
    def _make(caller: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(caller)}"}

    return _make


@pytest_asyncio.fixture
async def client(store: InMemoryStateStore) -> AsyncIterator[AsyncClient]:
    """Async HTTP client bound to a fresh in-memory store."""
    app.dependency_overrides[get_state_store] = lambda: store
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
