"""FastAPI dependency selecting the StateStore backend from settings.

memory:   one process-wide InMemoryStateStore shared by every request.
postgres: a fresh SqlStateStore bound to a per-request AsyncSession.
"""

from collections.abc import AsyncGenerator

from config.settings import settings
from src.pm_common.database import async_session_factory
from src.pm_engine.domain.store import StateStore
from src.pm_engine.infrastructure.memory_store import InMemoryStateStore
from src.pm_engine.infrastructure.sql_store import SqlStateStore

_memory_store: InMemoryStateStore | None = None


def get_memory_store() -> InMemoryStateStore:
    global _memory_store  # noqa: PLW0603
    if _memory_store is None:
        _memory_store = InMemoryStateStore()
    return _memory_store


async def get_state_store() -> AsyncGenerator[StateStore, None]:
    if settings.STATE_BACKEND == "memory":
        yield get_memory_store()
        return
    async with async_session_factory() as session:
        yield SqlStateStore(session)
