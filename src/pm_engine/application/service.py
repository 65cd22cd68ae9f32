"""OperationService — serializes state-mutating operations process-wide.

One asyncio.Lock guards every execute() call, so operations never
interleave; each runs inside store.transaction() and either commits all
of its writes or none.
"""

import asyncio
import logging

from config.settings import settings
from src.pm_common.datetime_utils import utc_now
from src.pm_common.errors import AppError
from src.pm_engine.domain.context import OperationContext
from src.pm_engine.domain.operations import Operation, OperationResponse
from src.pm_engine.domain.store import StateStore
from src.pm_engine.engine.contract import MarketContract

logger = logging.getLogger(__name__)


class OperationService:
    def __init__(self, min_legs: int, max_legs: int, verify_invariants: bool = False) -> None:
        self._lock = asyncio.Lock()
        self._min_legs = min_legs
        self._max_legs = max_legs
        self._verify_invariants = verify_invariants

    async def execute(
        self, store: StateStore, operation: Operation, ctx: OperationContext
    ) -> OperationResponse:
        contract = MarketContract(
            store, self._min_legs, self._max_legs, verify_invariants=self._verify_invariants
        )
        async with self._lock:
            try:
                async with store.transaction():
                    return await contract.execute(operation, ctx)
            except AppError as exc:
                logger.warning(
                    "Operation %s rejected for %s: [%d] %s",
                    operation.kind, ctx.caller, exc.code, exc.message,
                )
                raise

    async def submit(
        self, store: StateStore, operation: Operation, caller: str | None
    ) -> OperationResponse:
        """Run operation stamped with the current UTC time."""
        return await self.execute(store, operation, OperationContext(caller, utc_now()))


_service: OperationService | None = None


def get_operation_service() -> OperationService:
    global _service  # noqa: PLW0603
    if _service is None:
        _service = OperationService(
            settings.MIN_COMBO_LEGS,
            settings.MAX_COMBO_LEGS,
            verify_invariants=settings.VERIFY_INVARIANTS,
        )
    return _service
