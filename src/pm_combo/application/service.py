"""ComboApplicationService — combo queries plus create/cancel commands."""

from src.pm_combo.application.schemas import (
    ComboListResponse,
    ComboResponse,
    CreateComboRequest,
)
from src.pm_common.errors import ComboNotFoundError
from src.pm_engine.application.service import OperationService, get_operation_service
from src.pm_engine.domain.operations import CancelCombo, CreateCombo, OperationResponse
from src.pm_engine.domain.store import StateStore


class ComboApplicationService:
    def __init__(self, operations: OperationService | None = None) -> None:
        self._operations = operations

    @property
    def operations(self) -> OperationService:
        return self._operations or get_operation_service()

    async def list_combos(
        self, store: StateStore, owner: str, active_only: bool
    ) -> ComboListResponse:
        combos = await store.list_combos(owner=owner, open_only=active_only)
        items = [ComboResponse.from_domain(c) for c in combos]
        return ComboListResponse(items=items, total=len(items))

    async def get_combo(self, store: StateStore, combo_id: int) -> ComboResponse:
        combo = await store.get_combo(combo_id)
        if combo is None:
            raise ComboNotFoundError(combo_id)
        return ComboResponse.from_domain(combo)

    async def create_combo(
        self, store: StateStore, req: CreateComboRequest, caller: str
    ) -> OperationResponse:
        op = CreateCombo(name=req.name, legs=req.legs, stake=req.stake)
        return await self.operations.submit(store, op, caller)

    async def cancel_combo(
        self, store: StateStore, combo_id: int, caller: str
    ) -> OperationResponse:
        return await self.operations.submit(store, CancelCombo(combo_id=combo_id), caller)
