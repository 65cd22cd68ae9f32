"""Positions REST API — the caller's own share balances."""
from typing import Annotated

from fastapi import APIRouter, Depends, Path

from src.pm_common.errors import PositionNotFoundError
from src.pm_common.response import ApiResponse, success_response
from src.pm_engine.domain.store import StateStore
from src.pm_engine.infrastructure.provider import get_state_store
from src.pm_gateway.auth.dependencies import get_current_caller
from src.pm_position.application.schemas import PositionListResponse, PositionResponse

router = APIRouter(prefix="/positions", tags=["positions"])


@router.get("")
async def list_positions(
    caller: Annotated[str, Depends(get_current_caller)],
    store: Annotated[StateStore, Depends(get_state_store)],
) -> ApiResponse:
    positions = await store.list_positions(owner=caller)
    data = PositionListResponse(
        items=[PositionResponse.from_domain(p) for p in positions],
        total=len(positions),
    )
    return success_response(data.model_dump(mode="json"))


@router.get("/{market_id}")
async def get_position(
    market_id: Annotated[int, Path(ge=0)],
    caller: Annotated[str, Depends(get_current_caller)],
    store: Annotated[StateStore, Depends(get_state_store)],
) -> ApiResponse:
    position = await store.get_position(caller, market_id)
    if position is None:
        raise PositionNotFoundError(market_id)
    return success_response(PositionResponse.from_domain(position).model_dump(mode="json"))
