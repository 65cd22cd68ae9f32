# src/pm_order/api/router.py
from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query

from src.pm_common.response import ApiResponse, success_response
from src.pm_engine.domain.store import StateStore
from src.pm_engine.infrastructure.provider import get_state_store
from src.pm_gateway.auth.dependencies import get_current_caller
from src.pm_order.application import service as svc
from src.pm_order.application.schemas import PlaceLimitOrderRequest

router = APIRouter(prefix="/orders", tags=["orders"])


@router.post("", status_code=201)
async def place_order(
    req: PlaceLimitOrderRequest,
    caller: Annotated[str, Depends(get_current_caller)],
    store: Annotated[StateStore, Depends(get_state_store)],
) -> ApiResponse:
    result = await svc.place_order(req, caller, store)
    return success_response(result.model_dump(mode="json"))


@router.post("/{order_id}/cancel")
async def cancel_order(
    order_id: Annotated[int, Path(ge=0)],
    caller: Annotated[str, Depends(get_current_caller)],
    store: Annotated[StateStore, Depends(get_state_store)],
) -> ApiResponse:
    result = await svc.cancel_order(order_id, caller, store)
    return success_response(result.model_dump(mode="json"))


@router.get("")
async def list_orders(
    caller: Annotated[str, Depends(get_current_caller)],
    store: Annotated[StateStore, Depends(get_state_store)],
    market_id: int | None = Query(None, ge=0, description="Filter by market ID"),
    open_only: bool = Query(
        False, alias="open", description="Only OPEN / PARTIALLY_FILLED orders"
    ),
) -> ApiResponse:
    result = await svc.list_orders(market_id, open_only, store)
    return success_response(result.model_dump(mode="json"))
