# src/pm_order/application/service.py
"""Limit orders are accepted and stored but never matched against the pool."""
from src.pm_engine.application.service import get_operation_service
from src.pm_engine.domain.operations import (
    CancelLimitOrder,
    OperationResponse,
    PlaceLimitOrder,
)
from src.pm_engine.domain.store import StateStore
from src.pm_order.application.schemas import (
    OrderListResponse,
    OrderResponse,
    PlaceLimitOrderRequest,
)


async def place_order(
    req: PlaceLimitOrderRequest, caller: str, store: StateStore
) -> OperationResponse:
    op = PlaceLimitOrder(
        market_id=req.market_id,
        is_yes=req.is_yes,
        side=req.side,
        price=req.price,
        amount=req.amount,
        duration=req.duration,
    )
    return await get_operation_service().submit(store, op, caller)


async def cancel_order(order_id: int, caller: str, store: StateStore) -> OperationResponse:
    return await get_operation_service().submit(
        store, CancelLimitOrder(order_id=order_id), caller
    )


async def list_orders(
    market_id: int | None, open_only: bool, store: StateStore
) -> OrderListResponse:
    orders = await store.list_limit_orders(market_id=market_id, open_only=open_only)
    return OrderListResponse(
        items=[OrderResponse.from_domain(o) for o in orders],
        total=len(orders),
    )
