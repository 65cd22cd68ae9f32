# src/pm_order/application/schemas.py
from pydantic import BaseModel

from src.pm_common.enums import OrderDuration, OrderSide
from src.pm_common.response import AmountStr
from src.pm_engine.domain.operations import Amount
from src.pm_order.domain.models import LimitOrder


class PlaceLimitOrderRequest(BaseModel):
    market_id: int
    is_yes: bool
    side: OrderSide
    price: Amount  # per share, fraction of 10^18
    amount: Amount
    duration: OrderDuration = OrderDuration.GTC


class OrderResponse(BaseModel):
    id: int
    owner: str
    market_id: int
    is_yes: bool
    side: str
    price: AmountStr
    original_amount: AmountStr
    filled_amount: AmountStr
    remaining_amount: AmountStr
    duration: str
    status: str
    created_at: str

    @classmethod
    def from_domain(cls, o: LimitOrder) -> "OrderResponse":
        return cls(
            id=o.id,
            owner=o.owner,
            market_id=o.market_id,
            is_yes=o.is_yes,
            side=o.side.value,
            price=o.price,
            original_amount=o.original_amount,
            filled_amount=o.filled_amount,
            remaining_amount=o.remaining_amount,
            duration=o.duration.value,
            status=o.status.value,
            created_at=o.created_at.isoformat(),
        )


class OrderListResponse(BaseModel):
    items: list[OrderResponse]
    total: int
