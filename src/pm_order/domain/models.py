"""Limit order domain model — stored and cancellable, never matched."""
from dataclasses import dataclass
from datetime import datetime

from src.pm_common.enums import OrderDuration, OrderSide, OrderStatus


@dataclass
class LimitOrder:
    id: int
    owner: str
    market_id: int
    is_yes: bool
    side: OrderSide
    price: int  # per share, fraction of SCALE
    original_amount: int
    duration: OrderDuration
    created_at: datetime
    filled_amount: int = 0
    status: OrderStatus = OrderStatus.OPEN

    @property
    def remaining_amount(self) -> int:
        return self.original_amount - self.filled_amount

    @property
    def is_cancellable(self) -> bool:
        return self.status in (OrderStatus.OPEN, OrderStatus.PARTIALLY_FILLED)
