"""Pydantic schemas for pm_market API requests and responses.

Request amounts accept ints or decimal strings; response amounts are always
decimal strings (AmountStr) since attos overflow JSON's safe-integer range.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from src.pm_common.fixed_point import to_display
from src.pm_common.response import AmountStr
from src.pm_engine.domain.operations import Amount
from src.pm_market.domain.models import Market

# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class CreateMarketRequest(BaseModel):
    question: str = Field(min_length=1, max_length=500)
    categories: list[str] = Field(default_factory=list)
    end_time: datetime
    initial_liquidity: Amount


class BuySharesRequest(BaseModel):
    is_yes: bool
    shares: Amount
    max_cost: Amount


class SellSharesRequest(BaseModel):
    is_yes: bool
    shares: Amount
    min_proceeds: Amount = 0


class ResolveMarketRequest(BaseModel):
    outcome: bool


# ---------------------------------------------------------------------------
# Market list item (lightweight — pools and prices only)
# ---------------------------------------------------------------------------


class MarketListItem(BaseModel):
    id: int
    question: str
    categories: list[str]
    end_time: str
    resolved: bool
    outcome: bool | None
    yes_price: AmountStr
    no_price: AmountStr
    volume: AmountStr

    @classmethod
    def from_domain(cls, m: Market) -> "MarketListItem":
        return cls(
            id=m.id,
            question=m.question,
            categories=list(m.categories),
            end_time=m.end_time.isoformat(),
            resolved=m.resolved,
            outcome=m.outcome,
            yes_price=m.yes_price,
            no_price=m.no_price,
            volume=m.volume,
        )


class MarketListResponse(BaseModel):
    items: list[MarketListItem]
    total: int


# ---------------------------------------------------------------------------
# Market detail (full pool state + derived prices)
# ---------------------------------------------------------------------------


class MarketDetail(BaseModel):
    id: int
    creator: str
    question: str
    categories: list[str]
    end_time: str
    created_at: str
    initial_liquidity: AmountStr
    yes_pool: AmountStr
    no_pool: AmountStr
    total_yes_shares: AmountStr
    total_no_shares: AmountStr
    resolved: bool
    outcome: bool | None
    volume: AmountStr
    volume_display: str
    yes_price: AmountStr
    no_price: AmountStr
    yes_price_display: str
    no_price_display: str

    @classmethod
    def from_domain(cls, m: Market) -> "MarketDetail":
        yes_price = m.yes_price
        no_price = m.no_price
        return cls(
            id=m.id,
            creator=m.creator,
            question=m.question,
            categories=list(m.categories),
            end_time=m.end_time.isoformat(),
            created_at=m.created_at.isoformat(),
            initial_liquidity=m.initial_liquidity,
            yes_pool=m.yes_pool,
            no_pool=m.no_pool,
            total_yes_shares=m.total_yes_shares,
            total_no_shares=m.total_no_shares,
            resolved=m.resolved,
            outcome=m.outcome,
            volume=m.volume,
            volume_display=to_display(m.volume),
            yes_price=yes_price,
            no_price=no_price,
            yes_price_display=to_display(yes_price),
            no_price_display=to_display(no_price),
        )


class StatsResponse(BaseModel):
    total_volume: AmountStr
    total_volume_display: str
    market_count: int
    combo_count: int
    order_count: int
