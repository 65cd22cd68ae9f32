"""Pydantic schemas for positions API."""
from pydantic import BaseModel

from src.pm_common.response import AmountStr
from src.pm_position.domain.models import Position


class PositionResponse(BaseModel):
    market_id: int
    yes_shares: AmountStr
    no_shares: AmountStr
    claimed: bool

    @classmethod
    def from_domain(cls, p: Position) -> "PositionResponse":
        return cls(
            market_id=p.market_id,
            yes_shares=p.yes_shares,
            no_shares=p.no_shares,
            claimed=p.claimed,
        )


class PositionListResponse(BaseModel):
    items: list[PositionResponse]
    total: int
