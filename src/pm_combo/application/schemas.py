"""Pydantic schemas for pm_combo API requests and responses."""

from pydantic import BaseModel, Field

from src.pm_combo.domain.models import Combo, ComboLeg
from src.pm_common.response import AmountStr
from src.pm_engine.domain.operations import Amount, ComboLegInput


class CreateComboRequest(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    legs: list[ComboLegInput]
    stake: Amount


class ComboLegOut(BaseModel):
    market_id: int
    prediction: bool
    odds: AmountStr  # implied probability at creation, fraction of 10^18
    resolved: bool
    won: bool | None

    @classmethod
    def from_domain(cls, leg: ComboLeg) -> "ComboLegOut":
        return cls(
            market_id=leg.market_id,
            prediction=leg.prediction,
            odds=leg.odds,
            resolved=leg.resolved,
            won=leg.won,
        )


class ComboResponse(BaseModel):
    id: int
    owner: str
    name: str
    stake: AmountStr
    potential_payout: AmountStr
    status: str
    created_at: str
    legs: list[ComboLegOut]

    @classmethod
    def from_domain(cls, c: Combo) -> "ComboResponse":
        return cls(
            id=c.id,
            owner=c.owner,
            name=c.name,
            stake=c.stake,
            potential_payout=c.potential_payout,
            status=c.status.value,
            created_at=c.created_at.isoformat(),
            legs=[ComboLegOut.from_domain(leg) for leg in c.legs],
        )


class ComboListResponse(BaseModel):
    items: list[ComboResponse]
    total: int
