"""Domain models for pm_combo — pure dataclasses, no I/O."""

from dataclasses import dataclass, field
from datetime import datetime

from src.pm_common.enums import ComboStatus


@dataclass
class ComboLeg:
    market_id: int
    prediction: bool  # True = YES
    odds: int  # implied probability of the predicted side at creation, fraction of SCALE
    resolved: bool = False
    won: bool | None = None


@dataclass
class Combo:
    id: int
    owner: str
    name: str
    stake: int
    potential_payout: int
    created_at: datetime
    legs: list[ComboLeg] = field(default_factory=list)
    status: ComboStatus = ComboStatus.ACTIVE

    @property
    def is_open(self) -> bool:
        return self.status in (ComboStatus.ACTIVE, ComboStatus.PARTIALLY_RESOLVED)

    @property
    def market_ids(self) -> set[int]:
        return {leg.market_id for leg in self.legs}
