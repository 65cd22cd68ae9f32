"""Domain models for pm_market — pure dataclasses, no I/O."""

from dataclasses import dataclass, field
from datetime import datetime

from src.pm_common.fixed_point import SCALE, mul_div


@dataclass
class Market:
    id: int
    creator: str
    question: str
    end_time: datetime
    created_at: datetime
    initial_liquidity: int
    yes_pool: int
    no_pool: int
    total_yes_shares: int
    total_no_shares: int
    categories: list[str] = field(default_factory=list)
    resolved: bool = False
    outcome: bool | None = None  # True = YES
    volume: int = 0

    @property
    def total_pool(self) -> int:
        return self.yes_pool + self.no_pool

    @property
    def seed_shares(self) -> int:
        """Shares minted per side at creation, owned by no position."""
        return self.initial_liquidity // 2

    @property
    def yes_price(self) -> int:
        """Implied YES probability as a fraction of SCALE (no_pool / total)."""
        if self.total_pool == 0:
            return SCALE // 2
        return mul_div(self.no_pool, SCALE, self.total_pool)

    @property
    def no_price(self) -> int:
        if self.total_pool == 0:
            return SCALE // 2
        return mul_div(self.yes_pool, SCALE, self.total_pool)
