"""Domain models for pm_position — pure dataclasses, no I/O."""

from dataclasses import dataclass


@dataclass
class Position:
    owner: str
    market_id: int
    yes_shares: int = 0
    no_shares: int = 0
    claimed: bool = False

    def shares_of(self, is_yes: bool) -> int:
        return self.yes_shares if is_yes else self.no_shares
