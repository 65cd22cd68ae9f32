"""Per-(owner, market) share bookkeeping.

Balances never go negative: debiting more than the owner holds raises
InsufficientSharesError instead of clamping at zero.
"""

from dataclasses import replace

from src.pm_common.errors import AlreadyClaimedError, InsufficientSharesError
from src.pm_common.fixed_point import checked_add
from src.pm_position.domain.models import Position


def empty_position(owner: str, market_id: int) -> Position:
    return Position(owner=owner, market_id=market_id)


def credit_shares(position: Position, is_yes: bool, shares: int) -> Position:
    """Return a copy of position with shares added to one side."""
    if is_yes:
        return replace(position, yes_shares=checked_add(position.yes_shares, shares))
    return replace(position, no_shares=checked_add(position.no_shares, shares))


def debit_shares(position: Position, is_yes: bool, shares: int) -> Position:
    held = position.shares_of(is_yes)
    if shares > held:
        raise InsufficientSharesError(shares, held)
    if is_yes:
        return replace(position, yes_shares=held - shares)
    return replace(position, no_shares=held - shares)


def mark_claimed(position: Position) -> None:
    """One-way flip; a claimed position can never be paid again."""
    if position.claimed:
        raise AlreadyClaimedError(position.market_id)
    position.claimed = True
