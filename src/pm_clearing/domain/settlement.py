"""Claim settlement — winners split the whole remaining pool pro rata.

payout = winning_shares * (yes_pool + no_pool) / total_winning_shares

total_winning_shares includes the seed shares minted at market creation, so
the seed's share of the pool is never paid out to any position.
"""

from src.pm_common.errors import (
    AlreadyClaimedError,
    MarketNotResolvedError,
    NoWinningSharesError,
    OutcomeUnsetError,
)
from src.pm_common.fixed_point import checked_add, mul_div
from src.pm_market.domain.models import Market
from src.pm_position.domain.models import Position


def winning_side_totals(market: Market, position: Position) -> tuple[int, int]:
    """Return (winning_shares, total_winning_shares) for a resolved market."""
    if not market.resolved:
        raise MarketNotResolvedError(market.id)
    if market.outcome is None:
        raise OutcomeUnsetError(market.id)
    if market.outcome:
        return position.yes_shares, market.total_yes_shares
    return position.no_shares, market.total_no_shares


def compute_payout(market: Market, position: Position) -> int:
    if position.claimed:
        raise AlreadyClaimedError(market.id)
    winning_shares, total_winning_shares = winning_side_totals(market, position)
    if winning_shares == 0:
        raise NoWinningSharesError(market.id)
    total_pool = checked_add(market.yes_pool, market.no_pool)
    return mul_div(winning_shares, total_pool, total_winning_shares)
