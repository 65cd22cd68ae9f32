"""Parlay odds: product of per-leg reciprocal implied probabilities.

Each leg's probability is frozen at creation (locked-in odds); nothing here
is ever recomputed when the underlying pools move later.
"""

from src.pm_common.errors import ComboMarketResolvedError, ZeroLiquidityError
from src.pm_common.fixed_point import SCALE, checked_add, mul_div
from src.pm_market.domain.models import Market


def leg_odds(market: Market, prediction: bool) -> int:
    """Implied probability of the predicted side: opposing_pool / total_pool."""
    if market.resolved:
        raise ComboMarketResolvedError(market.id)
    total = checked_add(market.yes_pool, market.no_pool)
    if total == 0:
        raise ZeroLiquidityError(market.id)
    opposing = market.no_pool if prediction else market.yes_pool
    odds = mul_div(opposing, SCALE, total)
    if odds == 0:
        # A side priced at zero would make the multiplier unbounded.
        raise ZeroLiquidityError(market.id)
    return odds


def combine_odds(leg_probabilities: list[int]) -> int:
    """combined := combined * SCALE / p for each leg, starting at SCALE."""
    combined = SCALE
    for probability in leg_probabilities:
        combined = mul_div(combined, SCALE, probability)
    return combined


def potential_payout(stake: int, combined_odds: int) -> int:
    return mul_div(stake, combined_odds, SCALE)
