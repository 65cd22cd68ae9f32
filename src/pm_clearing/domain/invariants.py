"""Market invariant verification over a market and all of its positions."""

import logging

from src.pm_market.domain.models import Market
from src.pm_position.domain.models import Position

logger = logging.getLogger(__name__)


def verify_market_invariants(market: Market, positions: list[Position]) -> list[str]:
    """Check a market against its positions. Returns list of violation strings.

    INV-1: outcome is set  <=>  resolved
    INV-2: yes_pool >= 0 and no_pool >= 0
    INV-3: total_<side>_shares == seed_shares + sum(position.<side>_shares)
    """
    violations: list[str] = []

    if (market.outcome is not None) != market.resolved:
        violations.append(
            f"INV-1 violated: market={market.id} resolved={market.resolved} "
            f"outcome={market.outcome}"
        )

    if market.yes_pool < 0 or market.no_pool < 0:
        violations.append(
            f"INV-2 violated: market={market.id} yes_pool={market.yes_pool} "
            f"no_pool={market.no_pool}"
        )

    held = [p for p in positions if p.market_id == market.id]
    yes_sum = market.seed_shares + sum(p.yes_shares for p in held)
    no_sum = market.seed_shares + sum(p.no_shares for p in held)
    if market.total_yes_shares != yes_sum:
        violations.append(
            f"INV-3 violated: market={market.id} total_yes_shares="
            f"{market.total_yes_shares} != seed + positions = {yes_sum}"
        )
    if market.total_no_shares != no_sum:
        violations.append(
            f"INV-3 violated: market={market.id} total_no_shares="
            f"{market.total_no_shares} != seed + positions = {no_sum}"
        )

    for msg in violations:
        logger.error(msg)
    if not violations:
        logger.debug("Invariants OK: market=%s positions=%d", market.id, len(held))
    return violations
