"""Tests for pm_combo.domain.odds — locked-in parlay odds."""

from datetime import UTC, datetime, timedelta

import pytest

from src.pm_combo.domain.odds import combine_odds, leg_odds, potential_payout
from src.pm_common.errors import ComboMarketResolvedError, ZeroLiquidityError
from src.pm_common.fixed_point import SCALE
from src.pm_market.domain.ledger import open_market, resolve
from src.pm_market.domain.models import Market

NOW = datetime(2026, 1, 1, tzinfo=UTC)


def _market(market_id: int = 0, yes_pool: int = 500, no_pool: int = 500) -> Market:
    m = open_market(
        market_id=market_id,
        creator="alice",
        question="q",
        categories=[],
        end_time=NOW + timedelta(days=1),
        initial_liquidity=1000,
        now=NOW,
    )
    m.yes_pool, m.no_pool = yes_pool, no_pool
    return m


class TestLegOdds:
    def test_balanced_market(self) -> None:
        assert leg_odds(_market(), prediction=True) == 5 * 10**17
        assert leg_odds(_market(), prediction=False) == 5 * 10**17

    def test_predicting_yes_uses_no_pool(self) -> None:
        m = _market(yes_pool=250, no_pool=750)
        assert leg_odds(m, prediction=True) == 750 * SCALE // 1000
        assert leg_odds(m, prediction=False) == 250 * SCALE // 1000

    def test_resolved_market_rejected(self) -> None:
        m = _market()
        resolve(m, "alice", True)
        with pytest.raises(ComboMarketResolvedError):
            leg_odds(m, prediction=True)

    def test_empty_pools_rejected(self) -> None:
        with pytest.raises(ZeroLiquidityError):
            leg_odds(_market(yes_pool=0, no_pool=0), prediction=True)

    def test_zero_probability_rejected(self) -> None:
        # YES priced at zero: the multiplier would be unbounded
        with pytest.raises(ZeroLiquidityError):
            leg_odds(_market(yes_pool=10, no_pool=0), prediction=True)


class TestCombine:
    def test_two_even_legs(self) -> None:
        assert combine_odds([5 * 10**17, 5 * 10**17]) == 4 * SCALE

    def test_no_legs_is_unit(self) -> None:
        assert combine_odds([]) == SCALE

    def test_single_leg_is_reciprocal(self) -> None:
        assert combine_odds([SCALE // 4]) == 4 * SCALE

    def test_potential_payout(self) -> None:
        assert potential_payout(100, 4 * SCALE) == 400

    def test_potential_payout_floors(self) -> None:
        # 1 / 0.3 = 3.333...
        combined = combine_odds([3 * 10**17])
        assert potential_payout(3, combined) == 9
