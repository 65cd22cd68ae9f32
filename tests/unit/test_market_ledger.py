"""Tests for pm_market.domain.ledger and Market derived prices."""

from datetime import UTC, datetime, timedelta

import pytest

from src.pm_common.errors import (
    AlreadyResolvedError,
    ArithmeticOverflowError,
    InvalidAmountError,
    MarketEndedError,
    MarketResolvedError,
    NotAuthorizedError,
)
from src.pm_common.fixed_point import SCALE, U128_MAX, mul_div
from src.pm_market.domain import ledger
from src.pm_market.domain.models import Market
from src.pm_market.domain.pricing import quote_buy

NOW = datetime(2026, 1, 1, tzinfo=UTC)
END = NOW + timedelta(days=7)


def _market(liquidity: int = 1000) -> Market:
    return ledger.open_market(
        market_id=3,
        creator="alice",
        question="Will it rain?",
        categories=["weather", "weather"],
        end_time=END,
        initial_liquidity=liquidity,
        now=NOW,
    )


class TestOpenMarket:
    def test_pools_seeded_at_half(self) -> None:
        m = _market(1000)
        assert m.yes_pool == 500
        assert m.no_pool == 500
        assert m.total_yes_shares == 500
        assert m.total_no_shares == 500
        assert m.seed_shares == 500
        assert m.resolved is False
        assert m.outcome is None
        assert m.volume == 0

    def test_odd_liquidity_floors(self) -> None:
        m = _market(1001)
        assert m.yes_pool == 500
        assert m.no_pool == 500

    def test_categories_keep_order_and_duplicates(self) -> None:
        assert _market().categories == ["weather", "weather"]

    def test_naive_end_time_treated_as_utc(self) -> None:
        m = ledger.open_market(
            market_id=0,
            creator="alice",
            question="q",
            categories=[],
            end_time=datetime(2030, 1, 1),
            initial_liquidity=10,
            now=NOW,
        )
        assert m.end_time.tzinfo is not None

    @pytest.mark.parametrize("liquidity", [0, 1])
    def test_liquidity_too_small(self, liquidity: int) -> None:
        with pytest.raises(InvalidAmountError):
            ledger.check_initial_liquidity(liquidity)

    def test_liquidity_out_of_domain(self) -> None:
        with pytest.raises(ArithmeticOverflowError):
            ledger.check_initial_liquidity(U128_MAX + 1)


class TestTradeGuards:
    def test_zero_shares_rejected(self) -> None:
        with pytest.raises(InvalidAmountError):
            ledger.check_trade_amount(0)

    def test_buy_open_market(self) -> None:
        ledger.check_can_buy(_market(), NOW)

    def test_buy_at_end_time_allowed(self) -> None:
        ledger.check_can_buy(_market(), END)

    def test_buy_after_end_time(self) -> None:
        with pytest.raises(MarketEndedError):
            ledger.check_can_buy(_market(), END + timedelta(seconds=1))

    def test_buy_resolved(self) -> None:
        m = _market()
        ledger.resolve(m, "alice", True)
        with pytest.raises(MarketResolvedError):
            ledger.check_can_buy(m, NOW)

    def test_sell_after_end_time_allowed(self) -> None:
        ledger.check_can_sell(_market())

    def test_sell_resolved(self) -> None:
        m = _market()
        ledger.resolve(m, "alice", False)
        with pytest.raises(MarketResolvedError):
            ledger.check_can_sell(m)


class TestApplyPoolUpdate:
    def test_apply_accumulates_volume(self) -> None:
        m = _market()
        update = quote_buy(m, is_yes=True, shares=100)
        ledger.apply_pool_update(m, update, ledger.next_volume(m, update))
        assert (m.yes_pool, m.no_pool) == (400, 625)
        assert m.total_yes_shares == 600
        assert m.volume == 125


class TestResolve:
    def test_creator_resolves(self) -> None:
        m = _market()
        ledger.resolve(m, "alice", True)
        assert m.resolved is True
        assert m.outcome is True

    def test_non_creator_rejected(self) -> None:
        m = _market()
        with pytest.raises(NotAuthorizedError):
            ledger.resolve(m, "mallory", True)
        assert m.resolved is False

    def test_resolve_twice(self) -> None:
        m = _market()
        ledger.resolve(m, "alice", True)
        with pytest.raises(AlreadyResolvedError):
            ledger.resolve(m, "alice", False)
        assert m.outcome is True


class TestPrices:
    def test_balanced_pool_is_half(self) -> None:
        m = _market()
        assert m.yes_price == SCALE // 2
        assert m.no_price == SCALE // 2

    def test_price_follows_opposing_pool(self) -> None:
        m = _market()
        m.yes_pool, m.no_pool = 400, 625
        assert m.yes_price == mul_div(625, SCALE, 1025)
        assert m.yes_price > m.no_price

    def test_empty_pool_defaults_to_half(self) -> None:
        m = _market()
        m.yes_pool = m.no_pool = 0
        assert m.yes_price == SCALE // 2
