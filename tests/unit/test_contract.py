"""MarketContract scenarios against a fresh InMemoryStateStore."""

import logging
from datetime import UTC, datetime, timedelta
from unittest.mock import patch

import pytest
import pytest_asyncio

from src.pm_common.enums import ComboStatus, Counter, OrderSide, OrderStatus
from src.pm_common.errors import (
    AlreadyClaimedError,
    AlreadyResolvedError,
    ComboMarketResolvedError,
    ComboNotFoundError,
    CostExceedsLimitError,
    InsufficientSharesError,
    InvalidAmountError,
    InvalidLegCountError,
    MarketEndedError,
    MarketNotFoundError,
    MarketNotResolvedError,
    MarketResolvedError,
    NotAuthorizedError,
    OrderNotCancellableError,
    OrderNotFoundError,
    PartialResolutionPreventsCancelError,
    PositionNotFoundError,
    ProceedsBelowMinimumError,
    UnauthenticatedError,
)
from src.pm_common.fixed_point import SCALE
from src.pm_engine.domain.operations import (
    BuyShares,
    CancelCombo,
    CancelLimitOrder,
    ClaimWinnings,
    ComboLegInput,
    CreateCombo,
    CreateMarket,
    PlaceLimitOrder,
    ResolveMarket,
    SellShares,
)
from src.pm_engine.engine.contract import MarketContract
from src.pm_position.domain.ledger import empty_position


# Matches the fixed clock of the ctx fixture in tests/conftest.py
END_TIME = datetime(2026, 1, 1, tzinfo=UTC) + timedelta(days=30)


def _create(liquidity: int = 1000, question: str = "Will it rain?") -> CreateMarket:
    return CreateMarket(
        question=question, categories=["weather"], end_time=END_TIME,
        initial_liquidity=liquidity,
    )


@pytest.fixture
def contract(store) -> MarketContract:
    return MarketContract(store)


@pytest_asyncio.fixture
async def market_id(contract, ctx) -> int:
    resp = await contract.execute(_create(), ctx("alice"))
    return resp.market_id


class TestAuthentication:
    @pytest.mark.asyncio
    async def test_missing_caller(self, contract, ctx) -> None:
        with pytest.raises(UnauthenticatedError):
            await contract.execute(_create(), ctx(None))


class TestCreateMarket:
    @pytest.mark.asyncio
    async def test_sequential_ids(self, contract, ctx, store) -> None:
        first = await contract.execute(_create(), ctx("alice"))
        second = await contract.execute(_create(), ctx("bob"))
        assert (first.market_id, second.market_id) == (0, 1)
        assert await store.peek_counter(Counter.MARKET) == 2

    @pytest.mark.asyncio
    async def test_seeded_state(self, contract, ctx, store, market_id) -> None:
        market = await store.get_market(market_id)
        assert market.creator == "alice"
        assert (market.yes_pool, market.no_pool) == (500, 500)
        assert (market.total_yes_shares, market.total_no_shares) == (500, 500)
        assert await store.list_positions(market_id=market_id) == []

    @pytest.mark.asyncio
    async def test_invalid_liquidity_consumes_no_id(self, contract, ctx, store) -> None:
        with pytest.raises(InvalidAmountError):
            await contract.execute(_create(liquidity=1), ctx("alice"))
        assert await store.peek_counter(Counter.MARKET) == 0


class TestBuyShares:
    @pytest.mark.asyncio
    async def test_buy_yes_scenario(self, contract, ctx, store, market_id) -> None:
        op = BuyShares(market_id=market_id, is_yes=True, shares=100, max_cost=125)
        resp = await contract.execute(op, ctx("bob"))
        assert resp.cost == 125

        market = await store.get_market(market_id)
        assert market.no_pool == 625
        assert market.yes_pool == 400
        assert market.total_yes_shares == 600
        assert market.volume == 125
        assert await store.get_total_volume() == 125
        position = await store.get_position("bob", market_id)
        assert (position.yes_shares, position.no_shares) == (100, 0)

    @pytest.mark.asyncio
    async def test_cost_exceeds_limit_leaves_state(self, contract, ctx, store, market_id) -> None:
        op = BuyShares(market_id=market_id, is_yes=True, shares=100, max_cost=124)
        with pytest.raises(CostExceedsLimitError):
            await contract.execute(op, ctx("bob"))
        market = await store.get_market(market_id)
        assert (market.yes_pool, market.no_pool, market.volume) == (500, 500, 0)
        assert await store.get_position("bob", market_id) is None
        assert await store.get_total_volume() == 0

    @pytest.mark.asyncio
    async def test_unknown_market(self, contract, ctx) -> None:
        op = BuyShares(market_id=42, is_yes=True, shares=1, max_cost=10)
        with pytest.raises(MarketNotFoundError):
            await contract.execute(op, ctx("bob"))

    @pytest.mark.asyncio
    async def test_after_end_time(self, contract, ctx, market_id) -> None:
        op = BuyShares(market_id=market_id, is_yes=True, shares=1, max_cost=10)
        with pytest.raises(MarketEndedError):
            await contract.execute(op, ctx("bob", END_TIME + timedelta(seconds=1)))

    @pytest.mark.asyncio
    async def test_zero_shares(self, contract, ctx, market_id) -> None:
        op = BuyShares(market_id=market_id, is_yes=True, shares=0, max_cost=10)
        with pytest.raises(InvalidAmountError):
            await contract.execute(op, ctx("bob"))

    @pytest.mark.asyncio
    async def test_accumulates_position(self, contract, ctx, store, market_id) -> None:
        for _ in range(2):
            op = BuyShares(market_id=market_id, is_yes=False, shares=10, max_cost=SCALE)
            await contract.execute(op, ctx("bob"))
        position = await store.get_position("bob", market_id)
        assert position.no_shares == 20


class TestSellShares:
    @pytest.mark.asyncio
    async def test_round_trip(self, contract, ctx, store, market_id) -> None:
        buy = BuyShares(market_id=market_id, is_yes=True, shares=100, max_cost=125)
        cost = (await contract.execute(buy, ctx("bob"))).cost
        sell = SellShares(market_id=market_id, is_yes=True, shares=100)
        proceeds = (await contract.execute(sell, ctx("bob"))).proceeds

        assert proceeds <= cost
        market = await store.get_market(market_id)
        assert (market.yes_pool, market.no_pool) == (500, 500)
        assert market.total_yes_shares == 500
        assert market.volume == 250
        assert await store.get_total_volume() == 250
        assert (await store.get_position("bob", market_id)).yes_shares == 0

    @pytest.mark.asyncio
    async def test_without_shares(self, contract, ctx, market_id) -> None:
        sell = SellShares(market_id=market_id, is_yes=True, shares=1)
        with pytest.raises(InsufficientSharesError):
            await contract.execute(sell, ctx("bob"))

    @pytest.mark.asyncio
    async def test_more_than_held(self, contract, ctx, store, market_id) -> None:
        buy = BuyShares(market_id=market_id, is_yes=True, shares=10, max_cost=SCALE)
        await contract.execute(buy, ctx("bob"))
        sell = SellShares(market_id=market_id, is_yes=True, shares=11)
        with pytest.raises(InsufficientSharesError):
            await contract.execute(sell, ctx("bob"))
        assert (await store.get_position("bob", market_id)).yes_shares == 10

    @pytest.mark.asyncio
    async def test_below_min_proceeds(self, contract, ctx, market_id) -> None:
        buy = BuyShares(market_id=market_id, is_yes=True, shares=100, max_cost=125)
        await contract.execute(buy, ctx("bob"))
        sell = SellShares(market_id=market_id, is_yes=True, shares=100, min_proceeds=126)
        with pytest.raises(ProceedsBelowMinimumError):
            await contract.execute(sell, ctx("bob"))

    @pytest.mark.asyncio
    async def test_allowed_after_end_time(self, contract, ctx, market_id) -> None:
        buy = BuyShares(market_id=market_id, is_yes=True, shares=100, max_cost=125)
        await contract.execute(buy, ctx("bob"))
        sell = SellShares(market_id=market_id, is_yes=True, shares=50)
        resp = await contract.execute(sell, ctx("bob", END_TIME + timedelta(days=1)))
        assert resp.proceeds > 0

    @pytest.mark.asyncio
    async def test_resolved_market(self, contract, ctx, market_id) -> None:
        buy = BuyShares(market_id=market_id, is_yes=True, shares=100, max_cost=125)
        await contract.execute(buy, ctx("bob"))
        await contract.execute(ResolveMarket(market_id=market_id, outcome=True), ctx("alice"))
        sell = SellShares(market_id=market_id, is_yes=True, shares=1)
        with pytest.raises(MarketResolvedError):
            await contract.execute(sell, ctx("bob"))


class TestResolveAndClaim:
    @pytest.mark.asyncio
    async def test_claim_scenario(self, contract, ctx, store, market_id) -> None:
        buy = BuyShares(market_id=market_id, is_yes=True, shares=100, max_cost=125)
        await contract.execute(buy, ctx("bob"))
        resolved = await contract.execute(
            ResolveMarket(market_id=market_id, outcome=True), ctx("alice")
        )
        assert resolved.combos_updated == 0

        claimed = await contract.execute(ClaimWinnings(market_id=market_id), ctx("bob"))
        assert claimed.payout == 170
        assert (await store.get_position("bob", market_id)).claimed is True

    @pytest.mark.asyncio
    async def test_claim_twice(self, contract, ctx, market_id) -> None:
        buy = BuyShares(market_id=market_id, is_yes=True, shares=100, max_cost=125)
        await contract.execute(buy, ctx("bob"))
        await contract.execute(ResolveMarket(market_id=market_id, outcome=True), ctx("alice"))
        await contract.execute(ClaimWinnings(market_id=market_id), ctx("bob"))
        with pytest.raises(AlreadyClaimedError):
            await contract.execute(ClaimWinnings(market_id=market_id), ctx("bob"))

    @pytest.mark.asyncio
    async def test_claim_before_resolution(self, contract, ctx, market_id) -> None:
        with pytest.raises(MarketNotResolvedError):
            await contract.execute(ClaimWinnings(market_id=market_id), ctx("bob"))

    @pytest.mark.asyncio
    async def test_claim_without_position(self, contract, ctx, market_id) -> None:
        await contract.execute(ResolveMarket(market_id=market_id, outcome=True), ctx("alice"))
        with pytest.raises(PositionNotFoundError):
            await contract.execute(ClaimWinnings(market_id=market_id), ctx("carol"))

    @pytest.mark.asyncio
    async def test_only_creator_resolves(self, contract, ctx, market_id) -> None:
        with pytest.raises(NotAuthorizedError):
            await contract.execute(ResolveMarket(market_id=market_id, outcome=True), ctx("bob"))

    @pytest.mark.asyncio
    async def test_resolve_twice(self, contract, ctx, market_id) -> None:
        await contract.execute(ResolveMarket(market_id=market_id, outcome=True), ctx("alice"))
        with pytest.raises(AlreadyResolvedError):
            await contract.execute(
                ResolveMarket(market_id=market_id, outcome=False), ctx("alice")
            )


class TestCombos:
    async def _two_markets(self, contract, ctx) -> tuple[int, int]:
        a = await contract.execute(_create(question="A?"), ctx("alice"))
        b = await contract.execute(_create(question="B?"), ctx("alice"))
        return a.market_id, b.market_id

    def _combo(self, a: int, b: int, stake: int = 100) -> CreateCombo:
        return CreateCombo(
            name="double",
            legs=[
                ComboLegInput(market_id=a, prediction=True),
                ComboLegInput(market_id=b, prediction=True),
            ],
            stake=stake,
        )

    @pytest.mark.asyncio
    async def test_even_double_pays_four_times(self, contract, ctx, store) -> None:
        a, b = await self._two_markets(contract, ctx)
        resp = await contract.execute(self._combo(a, b), ctx("bob"))
        assert resp.combo_id == 0
        assert resp.potential_payout == 400
        combo = await store.get_combo(resp.combo_id)
        assert [leg.odds for leg in combo.legs] == [5 * 10**17, 5 * 10**17]
        assert combo.status == ComboStatus.ACTIVE

    @pytest.mark.asyncio
    async def test_losing_leg_cascades_to_lost(self, contract, ctx, store) -> None:
        a, b = await self._two_markets(contract, ctx)
        combo_id = (await contract.execute(self._combo(a, b), ctx("bob"))).combo_id
        resolved = await contract.execute(ResolveMarket(market_id=a, outcome=False), ctx("alice"))
        assert resolved.combos_updated == 1
        assert (await store.get_combo(combo_id)).status == ComboStatus.LOST

        resolved = await contract.execute(ResolveMarket(market_id=b, outcome=True), ctx("alice"))
        assert resolved.combos_updated == 0
        assert (await store.get_combo(combo_id)).status == ComboStatus.LOST

    @pytest.mark.asyncio
    async def test_all_legs_win(self, contract, ctx, store) -> None:
        a, b = await self._two_markets(contract, ctx)
        combo_id = (await contract.execute(self._combo(a, b), ctx("bob"))).combo_id
        await contract.execute(ResolveMarket(market_id=a, outcome=True), ctx("alice"))
        assert (await store.get_combo(combo_id)).status == ComboStatus.PARTIALLY_RESOLVED
        await contract.execute(ResolveMarket(market_id=b, outcome=True), ctx("alice"))
        assert (await store.get_combo(combo_id)).status == ComboStatus.WON

    @pytest.mark.asyncio
    async def test_odds_locked_at_creation(self, contract, ctx, store) -> None:
        a, b = await self._two_markets(contract, ctx)
        combo_id = (await contract.execute(self._combo(a, b), ctx("bob"))).combo_id
        buy = BuyShares(market_id=a, is_yes=True, shares=100, max_cost=SCALE)
        await contract.execute(buy, ctx("carol"))
        combo = await store.get_combo(combo_id)
        assert combo.potential_payout == 400
        assert combo.legs[0].odds == 5 * 10**17

    @pytest.mark.asyncio
    @pytest.mark.parametrize("leg_count", [1, 11])
    async def test_leg_count_bounds(self, contract, ctx, store, leg_count) -> None:
        market_id = (await contract.execute(_create(), ctx("alice"))).market_id
        op = CreateCombo(
            name="bad",
            legs=[ComboLegInput(market_id=market_id, prediction=True)] * leg_count,
            stake=100,
        )
        with pytest.raises(InvalidLegCountError):
            await contract.execute(op, ctx("bob"))
        assert await store.peek_counter(Counter.COMBO) == 0

    @pytest.mark.asyncio
    async def test_configured_leg_bounds(self, store, ctx) -> None:
        contract = MarketContract(store, min_legs=1, max_legs=1)
        market_id = (await contract.execute(_create(), ctx("alice"))).market_id
        op = CreateCombo(
            name="single", legs=[ComboLegInput(market_id=market_id, prediction=False)],
            stake=10,
        )
        assert (await contract.execute(op, ctx("bob"))).potential_payout == 20

    @pytest.mark.asyncio
    async def test_resolved_leg_market(self, contract, ctx) -> None:
        a, b = await self._two_markets(contract, ctx)
        await contract.execute(ResolveMarket(market_id=a, outcome=True), ctx("alice"))
        with pytest.raises(ComboMarketResolvedError):
            await contract.execute(self._combo(a, b), ctx("bob"))

    @pytest.mark.asyncio
    async def test_zero_stake(self, contract, ctx) -> None:
        a, b = await self._two_markets(contract, ctx)
        with pytest.raises(InvalidAmountError):
            await contract.execute(self._combo(a, b, stake=0), ctx("bob"))

    @pytest.mark.asyncio
    async def test_cancel_then_cascade_skips(self, contract, ctx, store) -> None:
        a, b = await self._two_markets(contract, ctx)
        combo_id = (await contract.execute(self._combo(a, b), ctx("bob"))).combo_id
        await contract.execute(CancelCombo(combo_id=combo_id), ctx("bob"))
        resolved = await contract.execute(ResolveMarket(market_id=a, outcome=True), ctx("alice"))
        assert resolved.combos_updated == 0
        assert (await store.get_combo(combo_id)).status == ComboStatus.CANCELLED

    @pytest.mark.asyncio
    async def test_cancel_after_partial_resolution(self, contract, ctx) -> None:
        a, b = await self._two_markets(contract, ctx)
        combo_id = (await contract.execute(self._combo(a, b), ctx("bob"))).combo_id
        await contract.execute(ResolveMarket(market_id=a, outcome=True), ctx("alice"))
        with pytest.raises(PartialResolutionPreventsCancelError):
            await contract.execute(CancelCombo(combo_id=combo_id), ctx("bob"))

    @pytest.mark.asyncio
    async def test_cancel_unknown(self, contract, ctx) -> None:
        with pytest.raises(ComboNotFoundError):
            await contract.execute(CancelCombo(combo_id=7), ctx("bob"))


class TestLimitOrders:
    def _order(self, market_id: int, price: int = SCALE // 2) -> PlaceLimitOrder:
        return PlaceLimitOrder(
            market_id=market_id, is_yes=True, side=OrderSide.BUY, price=price, amount=10
        )

    @pytest.mark.asyncio
    async def test_place_and_cancel(self, contract, ctx, store, market_id) -> None:
        order_id = (await contract.execute(self._order(market_id), ctx("bob"))).order_id
        order = await store.get_limit_order(order_id)
        assert order.status == OrderStatus.OPEN
        assert order.filled_amount == 0

        await contract.execute(CancelLimitOrder(order_id=order_id), ctx("bob"))
        assert (await store.get_limit_order(order_id)).status == OrderStatus.CANCELLED

    @pytest.mark.asyncio
    async def test_cancel_twice(self, contract, ctx, market_id) -> None:
        order_id = (await contract.execute(self._order(market_id), ctx("bob"))).order_id
        await contract.execute(CancelLimitOrder(order_id=order_id), ctx("bob"))
        with pytest.raises(OrderNotCancellableError):
            await contract.execute(CancelLimitOrder(order_id=order_id), ctx("bob"))

    @pytest.mark.asyncio
    async def test_cancel_by_other(self, contract, ctx, market_id) -> None:
        order_id = (await contract.execute(self._order(market_id), ctx("bob"))).order_id
        with pytest.raises(NotAuthorizedError):
            await contract.execute(CancelLimitOrder(order_id=order_id), ctx("carol"))

    @pytest.mark.asyncio
    async def test_cancel_unknown(self, contract, ctx) -> None:
        with pytest.raises(OrderNotFoundError):
            await contract.execute(CancelLimitOrder(order_id=3), ctx("bob"))

    @pytest.mark.asyncio
    @pytest.mark.parametrize("price", [0, SCALE + 1])
    async def test_price_out_of_range(self, contract, ctx, market_id, price) -> None:
        with pytest.raises(InvalidAmountError):
            await contract.execute(self._order(market_id, price=price), ctx("bob"))

    @pytest.mark.asyncio
    async def test_resolved_market(self, contract, ctx, market_id) -> None:
        await contract.execute(ResolveMarket(market_id=market_id, outcome=True), ctx("alice"))
        with pytest.raises(MarketResolvedError):
            await contract.execute(self._order(market_id), ctx("bob"))


class TestInvariantVerification:
    @pytest.mark.asyncio
    async def test_off_by_default_skips_scan(self, contract, ctx, store, market_id) -> None:
        with patch.object(store, "list_positions", wraps=store.list_positions) as spy:
            await contract.execute(
                BuyShares(market_id=market_id, is_yes=True, shares=10, max_cost=100), ctx("bob")
            )
            await contract.execute(
                SellShares(market_id=market_id, is_yes=True, shares=10, min_proceeds=0), ctx("bob")
            )
        spy.assert_not_called()

    @pytest.mark.asyncio
    async def test_enabled_scans_after_each_trade(self, store, ctx) -> None:
        contract = MarketContract(store, verify_invariants=True)
        market_id = (await contract.execute(_create(), ctx("alice"))).market_id
        with patch.object(store, "list_positions", wraps=store.list_positions) as spy:
            await contract.execute(
                BuyShares(market_id=market_id, is_yes=True, shares=10, max_cost=100), ctx("bob")
            )
            await contract.execute(
                SellShares(market_id=market_id, is_yes=True, shares=10, min_proceeds=0), ctx("bob")
            )
        assert spy.await_count == 2

    @pytest.mark.asyncio
    async def test_enabled_logs_supply_mismatch(self, store, ctx, caplog) -> None:
        contract = MarketContract(store, verify_invariants=True)
        market_id = (await contract.execute(_create(), ctx("alice"))).market_id
        ghost = empty_position("ghost", market_id)
        ghost.yes_shares = 5
        await store.put_position(ghost)

        with caplog.at_level(logging.ERROR, logger="src.pm_clearing.domain.invariants"):
            resp = await contract.execute(
                BuyShares(market_id=market_id, is_yes=True, shares=10, max_cost=100), ctx("bob")
            )
        assert resp.cost > 0
        assert any("INV-3" in r.message for r in caplog.records)
