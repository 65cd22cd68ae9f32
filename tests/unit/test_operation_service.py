"""Tests for OperationService — transaction wrapping and rejection logging."""

import logging
from datetime import UTC, datetime, timedelta
from unittest.mock import patch

import pytest

from src.pm_common.enums import Counter
from src.pm_common.errors import (
    CostExceedsLimitError,
    MarketNotFoundError,
    UnauthenticatedError,
)
from src.pm_engine.application.service import OperationService, get_operation_service
from src.pm_engine.domain.context import OperationContext
from src.pm_engine.domain.operations import (
    BuyShares,
    ComboLegInput,
    CreateCombo,
    CreateMarket,
    PostComment,
)

NOW = datetime(2026, 1, 1, tzinfo=UTC)


def _create() -> CreateMarket:
    return CreateMarket(
        question="q", end_time=NOW + timedelta(days=1), initial_liquidity=1000
    )


class TestOperationService:
    @pytest.mark.asyncio
    async def test_execute_commits(self, store) -> None:
        svc = OperationService(min_legs=2, max_legs=10)
        resp = await svc.execute(store, _create(), OperationContext("alice", NOW))
        assert resp.kind == "market_created"
        assert await store.get_market(resp.market_id) is not None

    @pytest.mark.asyncio
    async def test_rejection_logged_and_reraised(self, store, caplog) -> None:
        svc = OperationService(min_legs=2, max_legs=10)
        await svc.execute(store, _create(), OperationContext("alice", NOW))
        op = BuyShares(market_id=0, is_yes=True, shares=100, max_cost=1)
        with caplog.at_level(logging.WARNING), pytest.raises(CostExceedsLimitError):
            await svc.execute(store, op, OperationContext("bob", NOW))
        assert "buy_shares rejected for bob" in caplog.text
        assert "[3102]" in caplog.text

    @pytest.mark.asyncio
    async def test_failed_combo_rolls_back_nothing_written(self, store) -> None:
        svc = OperationService(min_legs=2, max_legs=10)
        await svc.execute(store, _create(), OperationContext("alice", NOW))
        op = CreateCombo(
            name="c",
            legs=[
                ComboLegInput(market_id=0, prediction=True),
                ComboLegInput(market_id=5, prediction=True),
            ],
            stake=10,
        )
        with pytest.raises(MarketNotFoundError):
            await svc.execute(store, op, OperationContext("bob", NOW))
        assert await store.peek_counter(Counter.COMBO) == 0

    @pytest.mark.asyncio
    async def test_submit_requires_caller(self, store) -> None:
        svc = OperationService(min_legs=2, max_legs=10)
        with pytest.raises(UnauthenticatedError):
            await svc.submit(store, _create(), None)

    def test_singleton(self) -> None:
        assert get_operation_service() is get_operation_service()

    @pytest.mark.asyncio
    async def test_invariant_check_passed_through(self, store) -> None:
        svc = OperationService(min_legs=2, max_legs=10, verify_invariants=True)
        await svc.execute(store, _create(), OperationContext("alice", NOW))
        op = BuyShares(market_id=0, is_yes=True, shares=10, max_cost=100)
        with patch.object(store, "list_positions", wraps=store.list_positions) as spy:
            await svc.execute(store, op, OperationContext("bob", NOW))
        assert spy.await_count == 1

    @pytest.mark.asyncio
    async def test_failed_social_write_rolls_back_feed_counter(self, store) -> None:
        svc = OperationService(min_legs=2, max_legs=10)
        with pytest.raises(MarketNotFoundError):
            await svc.execute(
                store, PostComment(market_id=3, content="hi"), OperationContext("bob", NOW)
            )
        assert await store.peek_counter(Counter.FEED) == 0
