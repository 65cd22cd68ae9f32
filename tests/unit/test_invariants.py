"""Tests for pm_clearing.domain.invariants — market consistency checks."""

import logging
from datetime import UTC, datetime, timedelta

from src.pm_clearing.domain.invariants import verify_market_invariants
from src.pm_market.domain.ledger import open_market
from src.pm_market.domain.models import Market
from src.pm_position.domain.models import Position

NOW = datetime(2026, 1, 1, tzinfo=UTC)


def _market() -> Market:
    m = open_market(
        market_id=0,
        creator="alice",
        question="q",
        categories=[],
        end_time=NOW + timedelta(days=1),
        initial_liquidity=1000,
        now=NOW,
    )
    m.total_yes_shares = 600
    return m


class TestVerifyMarketInvariants:
    def test_consistent(self) -> None:
        positions = [Position(owner="bob", market_id=0, yes_shares=100)]
        assert verify_market_invariants(_market(), positions) == []

    def test_positions_on_other_markets_ignored(self) -> None:
        positions = [
            Position(owner="bob", market_id=0, yes_shares=100),
            Position(owner="bob", market_id=1, yes_shares=999, no_shares=5),
        ]
        assert verify_market_invariants(_market(), positions) == []

    def test_outcome_without_resolution(self, caplog) -> None:
        m = _market()
        m.outcome = True
        positions = [Position(owner="bob", market_id=0, yes_shares=100)]
        with caplog.at_level(logging.ERROR):
            violations = verify_market_invariants(m, positions)
        assert len(violations) == 1
        assert violations[0].startswith("INV-1")
        assert "INV-1" in caplog.text

    def test_negative_pool(self) -> None:
        m = _market()
        m.no_pool = -1
        positions = [Position(owner="bob", market_id=0, yes_shares=100)]
        violations = verify_market_invariants(m, positions)
        assert [v[:5] for v in violations] == ["INV-2"]

    def test_share_totals_mismatch(self) -> None:
        violations = verify_market_invariants(_market(), [])
        assert len(violations) == 1
        assert "total_yes_shares=600" in violations[0]
