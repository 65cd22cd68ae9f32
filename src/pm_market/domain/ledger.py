"""Market lifecycle: Open --resolve(outcome)--> Resolved (terminal).

Guards raise before anything is written; apply_* helpers only ever receive
values that already passed every check.
"""

from datetime import datetime

from src.pm_common.datetime_utils import ensure_utc
from src.pm_common.errors import (
    AlreadyResolvedError,
    InvalidAmountError,
    MarketEndedError,
    MarketResolvedError,
    NotAuthorizedError,
)
from src.pm_common.fixed_point import checked_add, validate_amount
from src.pm_market.domain.models import Market
from src.pm_market.domain.pricing import PoolUpdate


def check_initial_liquidity(initial_liquidity: int) -> None:
    """Both pools must start strictly positive."""
    validate_amount(initial_liquidity)
    if initial_liquidity < 2:
        raise InvalidAmountError(
            f"initial_liquidity must be at least 2 attos, got {initial_liquidity}"
        )


def open_market(
    market_id: int,
    creator: str,
    question: str,
    categories: list[str],
    end_time: datetime,
    initial_liquidity: int,
    now: datetime,
) -> Market:
    """Build a new market with both pools seeded at half the liquidity."""
    half = initial_liquidity // 2
    return Market(
        id=market_id,
        creator=creator,
        question=question,
        categories=list(categories),
        end_time=ensure_utc(end_time),
        created_at=now,
        initial_liquidity=initial_liquidity,
        yes_pool=half,
        no_pool=half,
        total_yes_shares=half,
        total_no_shares=half,
    )


def check_trade_amount(shares: int) -> None:
    validate_amount(shares)
    if shares == 0:
        raise InvalidAmountError("shares must be greater than zero")


def check_can_buy(market: Market, now: datetime) -> None:
    if market.resolved:
        raise MarketResolvedError(market.id)
    if ensure_utc(now) > market.end_time:
        raise MarketEndedError(market.id)


def check_can_sell(market: Market) -> None:
    # No end_time check: holders may exit after expiry until resolution.
    if market.resolved:
        raise MarketResolvedError(market.id)


def next_volume(market: Market, update: PoolUpdate) -> int:
    return checked_add(market.volume, update.amount)


def apply_pool_update(market: Market, update: PoolUpdate, volume: int) -> None:
    market.yes_pool = update.yes_pool
    market.no_pool = update.no_pool
    market.total_yes_shares = update.total_yes_shares
    market.total_no_shares = update.total_no_shares
    market.volume = volume


def resolve(market: Market, caller: str, outcome: bool) -> None:
    if market.resolved:
        raise AlreadyResolvedError(market.id)
    if market.creator != caller:
        raise NotAuthorizedError(f"Only the creator can resolve market {market.id}")
    market.resolved = True
    market.outcome = outcome
