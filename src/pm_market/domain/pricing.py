"""Constant-product AMM pricing for binary YES/NO pools.

Convention: buying a side draws its cost into the *opposing* pool and removes
the shares from the chosen pool, so the implied price of a side is
opposing_pool / (yes_pool + no_pool).

    buy:  pool_in * pool_out == (pool_in + cost) * (pool_out - shares)
    sell: proceeds = pool_out * shares / (pool_in + shares)

Rounding always favours the pool: buy costs round up, sell proceeds round
down. The pool product therefore never shrinks and a buy-then-sell round
trip can never pay out more than it cost.

Quotes are computed against a Market without touching it; the ledger applies
the resulting PoolUpdate only after every check has passed.
"""

from dataclasses import dataclass

from src.pm_common.errors import InsufficientLiquidityError, InvalidAmountError
from src.pm_common.fixed_point import checked_add, checked_sub, mul_div, mul_div_up
from src.pm_market.domain.models import Market


@dataclass(frozen=True)
class PoolUpdate:
    """Post-trade market balances plus the amount that changed hands."""

    amount: int  # cost for buys, proceeds for sells
    yes_pool: int
    no_pool: int
    total_yes_shares: int
    total_no_shares: int


def cost_to_buy(pool_in: int, pool_out: int, shares: int) -> int:
    """cost = pool_in * shares / (pool_out - shares), rounded up.

    A buy can never drain pool_out to zero, so shares must stay below it.
    """
    if shares >= pool_out:
        raise InsufficientLiquidityError(shares, pool_out)
    cost = mul_div_up(pool_in, shares, pool_out - shares)
    if cost == 0:
        raise InvalidAmountError(f"buying {shares} shares would cost nothing")
    return cost


def proceeds_from_sell(pool_in: int, pool_out: int, shares: int) -> int:
    """proceeds = pool_out * shares / (pool_in + shares), floored.

    pool_in is the side being sold into; pool_out pays the proceeds.
    """
    return mul_div(pool_out, shares, checked_add(pool_in, shares))


def quote_buy(market: Market, is_yes: bool, shares: int) -> PoolUpdate:
    if is_yes:
        cost = cost_to_buy(market.no_pool, market.yes_pool, shares)
        return PoolUpdate(
            amount=cost,
            yes_pool=market.yes_pool - shares,
            no_pool=checked_add(market.no_pool, cost),
            total_yes_shares=checked_add(market.total_yes_shares, shares),
            total_no_shares=market.total_no_shares,
        )
    cost = cost_to_buy(market.yes_pool, market.no_pool, shares)
    return PoolUpdate(
        amount=cost,
        yes_pool=checked_add(market.yes_pool, cost),
        no_pool=market.no_pool - shares,
        total_yes_shares=market.total_yes_shares,
        total_no_shares=checked_add(market.total_no_shares, shares),
    )


def quote_sell(market: Market, is_yes: bool, shares: int) -> PoolUpdate:
    if is_yes:
        proceeds = proceeds_from_sell(market.yes_pool, market.no_pool, shares)
        if proceeds > market.no_pool:
            raise InsufficientLiquidityError(proceeds, market.no_pool)
        return PoolUpdate(
            amount=proceeds,
            yes_pool=checked_add(market.yes_pool, shares),
            no_pool=market.no_pool - proceeds,
            total_yes_shares=checked_sub(market.total_yes_shares, shares),
            total_no_shares=market.total_no_shares,
        )
    proceeds = proceeds_from_sell(market.no_pool, market.yes_pool, shares)
    if proceeds > market.yes_pool:
        raise InsufficientLiquidityError(proceeds, market.yes_pool)
    return PoolUpdate(
        amount=proceeds,
        yes_pool=market.yes_pool - proceeds,
        no_pool=checked_add(market.no_pool, shares),
        total_yes_shares=market.total_yes_shares,
        total_no_shares=checked_sub(market.total_no_shares, shares),
    )
