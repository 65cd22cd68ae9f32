"""MarketContract — executes one Operation against a StateStore.

Every handler validates and prices first, then allocates ids and writes.
Nothing is put back into the store until all checks for the call passed,
so a raised AppError leaves state untouched even without a transaction.
"""

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from src.pm_agent.domain import roster
from src.pm_agent.domain.models import TradingAgent
from src.pm_clearing.domain.invariants import verify_market_invariants
from src.pm_clearing.domain.settlement import compute_payout
from src.pm_combo.domain.cascade import apply_market_outcome, cancel
from src.pm_combo.domain.models import Combo, ComboLeg
from src.pm_combo.domain.odds import combine_odds, leg_odds, potential_payout
from src.pm_common.enums import Counter, OrderStatus
from src.pm_common.errors import (
    AgentNotFoundError,
    AlreadyFollowingAgentError,
    ComboNotFoundError,
    CostExceedsLimitError,
    FeedItemNotFoundError,
    InvalidAmountError,
    InvalidLegCountError,
    MarketNotFoundError,
    MarketNotResolvedError,
    MarketResolvedError,
    NotAuthorizedError,
    NotFollowingAgentError,
    OrderNotCancellableError,
    OrderNotFoundError,
    PositionNotFoundError,
    ProceedsBelowMinimumError,
    UnauthenticatedError,
)
from src.pm_common.fixed_point import SCALE, checked_add, validate_amount
from src.pm_engine.domain.context import OperationContext
from src.pm_engine.domain.operations import (
    AgentConfigUpdated,
    AgentCreated,
    AgentFollowed,
    AgentToggled,
    AgentUnfollowed,
    BuyShares,
    CancelCombo,
    CancelLimitOrder,
    ClaimWinnings,
    ComboCancelled,
    ComboCreated,
    CommentPosted,
    CreateAgent,
    CreateCombo,
    CreateMarket,
    FeedItemLiked,
    FollowAgent,
    FollowUser,
    LimitOrderCancelled,
    LimitOrderPlaced,
    LikeFeedItem,
    MarketCreated,
    MarketResolved,
    Operation,
    OperationResponse,
    PlaceLimitOrder,
    PostComment,
    ResolveMarket,
    SellShares,
    SharesPurchased,
    SharesSold,
    ToggleAgent,
    UnfollowAgent,
    UnfollowUser,
    UpdateAgentConfig,
    UserFollowed,
    UserUnfollowed,
    WinningsClaimed,
)
from src.pm_engine.domain.store import StateStore
from src.pm_market.domain import ledger as market_ledger
from src.pm_market.domain.models import Market
from src.pm_market.domain.pricing import quote_buy, quote_sell
from src.pm_order.domain.models import LimitOrder
from src.pm_position.domain import ledger as position_ledger
from src.pm_social.domain import feed
from src.pm_social.domain.models import FeedItem

logger = logging.getLogger(__name__)

DEFAULT_MIN_LEGS = 2
DEFAULT_MAX_LEGS = 10

Handler = Callable[[Any, str, OperationContext], Awaitable[OperationResponse]]


class MarketContract:
    def __init__(
        self,
        store: StateStore,
        min_legs: int = DEFAULT_MIN_LEGS,
        max_legs: int = DEFAULT_MAX_LEGS,
        verify_invariants: bool = False,
    ) -> None:
        self._store = store
        self._min_legs = min_legs
        self._max_legs = max_legs
        self._verify = verify_invariants
        self._handlers: dict[type, Handler] = {
            CreateMarket: self._create_market,
            BuyShares: self._buy_shares,
            SellShares: self._sell_shares,
            ResolveMarket: self._resolve_market,
            ClaimWinnings: self._claim_winnings,
            PlaceLimitOrder: self._place_limit_order,
            CancelLimitOrder: self._cancel_limit_order,
            CreateCombo: self._create_combo,
            CancelCombo: self._cancel_combo,
            CreateAgent: self._create_agent,
            UpdateAgentConfig: self._update_agent_config,
            ToggleAgent: self._toggle_agent,
            FollowAgent: self._follow_agent,
            UnfollowAgent: self._unfollow_agent,
            PostComment: self._post_comment,
            FollowUser: self._follow_user,
            UnfollowUser: self._unfollow_user,
            LikeFeedItem: self._like_feed_item,
        }

    async def execute(self, operation: Operation, ctx: OperationContext) -> OperationResponse:
        if ctx.caller is None:
            raise UnauthenticatedError()
        handler = self._handlers[type(operation)]
        return await handler(operation, ctx.caller, ctx)

    async def _load_market(self, market_id: int) -> Market:
        market = await self._store.get_market(market_id)
        if market is None:
            raise MarketNotFoundError(market_id)
        return market

    async def _load_agent(self, agent_id: int) -> TradingAgent:
        agent = await self._store.get_agent(agent_id)
        if agent is None:
            raise AgentNotFoundError(agent_id)
        return agent

    async def _post_feed_item(self, item: FeedItem) -> None:
        await self._store.put_feed_item(item)
        logger.debug("Feed item %d: %s by %s", item.id, item.item_type.value, item.author)

    async def _verify_invariants(self, market: Market) -> None:
        # Violations are logged at ERROR; the trade itself already passed every check
        if not self._verify:
            return
        positions = await self._store.list_positions(market_id=market.id)
        verify_market_invariants(market, positions)

    # --- markets & trading ---

    async def _create_market(
        self, op: CreateMarket, caller: str, ctx: OperationContext
    ) -> MarketCreated:
        market_ledger.check_initial_liquidity(op.initial_liquidity)
        market_id = await self._store.next_id(Counter.MARKET)
        market = market_ledger.open_market(
            market_id=market_id,
            creator=caller,
            question=op.question,
            categories=op.categories,
            end_time=op.end_time,
            initial_liquidity=op.initial_liquidity,
            now=ctx.timestamp,
        )
        await self._store.put_market(market)
        await self._post_feed_item(
            feed.market_created(
                await self._store.next_id(Counter.FEED), caller, market_id,
                op.question, op.initial_liquidity, ctx.timestamp,
            )
        )
        logger.info(
            "Market %d created by %s: liquidity=%d", market_id, caller, op.initial_liquidity
        )
        return MarketCreated(market_id=market_id)

    async def _buy_shares(
        self, op: BuyShares, caller: str, ctx: OperationContext
    ) -> SharesPurchased:
        market_ledger.check_trade_amount(op.shares)
        market = await self._load_market(op.market_id)
        market_ledger.check_can_buy(market, ctx.timestamp)

        update = quote_buy(market, op.is_yes, op.shares)
        if update.amount > op.max_cost:
            raise CostExceedsLimitError(update.amount, op.max_cost)
        volume = market_ledger.next_volume(market, update)
        total_volume = checked_add(await self._store.get_total_volume(), update.amount)
        position = await self._store.get_position(caller, market.id)
        if position is None:
            position = position_ledger.empty_position(caller, market.id)
        position = position_ledger.credit_shares(position, op.is_yes, op.shares)

        market_ledger.apply_pool_update(market, update, volume)
        await self._store.put_market(market)
        await self._store.put_position(position)
        await self._store.set_total_volume(total_volume)
        await self._verify_invariants(market)
        await self._post_feed_item(
            feed.trade(
                await self._store.next_id(Counter.FEED), caller, market.id,
                op.is_yes, op.shares, update.amount, ctx.timestamp,
            )
        )
        logger.info(
            "Buy market=%d caller=%s side=%s shares=%d cost=%d",
            market.id, caller, "YES" if op.is_yes else "NO", op.shares, update.amount,
        )
        return SharesPurchased(cost=update.amount)

    async def _sell_shares(
        self, op: SellShares, caller: str, ctx: OperationContext
    ) -> SharesSold:
        market_ledger.check_trade_amount(op.shares)
        market = await self._load_market(op.market_id)
        market_ledger.check_can_sell(market)

        position = await self._store.get_position(caller, market.id)
        if position is None:
            position = position_ledger.empty_position(caller, market.id)
        position = position_ledger.debit_shares(position, op.is_yes, op.shares)

        update = quote_sell(market, op.is_yes, op.shares)
        if update.amount < op.min_proceeds:
            raise ProceedsBelowMinimumError(update.amount, op.min_proceeds)
        volume = market_ledger.next_volume(market, update)
        total_volume = checked_add(await self._store.get_total_volume(), update.amount)

        market_ledger.apply_pool_update(market, update, volume)
        await self._store.put_market(market)
        await self._store.put_position(position)
        await self._store.set_total_volume(total_volume)
        await self._verify_invariants(market)
        logger.info(
            "Sell market=%d caller=%s side=%s shares=%d proceeds=%d",
            market.id, caller, "YES" if op.is_yes else "NO", op.shares, update.amount,
        )
        return SharesSold(proceeds=update.amount)

    async def _resolve_market(
        self, op: ResolveMarket, caller: str, ctx: OperationContext
    ) -> MarketResolved:
        market = await self._load_market(op.market_id)
        market_ledger.resolve(market, caller, op.outcome)
        await self._store.put_market(market)

        combos_updated = 0
        for combo_id in await self._store.list_open_combo_ids_for_market(market.id):
            combo = await self._store.get_combo(combo_id)
            if combo is None:
                continue
            if apply_market_outcome(combo, market.id, op.outcome):
                await self._store.put_combo(combo)
                combos_updated += 1
        logger.info(
            "Market %d resolved %s, %d combos updated",
            market.id, "YES" if op.outcome else "NO", combos_updated,
        )
        return MarketResolved(combos_updated=combos_updated)

    async def _claim_winnings(
        self, op: ClaimWinnings, caller: str, ctx: OperationContext
    ) -> WinningsClaimed:
        market = await self._load_market(op.market_id)
        if not market.resolved:
            raise MarketNotResolvedError(market.id)
        position = await self._store.get_position(caller, market.id)
        if position is None:
            raise PositionNotFoundError(market.id)
        payout = compute_payout(market, position)
        position_ledger.mark_claimed(position)
        await self._store.put_position(position)
        logger.info("Claim market=%d caller=%s payout=%d", market.id, caller, payout)
        return WinningsClaimed(payout=payout)

    # --- limit orders (stored, never matched) ---

    async def _place_limit_order(
        self, op: PlaceLimitOrder, caller: str, ctx: OperationContext
    ) -> LimitOrderPlaced:
        market = await self._load_market(op.market_id)
        if market.resolved:
            raise MarketResolvedError(market.id)
        validate_amount(op.price)
        if op.price == 0 or op.price > SCALE:
            raise InvalidAmountError(f"price must be in (0, {SCALE}], got {op.price}")
        market_ledger.check_trade_amount(op.amount)

        order_id = await self._store.next_id(Counter.ORDER)
        order = LimitOrder(
            id=order_id,
            owner=caller,
            market_id=market.id,
            is_yes=op.is_yes,
            side=op.side,
            price=op.price,
            original_amount=op.amount,
            duration=op.duration,
            created_at=ctx.timestamp,
        )
        await self._store.put_limit_order(order)
        logger.info("Limit order %d placed on market %d by %s", order_id, market.id, caller)
        return LimitOrderPlaced(order_id=order_id)

    async def _cancel_limit_order(
        self, op: CancelLimitOrder, caller: str, ctx: OperationContext
    ) -> LimitOrderCancelled:
        order = await self._store.get_limit_order(op.order_id)
        if order is None:
            raise OrderNotFoundError(op.order_id)
        if order.owner != caller:
            raise NotAuthorizedError(f"Only the owner can cancel order {order.id}")
        if not order.is_cancellable:
            raise OrderNotCancellableError(order.id, order.status.value)
        order.status = OrderStatus.CANCELLED
        await self._store.put_limit_order(order)
        return LimitOrderCancelled()

    # --- combos ---

    async def _create_combo(
        self, op: CreateCombo, caller: str, ctx: OperationContext
    ) -> ComboCreated:
        if not self._min_legs <= len(op.legs) <= self._max_legs:
            raise InvalidLegCountError(len(op.legs), self._min_legs, self._max_legs)
        validate_amount(op.stake)
        if op.stake == 0:
            raise InvalidAmountError("stake must be greater than zero")

        legs: list[ComboLeg] = []
        for leg in op.legs:
            market = await self._load_market(leg.market_id)
            legs.append(
                ComboLeg(
                    market_id=market.id,
                    prediction=leg.prediction,
                    odds=leg_odds(market, leg.prediction),
                )
            )
        combined = combine_odds([leg.odds for leg in legs])
        payout = potential_payout(op.stake, combined)

        combo_id = await self._store.next_id(Counter.COMBO)
        combo = Combo(
            id=combo_id,
            owner=caller,
            name=op.name,
            stake=op.stake,
            potential_payout=payout,
            created_at=ctx.timestamp,
            legs=legs,
        )
        await self._store.put_combo(combo)
        logger.info(
            "Combo %d created by %s: legs=%d stake=%d payout=%d",
            combo_id, caller, len(legs), op.stake, payout,
        )
        return ComboCreated(combo_id=combo_id, potential_payout=payout)

    async def _cancel_combo(
        self, op: CancelCombo, caller: str, ctx: OperationContext
    ) -> ComboCancelled:
        combo = await self._store.get_combo(op.combo_id)
        if combo is None:
            raise ComboNotFoundError(op.combo_id)
        cancel(combo, caller)
        await self._store.put_combo(combo)
        logger.info("Combo %d cancelled by %s", combo.id, caller)
        return ComboCancelled()

    # --- agents ---

    async def _create_agent(
        self, op: CreateAgent, caller: str, ctx: OperationContext
    ) -> AgentCreated:
        agent_id = await self._store.next_id(Counter.AGENT)
        agent = roster.register(
            agent_id=agent_id,
            owner=caller,
            name=op.name,
            strategy=op.strategy,
            config=op.config,
            initial_capital=op.initial_capital,
            now=ctx.timestamp,
        )
        await self._store.put_agent(agent)
        logger.info("Agent %d (%s) created by %s", agent_id, op.strategy.value, caller)
        return AgentCreated(agent_id=agent_id)

    async def _update_agent_config(
        self, op: UpdateAgentConfig, caller: str, ctx: OperationContext
    ) -> AgentConfigUpdated:
        agent = await self._load_agent(op.agent_id)
        roster.check_owner(agent, caller)
        agent.config = dict(op.config)
        await self._store.put_agent(agent)
        return AgentConfigUpdated()

    async def _toggle_agent(
        self, op: ToggleAgent, caller: str, ctx: OperationContext
    ) -> AgentToggled:
        agent = await self._load_agent(op.agent_id)
        roster.check_owner(agent, caller)
        agent.is_active = op.active
        await self._store.put_agent(agent)
        logger.info("Agent %d %s", agent.id, "activated" if op.active else "paused")
        return AgentToggled(is_active=agent.is_active)

    async def _follow_agent(
        self, op: FollowAgent, caller: str, ctx: OperationContext
    ) -> AgentFollowed:
        agent = await self._load_agent(op.agent_id)
        if await self._store.get_agent_follower(agent.id, caller) is not None:
            raise AlreadyFollowingAgentError(agent.id)
        record = roster.start_following(agent, caller, op.allocation, ctx.timestamp)
        await self._store.put_agent_follower(record)
        await self._store.put_agent(agent)
        return AgentFollowed(followers_count=agent.followers_count)

    async def _unfollow_agent(
        self, op: UnfollowAgent, caller: str, ctx: OperationContext
    ) -> AgentUnfollowed:
        agent = await self._load_agent(op.agent_id)
        if await self._store.get_agent_follower(agent.id, caller) is None:
            raise NotFollowingAgentError(agent.id)
        roster.stop_following(agent)
        await self._store.delete_agent_follower(agent.id, caller)
        await self._store.put_agent(agent)
        return AgentUnfollowed(followers_count=agent.followers_count)

    # --- social ---

    async def _post_comment(
        self, op: PostComment, caller: str, ctx: OperationContext
    ) -> CommentPosted:
        market = await self._load_market(op.market_id)
        item_id = await self._store.next_id(Counter.FEED)
        await self._post_feed_item(
            feed.comment(item_id, caller, market.id, op.content, ctx.timestamp)
        )
        return CommentPosted(item_id=item_id)

    async def _follow_user(
        self, op: FollowUser, caller: str, ctx: OperationContext
    ) -> UserFollowed:
        feed.check_follow_target(caller, op.user)
        await self._store.add_user_follow(caller, op.user)
        return UserFollowed()

    async def _unfollow_user(
        self, op: UnfollowUser, caller: str, ctx: OperationContext
    ) -> UserUnfollowed:
        await self._store.remove_user_follow(caller, op.user)
        return UserUnfollowed()

    async def _like_feed_item(
        self, op: LikeFeedItem, caller: str, ctx: OperationContext
    ) -> FeedItemLiked:
        item = await self._store.get_feed_item(op.item_id)
        if item is None:
            raise FeedItemNotFoundError(op.item_id)
        # One like per user; repeats are accepted and change nothing
        if not await self._store.has_liked(item.id, caller):
            await self._store.add_like(item.id, caller)
            item.likes_count += 1
            await self._store.put_feed_item(item)
        return FeedItemLiked(likes_count=item.likes_count)
