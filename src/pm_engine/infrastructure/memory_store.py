"""InMemoryStateStore — dict-backed StateStore for single-process deployments and tests."""

import copy
import logging
from collections import defaultdict
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from src.pm_agent.domain.models import AgentFollower, TradingAgent
from src.pm_combo.domain.models import Combo
from src.pm_common.enums import Counter, FeedItemType
from src.pm_market.domain.models import Market
from src.pm_order.domain.models import LimitOrder
from src.pm_position.domain.models import Position
from src.pm_social.domain.models import FeedItem

logger = logging.getLogger(__name__)


class InMemoryStateStore:
    def __init__(self) -> None:
        self._counters: dict[str, int] = {c.value: 0 for c in Counter}
        self._total_volume = 0
        self._markets: dict[int, Market] = {}
        self._positions: dict[tuple[str, int], Position] = {}
        self._combos: dict[int, Combo] = {}
        self._combos_by_market: dict[int, set[int]] = defaultdict(set)
        self._orders: dict[int, LimitOrder] = {}
        self._agents: dict[int, TradingAgent] = {}
        self._agent_followers: dict[tuple[int, str], AgentFollower] = {}
        self._feed: dict[int, FeedItem] = {}
        self._likes: set[tuple[int, str]] = set()
        self._user_follows: set[tuple[str, str]] = set()  # (follower, followee)

    def _snapshot(self) -> dict:
        return copy.deepcopy(self.__dict__)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        snapshot = self._snapshot()
        try:
            yield
        except BaseException:
            self.__dict__.update(snapshot)
            logger.debug("In-memory transaction rolled back")
            raise

    async def next_id(self, counter: Counter) -> int:
        value = self._counters[counter.value]
        self._counters[counter.value] = value + 1
        return value

    async def peek_counter(self, counter: Counter) -> int:
        return self._counters[counter.value]

    # --- markets ---

    async def get_market(self, market_id: int) -> Market | None:
        market = self._markets.get(market_id)
        return copy.deepcopy(market) if market else None

    async def put_market(self, market: Market) -> None:
        self._markets[market.id] = copy.deepcopy(market)

    async def list_markets(
        self, resolved: bool | None = None, category: str | None = None
    ) -> list[Market]:
        return [
            copy.deepcopy(m)
            for _, m in sorted(self._markets.items())
            if (resolved is None or m.resolved == resolved)
            and (category is None or category in m.categories)
        ]

    async def get_total_volume(self) -> int:
        return self._total_volume

    async def set_total_volume(self, value: int) -> None:
        self._total_volume = value

    # --- positions ---

    async def get_position(self, owner: str, market_id: int) -> Position | None:
        position = self._positions.get((owner, market_id))
        return copy.deepcopy(position) if position else None

    async def put_position(self, position: Position) -> None:
        self._positions[(position.owner, position.market_id)] = copy.deepcopy(position)

    async def list_positions(
        self, owner: str | None = None, market_id: int | None = None
    ) -> list[Position]:
        return [
            copy.deepcopy(p)
            for key, p in sorted(self._positions.items())
            if (owner is None or key[0] == owner)
            and (market_id is None or key[1] == market_id)
        ]

    # --- combos ---

    async def get_combo(self, combo_id: int) -> Combo | None:
        combo = self._combos.get(combo_id)
        return copy.deepcopy(combo) if combo else None

    async def put_combo(self, combo: Combo) -> None:
        self._combos[combo.id] = copy.deepcopy(combo)
        for market_id in combo.market_ids:
            self._combos_by_market[market_id].add(combo.id)

    async def list_combos(
        self, owner: str | None = None, open_only: bool = False
    ) -> list[Combo]:
        return [
            copy.deepcopy(c)
            for _, c in sorted(self._combos.items())
            if (owner is None or c.owner == owner) and (not open_only or c.is_open)
        ]

    async def list_open_combo_ids_for_market(self, market_id: int) -> list[int]:
        return sorted(
            combo_id
            for combo_id in self._combos_by_market.get(market_id, ())
            if self._combos[combo_id].is_open
        )

    # --- limit orders ---

    async def get_limit_order(self, order_id: int) -> LimitOrder | None:
        order = self._orders.get(order_id)
        return copy.deepcopy(order) if order else None

    async def put_limit_order(self, order: LimitOrder) -> None:
        self._orders[order.id] = copy.deepcopy(order)

    async def list_limit_orders(
        self, market_id: int | None = None, open_only: bool = False
    ) -> list[LimitOrder]:
        return [
            copy.deepcopy(o)
            for _, o in sorted(self._orders.items())
            if (market_id is None or o.market_id == market_id)
            and (not open_only or o.is_cancellable)
        ]

    # --- agents ---

    async def get_agent(self, agent_id: int) -> TradingAgent | None:
        agent = self._agents.get(agent_id)
        return copy.deepcopy(agent) if agent else None

    async def put_agent(self, agent: TradingAgent) -> None:
        self._agents[agent.id] = copy.deepcopy(agent)

    async def list_agents(self, active_only: bool = False) -> list[TradingAgent]:
        return [
            copy.deepcopy(a)
            for _, a in sorted(self._agents.items())
            if not active_only or a.is_active
        ]

    async def get_agent_follower(self, agent_id: int, follower: str) -> AgentFollower | None:
        record = self._agent_followers.get((agent_id, follower))
        return copy.deepcopy(record) if record else None

    async def put_agent_follower(self, record: AgentFollower) -> None:
        self._agent_followers[(record.agent_id, record.follower)] = copy.deepcopy(record)

    async def delete_agent_follower(self, agent_id: int, follower: str) -> None:
        self._agent_followers.pop((agent_id, follower), None)

    async def list_agent_followers(self, agent_id: int) -> list[AgentFollower]:
        return [
            copy.deepcopy(r)
            for key, r in sorted(self._agent_followers.items())
            if key[0] == agent_id
        ]

    # --- social ---

    async def get_feed_item(self, item_id: int) -> FeedItem | None:
        item = self._feed.get(item_id)
        return copy.deepcopy(item) if item else None

    async def put_feed_item(self, item: FeedItem) -> None:
        self._feed[item.id] = copy.deepcopy(item)

    async def list_feed_items(
        self,
        market_id: int | None = None,
        item_type: FeedItemType | None = None,
        limit: int | None = None,
    ) -> list[FeedItem]:
        items = [
            copy.deepcopy(i)
            for _, i in sorted(self._feed.items(), reverse=True)
            if (market_id is None or i.market_id == market_id)
            and (item_type is None or i.item_type == item_type)
        ]
        return items if limit is None else items[:limit]

    async def has_liked(self, item_id: int, user: str) -> bool:
        return (item_id, user) in self._likes

    async def add_like(self, item_id: int, user: str) -> None:
        self._likes.add((item_id, user))

    async def add_user_follow(self, follower: str, followee: str) -> None:
        self._user_follows.add((follower, followee))

    async def remove_user_follow(self, follower: str, followee: str) -> None:
        self._user_follows.discard((follower, followee))

    async def list_following(self, user: str) -> list[str]:
        return sorted(followee for follower, followee in self._user_follows if follower == user)

    async def list_followers(self, user: str) -> list[str]:
        return sorted(follower for follower, followee in self._user_follows if followee == user)
