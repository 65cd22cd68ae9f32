"""StateStore Protocol — the host storage contract the engine runs against.

Keyed collections plus per-entity counters. Reads hand back detached
objects: mutating a returned entity changes nothing until it is put back.
Everything written inside one transaction() commits together or not at all.
"""

from contextlib import AbstractAsyncContextManager
from typing import Protocol

from src.pm_agent.domain.models import AgentFollower, TradingAgent
from src.pm_combo.domain.models import Combo
from src.pm_common.enums import Counter, FeedItemType
from src.pm_market.domain.models import Market
from src.pm_order.domain.models import LimitOrder
from src.pm_position.domain.models import Position
from src.pm_social.domain.models import FeedItem


class StateStore(Protocol):
    def transaction(self) -> AbstractAsyncContextManager[None]: ...

    async def next_id(self, counter: Counter) -> int:
        """Return the counter's current value and advance it by one."""
        ...

    async def peek_counter(self, counter: Counter) -> int: ...

    # --- markets ---

    async def get_market(self, market_id: int) -> Market | None: ...

    async def put_market(self, market: Market) -> None: ...

    async def list_markets(
        self, resolved: bool | None = None, category: str | None = None
    ) -> list[Market]: ...

    async def get_total_volume(self) -> int: ...

    async def set_total_volume(self, value: int) -> None: ...

    # --- positions ---

    async def get_position(self, owner: str, market_id: int) -> Position | None: ...

    async def put_position(self, position: Position) -> None: ...

    async def list_positions(
        self, owner: str | None = None, market_id: int | None = None
    ) -> list[Position]: ...

    # --- combos ---

    async def get_combo(self, combo_id: int) -> Combo | None: ...

    async def put_combo(self, combo: Combo) -> None: ...

    async def list_combos(
        self, owner: str | None = None, open_only: bool = False
    ) -> list[Combo]: ...

    async def list_open_combo_ids_for_market(self, market_id: int) -> list[int]: ...

    # --- limit orders ---

    async def get_limit_order(self, order_id: int) -> LimitOrder | None: ...

    async def put_limit_order(self, order: LimitOrder) -> None: ...

    async def list_limit_orders(
        self, market_id: int | None = None, open_only: bool = False
    ) -> list[LimitOrder]: ...

    # --- agents ---

    async def get_agent(self, agent_id: int) -> TradingAgent | None: ...

    async def put_agent(self, agent: TradingAgent) -> None: ...

    async def list_agents(self, active_only: bool = False) -> list[TradingAgent]: ...

    async def get_agent_follower(self, agent_id: int, follower: str) -> AgentFollower | None: ...

    async def put_agent_follower(self, record: AgentFollower) -> None: ...

    async def delete_agent_follower(self, agent_id: int, follower: str) -> None: ...

    async def list_agent_followers(self, agent_id: int) -> list[AgentFollower]: ...

    # --- social ---

    async def get_feed_item(self, item_id: int) -> FeedItem | None: ...

    async def put_feed_item(self, item: FeedItem) -> None: ...

    async def list_feed_items(
        self,
        market_id: int | None = None,
        item_type: FeedItemType | None = None,
        limit: int | None = None,
    ) -> list[FeedItem]:
        """Newest first."""
        ...

    async def has_liked(self, item_id: int, user: str) -> bool: ...

    async def add_like(self, item_id: int, user: str) -> None: ...

    async def add_user_follow(self, follower: str, followee: str) -> None:
        """Idempotent."""
        ...

    async def remove_user_follow(self, follower: str, followee: str) -> None: ...

    async def list_following(self, user: str) -> list[str]: ...

    async def list_followers(self, user: str) -> list[str]: ...
