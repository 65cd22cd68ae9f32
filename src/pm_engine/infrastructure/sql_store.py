"""SqlStateStore — PostgreSQL implementation of StateStore.

All queries use raw text() SQL (no ORM). Amounts are NUMERIC(39,0) columns:
bound as Decimal, read back as int. Schema: alembic/versions/001-007.
JSONB columns are bound as json.dumps text and selected back as ::text.
"""

import json
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from decimal import Decimal

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_agent.domain.models import AgentFollower, TradingAgent
from src.pm_combo.domain.models import Combo, ComboLeg
from src.pm_common.enums import (
    AgentStrategy,
    ComboStatus,
    Counter,
    FeedItemType,
    OrderDuration,
    OrderSide,
    OrderStatus,
)
from src.pm_market.domain.models import Market
from src.pm_order.domain.models import LimitOrder
from src.pm_position.domain.models import Position
from src.pm_social.domain.models import FeedItem

logger = logging.getLogger(__name__)

TOTAL_VOLUME_KEY = "total_volume"

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_NEXT_ID_SQL = text("""
    INSERT INTO counters (name, value) VALUES (:name, 1)
    ON CONFLICT (name) DO UPDATE SET value = counters.value + 1
    RETURNING value - 1 AS id
""")

_GET_COUNTER_SQL = text("SELECT value FROM counters WHERE name = :name")

_SET_COUNTER_SQL = text("""
    INSERT INTO counters (name, value) VALUES (:name, :value)
    ON CONFLICT (name) DO UPDATE SET value = EXCLUDED.value
""")

_MARKET_COLUMNS = """
    id, creator, question, categories, end_time, created_at,
    initial_liquidity, yes_pool, no_pool,
    total_yes_shares, total_no_shares,
    resolved, outcome, volume
"""

_GET_MARKET_SQL = text(f"SELECT {_MARKET_COLUMNS} FROM markets WHERE id = :id")

_LIST_MARKETS_SQL = text(f"""
    SELECT {_MARKET_COLUMNS}
    FROM markets
    WHERE
        (CAST(:resolved AS BOOLEAN) IS NULL OR resolved = CAST(:resolved AS BOOLEAN))
        AND (CAST(:category AS TEXT) IS NULL OR CAST(:category AS TEXT) = ANY(categories))
    ORDER BY id
""")

_UPSERT_MARKET_SQL = text("""
    INSERT INTO markets (
        id, creator, question, categories, end_time, created_at,
        initial_liquidity, yes_pool, no_pool,
        total_yes_shares, total_no_shares,
        resolved, outcome, volume
    ) VALUES (
        :id, :creator, :question, :categories, :end_time, :created_at,
        :initial_liquidity, :yes_pool, :no_pool,
        :total_yes_shares, :total_no_shares,
        :resolved, :outcome, :volume
    )
    ON CONFLICT (id) DO UPDATE SET
        yes_pool = EXCLUDED.yes_pool,
        no_pool = EXCLUDED.no_pool,
        total_yes_shares = EXCLUDED.total_yes_shares,
        total_no_shares = EXCLUDED.total_no_shares,
        resolved = EXCLUDED.resolved,
        outcome = EXCLUDED.outcome,
        volume = EXCLUDED.volume,
        updated_at = NOW()
""")

_GET_POSITION_SQL = text("""
    SELECT owner, market_id, yes_shares, no_shares, claimed
    FROM positions
    WHERE owner = :owner AND market_id = :market_id
""")

_LIST_POSITIONS_SQL = text("""
    SELECT owner, market_id, yes_shares, no_shares, claimed
    FROM positions
    WHERE
        (CAST(:owner AS TEXT) IS NULL OR owner = CAST(:owner AS TEXT))
        AND (CAST(:market_id AS BIGINT) IS NULL OR market_id = CAST(:market_id AS BIGINT))
    ORDER BY owner, market_id
""")

_UPSERT_POSITION_SQL = text("""
    INSERT INTO positions (owner, market_id, yes_shares, no_shares, claimed)
    VALUES (:owner, :market_id, :yes_shares, :no_shares, :claimed)
    ON CONFLICT (owner, market_id) DO UPDATE SET
        yes_shares = EXCLUDED.yes_shares,
        no_shares = EXCLUDED.no_shares,
        claimed = EXCLUDED.claimed,
        updated_at = NOW()
""")

_COMBO_COLUMNS = "id, owner, name, stake, potential_payout, status, created_at"

_GET_COMBO_SQL = text(f"SELECT {_COMBO_COLUMNS} FROM combos WHERE id = :id")

_LIST_COMBOS_SQL = text(f"""
    SELECT {_COMBO_COLUMNS}
    FROM combos
    WHERE
        (CAST(:owner AS TEXT) IS NULL OR owner = CAST(:owner AS TEXT))
        AND (NOT :open_only OR status IN ('ACTIVE', 'PARTIALLY_RESOLVED'))
    ORDER BY id
""")

_GET_LEGS_SQL = text("""
    SELECT combo_id, market_id, prediction, odds, resolved, won
    FROM combo_legs
    WHERE combo_id = ANY(:combo_ids)
    ORDER BY combo_id, leg_index
""")

_UPSERT_COMBO_SQL = text("""
    INSERT INTO combos (id, owner, name, stake, potential_payout, status, created_at)
    VALUES (:id, :owner, :name, :stake, :potential_payout, :status, :created_at)
    ON CONFLICT (id) DO UPDATE SET
        status = EXCLUDED.status,
        updated_at = NOW()
""")

_UPSERT_LEG_SQL = text("""
    INSERT INTO combo_legs (combo_id, leg_index, market_id, prediction, odds, resolved, won)
    VALUES (:combo_id, :leg_index, :market_id, :prediction, :odds, :resolved, :won)
    ON CONFLICT (combo_id, leg_index) DO UPDATE SET
        resolved = EXCLUDED.resolved,
        won = EXCLUDED.won
""")

_OPEN_COMBOS_FOR_MARKET_SQL = text("""
    SELECT DISTINCT c.id
    FROM combos c
    JOIN combo_legs l ON l.combo_id = c.id
    WHERE l.market_id = :market_id
      AND c.status IN ('ACTIVE', 'PARTIALLY_RESOLVED')
    ORDER BY c.id
""")

_ORDER_COLUMNS = """
    id, owner, market_id, is_yes, side, price,
    original_amount, filled_amount, duration, status, created_at
"""

_GET_ORDER_SQL = text(f"SELECT {_ORDER_COLUMNS} FROM limit_orders WHERE id = :id")

_LIST_ORDERS_SQL = text(f"""
    SELECT {_ORDER_COLUMNS}
    FROM limit_orders
    WHERE
        (CAST(:market_id AS BIGINT) IS NULL OR market_id = CAST(:market_id AS BIGINT))
        AND (NOT :open_only OR status IN ('OPEN', 'PARTIALLY_FILLED'))
    ORDER BY id
""")

_UPSERT_ORDER_SQL = text("""
    INSERT INTO limit_orders (
        id, owner, market_id, is_yes, side, price,
        original_amount, filled_amount, duration, status, created_at
    ) VALUES (
        :id, :owner, :market_id, :is_yes, :side, :price,
        :original_amount, :filled_amount, :duration, :status, :created_at
    )
    ON CONFLICT (id) DO UPDATE SET
        filled_amount = EXCLUDED.filled_amount,
        status = EXCLUDED.status,
        updated_at = NOW()
""")

_AGENT_COLUMNS = """
    id, owner, name, strategy, config::text AS config, capital, is_active,
    followers_count, total_trades, total_volume, profit_loss, created_at
"""

_GET_AGENT_SQL = text(f"SELECT {_AGENT_COLUMNS} FROM agents WHERE id = :id")

_LIST_AGENTS_SQL = text(f"""
    SELECT {_AGENT_COLUMNS}
    FROM agents
    WHERE NOT :active_only OR is_active
    ORDER BY id
""")

_UPSERT_AGENT_SQL = text("""
    INSERT INTO agents (
        id, owner, name, strategy, config, capital, is_active,
        followers_count, total_trades, total_volume, profit_loss, created_at
    ) VALUES (
        :id, :owner, :name, :strategy, CAST(:config AS JSONB), :capital, :is_active,
        :followers_count, :total_trades, :total_volume, :profit_loss, :created_at
    )
    ON CONFLICT (id) DO UPDATE SET
        config = EXCLUDED.config,
        is_active = EXCLUDED.is_active,
        followers_count = EXCLUDED.followers_count,
        total_trades = EXCLUDED.total_trades,
        total_volume = EXCLUDED.total_volume,
        profit_loss = EXCLUDED.profit_loss,
        updated_at = NOW()
""")

_FOLLOWER_COLUMNS = "agent_id, follower, allocation, started_at"

_GET_FOLLOWER_SQL = text(f"""
    SELECT {_FOLLOWER_COLUMNS}
    FROM agent_followers
    WHERE agent_id = :agent_id AND follower = :follower
""")

_LIST_FOLLOWERS_SQL = text(f"""
    SELECT {_FOLLOWER_COLUMNS}
    FROM agent_followers
    WHERE agent_id = :agent_id
    ORDER BY follower
""")

_UPSERT_FOLLOWER_SQL = text("""
    INSERT INTO agent_followers (agent_id, follower, allocation, started_at)
    VALUES (:agent_id, :follower, :allocation, :started_at)
    ON CONFLICT (agent_id, follower) DO UPDATE SET
        allocation = EXCLUDED.allocation
""")

_DELETE_FOLLOWER_SQL = text(
    "DELETE FROM agent_followers WHERE agent_id = :agent_id AND follower = :follower"
)

_FEED_COLUMNS = """
    id, author, item_type, content, market_id, data::text AS data, likes_count, created_at
"""

_GET_FEED_ITEM_SQL = text(f"SELECT {_FEED_COLUMNS} FROM feed_items WHERE id = :id")

_LIST_FEED_SQL = text(f"""
    SELECT {_FEED_COLUMNS}
    FROM feed_items
    WHERE
        (CAST(:market_id AS BIGINT) IS NULL OR market_id = CAST(:market_id AS BIGINT))
        AND (CAST(:item_type AS TEXT) IS NULL OR item_type = CAST(:item_type AS TEXT))
    ORDER BY id DESC
    LIMIT CAST(:limit AS BIGINT)
""")

_UPSERT_FEED_ITEM_SQL = text("""
    INSERT INTO feed_items (
        id, author, item_type, content, market_id, data, likes_count, created_at
    ) VALUES (
        :id, :author, :item_type, :content, :market_id, CAST(:data AS JSONB),
        :likes_count, :created_at
    )
    ON CONFLICT (id) DO UPDATE SET
        likes_count = EXCLUDED.likes_count
""")

_HAS_LIKE_SQL = text(
    "SELECT 1 FROM feed_likes WHERE item_id = :item_id AND user_id = :user_id"
)

_ADD_LIKE_SQL = text("""
    INSERT INTO feed_likes (item_id, user_id) VALUES (:item_id, :user_id)
    ON CONFLICT (item_id, user_id) DO NOTHING
""")

_ADD_USER_FOLLOW_SQL = text("""
    INSERT INTO user_follows (follower, followee) VALUES (:follower, :followee)
    ON CONFLICT (follower, followee) DO NOTHING
""")

_REMOVE_USER_FOLLOW_SQL = text(
    "DELETE FROM user_follows WHERE follower = :follower AND followee = :followee"
)

_LIST_FOLLOWING_SQL = text(
    "SELECT followee FROM user_follows WHERE follower = :user_id ORDER BY followee"
)

_LIST_USER_FOLLOWERS_SQL = text(
    "SELECT follower FROM user_follows WHERE followee = :user_id ORDER BY follower"
)

# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------


def _num(value: int) -> Decimal:
    return Decimal(value)


def _row_to_market(row: object) -> Market:
    return Market(
        id=row.id,  # type: ignore[attr-defined]
        creator=row.creator,  # type: ignore[attr-defined]
        question=row.question,  # type: ignore[attr-defined]
        categories=list(row.categories or []),  # type: ignore[attr-defined]
        end_time=row.end_time,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        initial_liquidity=int(row.initial_liquidity),  # type: ignore[attr-defined]
        yes_pool=int(row.yes_pool),  # type: ignore[attr-defined]
        no_pool=int(row.no_pool),  # type: ignore[attr-defined]
        total_yes_shares=int(row.total_yes_shares),  # type: ignore[attr-defined]
        total_no_shares=int(row.total_no_shares),  # type: ignore[attr-defined]
        resolved=row.resolved,  # type: ignore[attr-defined]
        outcome=row.outcome,  # type: ignore[attr-defined]
        volume=int(row.volume),  # type: ignore[attr-defined]
    )


def _row_to_position(row: object) -> Position:
    return Position(
        owner=row.owner,  # type: ignore[attr-defined]
        market_id=row.market_id,  # type: ignore[attr-defined]
        yes_shares=int(row.yes_shares),  # type: ignore[attr-defined]
        no_shares=int(row.no_shares),  # type: ignore[attr-defined]
        claimed=row.claimed,  # type: ignore[attr-defined]
    )


def _row_to_leg(row: object) -> ComboLeg:
    return ComboLeg(
        market_id=row.market_id,  # type: ignore[attr-defined]
        prediction=row.prediction,  # type: ignore[attr-defined]
        odds=int(row.odds),  # type: ignore[attr-defined]
        resolved=row.resolved,  # type: ignore[attr-defined]
        won=row.won,  # type: ignore[attr-defined]
    )


def _row_to_combo(row: object, legs: list[ComboLeg]) -> Combo:
    return Combo(
        id=row.id,  # type: ignore[attr-defined]
        owner=row.owner,  # type: ignore[attr-defined]
        name=row.name,  # type: ignore[attr-defined]
        stake=int(row.stake),  # type: ignore[attr-defined]
        potential_payout=int(row.potential_payout),  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        legs=legs,
        status=ComboStatus(row.status),  # type: ignore[attr-defined]
    )


def _row_to_order(row: object) -> LimitOrder:
    return LimitOrder(
        id=row.id,  # type: ignore[attr-defined]
        owner=row.owner,  # type: ignore[attr-defined]
        market_id=row.market_id,  # type: ignore[attr-defined]
        is_yes=row.is_yes,  # type: ignore[attr-defined]
        side=OrderSide(row.side),  # type: ignore[attr-defined]
        price=int(row.price),  # type: ignore[attr-defined]
        original_amount=int(row.original_amount),  # type: ignore[attr-defined]
        filled_amount=int(row.filled_amount),  # type: ignore[attr-defined]
        duration=OrderDuration(row.duration),  # type: ignore[attr-defined]
        status=OrderStatus(row.status),  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
    )



def _row_to_agent(row: object) -> TradingAgent:
    return TradingAgent(
        id=row.id,  # type: ignore[attr-defined]
        owner=row.owner,  # type: ignore[attr-defined]
        name=row.name,  # type: ignore[attr-defined]
        strategy=AgentStrategy(row.strategy),  # type: ignore[attr-defined]
        capital=int(row.capital),  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        config=json.loads(row.config),  # type: ignore[attr-defined]
        is_active=row.is_active,  # type: ignore[attr-defined]
        followers_count=row.followers_count,  # type: ignore[attr-defined]
        total_trades=row.total_trades,  # type: ignore[attr-defined]
        total_volume=int(row.total_volume),  # type: ignore[attr-defined]
        profit_loss=int(row.profit_loss),  # type: ignore[attr-defined]
    )


def _row_to_follower(row: object) -> AgentFollower:
    return AgentFollower(
        agent_id=row.agent_id,  # type: ignore[attr-defined]
        follower=row.follower,  # type: ignore[attr-defined]
        allocation=int(row.allocation),  # type: ignore[attr-defined]
        started_at=row.started_at,  # type: ignore[attr-defined]
    )


def _row_to_feed_item(row: object) -> FeedItem:
    return FeedItem(
        id=row.id,  # type: ignore[attr-defined]
        author=row.author,  # type: ignore[attr-defined]
        item_type=FeedItemType(row.item_type),  # type: ignore[attr-defined]
        content=row.content,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        market_id=row.market_id,  # type: ignore[attr-defined]
        data=json.loads(row.data),  # type: ignore[attr-defined]
        likes_count=row.likes_count,  # type: ignore[attr-defined]
    )


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------


class SqlStateStore:
    """Bound to one AsyncSession for the lifetime of a request."""

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        if self._db.in_transaction():
            async with self._db.begin_nested():
                yield
        else:
            async with self._db.begin():
                yield

    async def next_id(self, counter: Counter) -> int:
        result = await self._db.execute(_NEXT_ID_SQL, {"name": counter.value})
        return int(result.scalar_one())

    async def peek_counter(self, counter: Counter) -> int:
        result = await self._db.execute(_GET_COUNTER_SQL, {"name": counter.value})
        value = result.scalar_one_or_none()
        return int(value) if value is not None else 0

    # --- markets ---

    async def get_market(self, market_id: int) -> Market | None:
        result = await self._db.execute(_GET_MARKET_SQL, {"id": market_id})
        row = result.fetchone()
        return _row_to_market(row) if row else None

    async def put_market(self, market: Market) -> None:
        await self._db.execute(
            _UPSERT_MARKET_SQL,
            {
                "id": market.id,
                "creator": market.creator,
                "question": market.question,
                "categories": list(market.categories),
                "end_time": market.end_time,
                "created_at": market.created_at,
                "initial_liquidity": _num(market.initial_liquidity),
                "yes_pool": _num(market.yes_pool),
                "no_pool": _num(market.no_pool),
                "total_yes_shares": _num(market.total_yes_shares),
                "total_no_shares": _num(market.total_no_shares),
                "resolved": market.resolved,
                "outcome": market.outcome,
                "volume": _num(market.volume),
            },
        )

    async def list_markets(
        self, resolved: bool | None = None, category: str | None = None
    ) -> list[Market]:
        result = await self._db.execute(
            _LIST_MARKETS_SQL, {"resolved": resolved, "category": category}
        )
        return [_row_to_market(row) for row in result.fetchall()]

    async def get_total_volume(self) -> int:
        result = await self._db.execute(_GET_COUNTER_SQL, {"name": TOTAL_VOLUME_KEY})
        value = result.scalar_one_or_none()
        return int(value) if value is not None else 0

    async def set_total_volume(self, value: int) -> None:
        await self._db.execute(
            _SET_COUNTER_SQL, {"name": TOTAL_VOLUME_KEY, "value": _num(value)}
        )

    # --- positions ---

    async def get_position(self, owner: str, market_id: int) -> Position | None:
        result = await self._db.execute(
            _GET_POSITION_SQL, {"owner": owner, "market_id": market_id}
        )
        row = result.fetchone()
        return _row_to_position(row) if row else None

    async def put_position(self, position: Position) -> None:
        await self._db.execute(
            _UPSERT_POSITION_SQL,
            {
                "owner": position.owner,
                "market_id": position.market_id,
                "yes_shares": _num(position.yes_shares),
                "no_shares": _num(position.no_shares),
                "claimed": position.claimed,
            },
        )

    async def list_positions(
        self, owner: str | None = None, market_id: int | None = None
    ) -> list[Position]:
        result = await self._db.execute(
            _LIST_POSITIONS_SQL, {"owner": owner, "market_id": market_id}
        )
        return [_row_to_position(row) for row in result.fetchall()]

    # --- combos ---

    async def _load_legs(self, combo_ids: list[int]) -> dict[int, list[ComboLeg]]:
        legs: dict[int, list[ComboLeg]] = {cid: [] for cid in combo_ids}
        if not combo_ids:
            return legs
        result = await self._db.execute(_GET_LEGS_SQL, {"combo_ids": combo_ids})
        for row in result.fetchall():
            legs[row.combo_id].append(_row_to_leg(row))
        return legs

    async def get_combo(self, combo_id: int) -> Combo | None:
        result = await self._db.execute(_GET_COMBO_SQL, {"id": combo_id})
        row = result.fetchone()
        if row is None:
            return None
        legs = await self._load_legs([combo_id])
        return _row_to_combo(row, legs[combo_id])

    async def put_combo(self, combo: Combo) -> None:
        await self._db.execute(
            _UPSERT_COMBO_SQL,
            {
                "id": combo.id,
                "owner": combo.owner,
                "name": combo.name,
                "stake": _num(combo.stake),
                "potential_payout": _num(combo.potential_payout),
                "status": combo.status.value,
                "created_at": combo.created_at,
            },
        )
        for index, leg in enumerate(combo.legs):
            await self._db.execute(
                _UPSERT_LEG_SQL,
                {
                    "combo_id": combo.id,
                    "leg_index": index,
                    "market_id": leg.market_id,
                    "prediction": leg.prediction,
                    "odds": _num(leg.odds),
                    "resolved": leg.resolved,
                    "won": leg.won,
                },
            )

    async def list_combos(
        self, owner: str | None = None, open_only: bool = False
    ) -> list[Combo]:
        result = await self._db.execute(
            _LIST_COMBOS_SQL, {"owner": owner, "open_only": open_only}
        )
        rows = result.fetchall()
        legs = await self._load_legs([row.id for row in rows])
        return [_row_to_combo(row, legs[row.id]) for row in rows]

    async def list_open_combo_ids_for_market(self, market_id: int) -> list[int]:
        result = await self._db.execute(
            _OPEN_COMBOS_FOR_MARKET_SQL, {"market_id": market_id}
        )
        return [row.id for row in result.fetchall()]

    # --- limit orders ---

    async def get_limit_order(self, order_id: int) -> LimitOrder | None:
        result = await self._db.execute(_GET_ORDER_SQL, {"id": order_id})
        row = result.fetchone()
        return _row_to_order(row) if row else None

    async def put_limit_order(self, order: LimitOrder) -> None:
        await self._db.execute(
            _UPSERT_ORDER_SQL,
            {
                "id": order.id,
                "owner": order.owner,
                "market_id": order.market_id,
                "is_yes": order.is_yes,
                "side": order.side.value,
                "price": _num(order.price),
                "original_amount": _num(order.original_amount),
                "filled_amount": _num(order.filled_amount),
                "duration": order.duration.value,
                "status": order.status.value,
                "created_at": order.created_at,
            },
        )

    async def list_limit_orders(
        self, market_id: int | None = None, open_only: bool = False
    ) -> list[LimitOrder]:
        result = await self._db.execute(
            _LIST_ORDERS_SQL, {"market_id": market_id, "open_only": open_only}
        )
        return [_row_to_order(row) for row in result.fetchall()]

    # --- agents ---

    async def get_agent(self, agent_id: int) -> TradingAgent | None:
        result = await self._db.execute(_GET_AGENT_SQL, {"id": agent_id})
        row = result.fetchone()
        return _row_to_agent(row) if row else None

    async def put_agent(self, agent: TradingAgent) -> None:
        await self._db.execute(
            _UPSERT_AGENT_SQL,
            {
                "id": agent.id,
                "owner": agent.owner,
                "name": agent.name,
                "strategy": agent.strategy.value,
                "config": json.dumps(agent.config),
                "capital": _num(agent.capital),
                "is_active": agent.is_active,
                "followers_count": agent.followers_count,
                "total_trades": agent.total_trades,
                "total_volume": _num(agent.total_volume),
                "profit_loss": Decimal(agent.profit_loss),
                "created_at": agent.created_at,
            },
        )

    async def list_agents(self, active_only: bool = False) -> list[TradingAgent]:
        result = await self._db.execute(_LIST_AGENTS_SQL, {"active_only": active_only})
        return [_row_to_agent(row) for row in result.fetchall()]

    async def get_agent_follower(self, agent_id: int, follower: str) -> AgentFollower | None:
        result = await self._db.execute(
            _GET_FOLLOWER_SQL, {"agent_id": agent_id, "follower": follower}
        )
        row = result.fetchone()
        return _row_to_follower(row) if row else None

    async def put_agent_follower(self, record: AgentFollower) -> None:
        await self._db.execute(
            _UPSERT_FOLLOWER_SQL,
            {
                "agent_id": record.agent_id,
                "follower": record.follower,
                "allocation": _num(record.allocation),
                "started_at": record.started_at,
            },
        )

    async def delete_agent_follower(self, agent_id: int, follower: str) -> None:
        await self._db.execute(
            _DELETE_FOLLOWER_SQL, {"agent_id": agent_id, "follower": follower}
        )

    async def list_agent_followers(self, agent_id: int) -> list[AgentFollower]:
        result = await self._db.execute(_LIST_FOLLOWERS_SQL, {"agent_id": agent_id})
        return [_row_to_follower(row) for row in result.fetchall()]

    # --- social ---

    async def get_feed_item(self, item_id: int) -> FeedItem | None:
        result = await self._db.execute(_GET_FEED_ITEM_SQL, {"id": item_id})
        row = result.fetchone()
        return _row_to_feed_item(row) if row else None

    async def put_feed_item(self, item: FeedItem) -> None:
        await self._db.execute(
            _UPSERT_FEED_ITEM_SQL,
            {
                "id": item.id,
                "author": item.author,
                "item_type": item.item_type.value,
                "content": item.content,
                "market_id": item.market_id,
                "data": json.dumps(item.data),
                "likes_count": item.likes_count,
                "created_at": item.created_at,
            },
        )

    async def list_feed_items(
        self,
        market_id: int | None = None,
        item_type: FeedItemType | None = None,
        limit: int | None = None,
    ) -> list[FeedItem]:
        result = await self._db.execute(
            _LIST_FEED_SQL,
            {
                "market_id": market_id,
                "item_type": item_type.value if item_type else None,
                "limit": limit,
            },
        )
        return [_row_to_feed_item(row) for row in result.fetchall()]

    async def has_liked(self, item_id: int, user: str) -> bool:
        result = await self._db.execute(_HAS_LIKE_SQL, {"item_id": item_id, "user_id": user})
        return result.scalar_one_or_none() is not None

    async def add_like(self, item_id: int, user: str) -> None:
        await self._db.execute(_ADD_LIKE_SQL, {"item_id": item_id, "user_id": user})

    async def add_user_follow(self, follower: str, followee: str) -> None:
        await self._db.execute(
            _ADD_USER_FOLLOW_SQL, {"follower": follower, "followee": followee}
        )

    async def remove_user_follow(self, follower: str, followee: str) -> None:
        await self._db.execute(
            _REMOVE_USER_FOLLOW_SQL, {"follower": follower, "followee": followee}
        )

    async def list_following(self, user: str) -> list[str]:
        result = await self._db.execute(_LIST_FOLLOWING_SQL, {"user_id": user})
        return [row.followee for row in result.fetchall()]

    async def list_followers(self, user: str) -> list[str]:
        result = await self._db.execute(_LIST_USER_FOLLOWERS_SQL, {"user_id": user})
        return [row.follower for row in result.fetchall()]
