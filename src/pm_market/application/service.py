"""MarketApplicationService — thin composition layer.

Reads go straight to the StateStore; every write is turned into an
Operation and handed to the OperationService.
"""

from typing import Literal

from src.pm_common.enums import Counter
from src.pm_common.errors import MarketNotFoundError
from src.pm_common.fixed_point import to_display
from src.pm_engine.application.service import OperationService, get_operation_service
from src.pm_engine.domain.operations import (
    BuyShares,
    ClaimWinnings,
    CreateMarket,
    OperationResponse,
    ResolveMarket,
    SellShares,
)
from src.pm_engine.domain.store import StateStore
from src.pm_market.application.schemas import (
    BuySharesRequest,
    CreateMarketRequest,
    MarketDetail,
    MarketListItem,
    MarketListResponse,
    ResolveMarketRequest,
    SellSharesRequest,
    StatsResponse,
)

MarketStatusFilter = Literal["active", "resolved", "all"]


class MarketApplicationService:
    def __init__(self, operations: OperationService | None = None) -> None:
        self._operations = operations

    @property
    def operations(self) -> OperationService:
        return self._operations or get_operation_service()

    # --- queries ---

    async def list_markets(
        self,
        store: StateStore,
        status: MarketStatusFilter,
        category: str | None,
    ) -> MarketListResponse:
        resolved = {"active": False, "resolved": True, "all": None}[status]
        markets = await store.list_markets(resolved=resolved, category=category)
        items = [MarketListItem.from_domain(m) for m in markets]
        return MarketListResponse(items=items, total=len(items))

    async def get_market(self, store: StateStore, market_id: int) -> MarketDetail:
        market = await store.get_market(market_id)
        if market is None:
            raise MarketNotFoundError(market_id)
        return MarketDetail.from_domain(market)

    async def get_stats(self, store: StateStore) -> StatsResponse:
        total_volume = await store.get_total_volume()
        return StatsResponse(
            total_volume=total_volume,
            total_volume_display=to_display(total_volume),
            market_count=await store.peek_counter(Counter.MARKET),
            combo_count=await store.peek_counter(Counter.COMBO),
            order_count=await store.peek_counter(Counter.ORDER),
        )

    # --- commands ---

    async def create_market(
        self, store: StateStore, req: CreateMarketRequest, caller: str
    ) -> OperationResponse:
        op = CreateMarket(
            question=req.question,
            categories=req.categories,
            end_time=req.end_time,
            initial_liquidity=req.initial_liquidity,
        )
        return await self.operations.submit(store, op, caller)

    async def buy(
        self, store: StateStore, market_id: int, req: BuySharesRequest, caller: str
    ) -> OperationResponse:
        op = BuyShares(
            market_id=market_id, is_yes=req.is_yes, shares=req.shares, max_cost=req.max_cost
        )
        return await self.operations.submit(store, op, caller)

    async def sell(
        self, store: StateStore, market_id: int, req: SellSharesRequest, caller: str
    ) -> OperationResponse:
        op = SellShares(
            market_id=market_id,
            is_yes=req.is_yes,
            shares=req.shares,
            min_proceeds=req.min_proceeds,
        )
        return await self.operations.submit(store, op, caller)

    async def resolve(
        self, store: StateStore, market_id: int, req: ResolveMarketRequest, caller: str
    ) -> OperationResponse:
        op = ResolveMarket(market_id=market_id, outcome=req.outcome)
        return await self.operations.submit(store, op, caller)

    async def claim(
        self, store: StateStore, market_id: int, caller: str
    ) -> OperationResponse:
        return await self.operations.submit(store, ClaimWinnings(market_id=market_id), caller)
