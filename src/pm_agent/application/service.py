"""AgentApplicationService — agent registry queries plus owner/follower commands."""

from src.pm_agent.application.schemas import (
    AgentListResponse,
    AgentResponse,
    CreateAgentRequest,
    FollowerListResponse,
    FollowerResponse,
)
from src.pm_agent.domain.roster import rank_by_profit
from src.pm_common.errors import AgentNotFoundError
from src.pm_engine.application.service import OperationService, get_operation_service
from src.pm_engine.domain.operations import (
    CreateAgent,
    FollowAgent,
    OperationResponse,
    ToggleAgent,
    UnfollowAgent,
    UpdateAgentConfig,
)
from src.pm_engine.domain.store import StateStore

DEFAULT_TOP_LIMIT = 10


class AgentApplicationService:
    def __init__(self, operations: OperationService | None = None) -> None:
        self._operations = operations

    @property
    def operations(self) -> OperationService:
        return self._operations or get_operation_service()

    async def list_agents(self, store: StateStore, active_only: bool) -> AgentListResponse:
        agents = await store.list_agents(active_only=active_only)
        items = [AgentResponse.from_domain(a) for a in agents]
        return AgentListResponse(items=items, total=len(items))

    async def top_agents(
        self, store: StateStore, limit: int = DEFAULT_TOP_LIMIT
    ) -> AgentListResponse:
        """Agents ordered by reported profit, best first."""
        agents = rank_by_profit(await store.list_agents(), limit)
        items = [AgentResponse.from_domain(a) for a in agents]
        return AgentListResponse(items=items, total=len(items))

    async def get_agent(self, store: StateStore, agent_id: int) -> AgentResponse:
        agent = await store.get_agent(agent_id)
        if agent is None:
            raise AgentNotFoundError(agent_id)
        return AgentResponse.from_domain(agent)

    async def list_followers(self, store: StateStore, agent_id: int) -> FollowerListResponse:
        if await store.get_agent(agent_id) is None:
            raise AgentNotFoundError(agent_id)
        records = await store.list_agent_followers(agent_id)
        items = [FollowerResponse.from_domain(r) for r in records]
        return FollowerListResponse(items=items, total=len(items))

    async def create_agent(
        self, store: StateStore, req: CreateAgentRequest, caller: str
    ) -> OperationResponse:
        op = CreateAgent(
            name=req.name,
            strategy=req.strategy,
            config=req.config,
            initial_capital=req.initial_capital,
        )
        return await self.operations.submit(store, op, caller)

    async def update_config(
        self, store: StateStore, agent_id: int, config: dict, caller: str
    ) -> OperationResponse:
        op = UpdateAgentConfig(agent_id=agent_id, config=config)
        return await self.operations.submit(store, op, caller)

    async def toggle(
        self, store: StateStore, agent_id: int, active: bool, caller: str
    ) -> OperationResponse:
        return await self.operations.submit(
            store, ToggleAgent(agent_id=agent_id, active=active), caller
        )

    async def follow(
        self, store: StateStore, agent_id: int, allocation: int, caller: str
    ) -> OperationResponse:
        return await self.operations.submit(
            store, FollowAgent(agent_id=agent_id, allocation=allocation), caller
        )

    async def unfollow(self, store: StateStore, agent_id: int, caller: str) -> OperationResponse:
        return await self.operations.submit(store, UnfollowAgent(agent_id=agent_id), caller)
