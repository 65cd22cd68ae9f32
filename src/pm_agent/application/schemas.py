"""Pydantic schemas for pm_agent API requests and responses."""

from typing import Any

from pydantic import BaseModel, Field

from src.pm_agent.domain.models import AgentFollower, TradingAgent
from src.pm_common.enums import AgentStrategy
from src.pm_common.response import AmountStr
from src.pm_engine.domain.operations import Amount


class CreateAgentRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    strategy: AgentStrategy
    config: dict[str, Any] = Field(default_factory=dict)
    initial_capital: Amount


class UpdateAgentConfigRequest(BaseModel):
    config: dict[str, Any]


class ToggleAgentRequest(BaseModel):
    active: bool


class FollowAgentRequest(BaseModel):
    allocation: Amount


class AgentResponse(BaseModel):
    id: int
    owner: str
    name: str
    strategy: str
    config: dict[str, Any]
    capital: AmountStr
    is_active: bool
    followers_count: int
    total_trades: int
    total_volume: AmountStr
    profit_loss: str  # signed attos
    created_at: str

    @classmethod
    def from_domain(cls, a: TradingAgent) -> "AgentResponse":
        return cls(
            id=a.id,
            owner=a.owner,
            name=a.name,
            strategy=a.strategy.value,
            config=a.config,
            capital=a.capital,
            is_active=a.is_active,
            followers_count=a.followers_count,
            total_trades=a.total_trades,
            total_volume=a.total_volume,
            profit_loss=str(a.profit_loss),
            created_at=a.created_at.isoformat(),
        )


class AgentListResponse(BaseModel):
    items: list[AgentResponse]
    total: int


class FollowerResponse(BaseModel):
    follower: str
    allocation: AmountStr
    started_at: str

    @classmethod
    def from_domain(cls, f: AgentFollower) -> "FollowerResponse":
        return cls(
            follower=f.follower,
            allocation=f.allocation,
            started_at=f.started_at.isoformat(),
        )


class FollowerListResponse(BaseModel):
    items: list[FollowerResponse]
    total: int
