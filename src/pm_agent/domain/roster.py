"""Agent registry rules: ownership, activation and the follower count.

Guards raise before anything is written, the same as the market ledger.
"""

from datetime import datetime
from typing import Any

from src.pm_agent.domain.models import AgentFollower, TradingAgent
from src.pm_common.enums import AgentStrategy
from src.pm_common.errors import AgentInactiveError, InvalidAmountError, NotAuthorizedError
from src.pm_common.fixed_point import validate_amount


def register(
    agent_id: int,
    owner: str,
    name: str,
    strategy: AgentStrategy,
    config: dict[str, Any],
    initial_capital: int,
    now: datetime,
) -> TradingAgent:
    validate_amount(initial_capital)
    return TradingAgent(
        id=agent_id,
        owner=owner,
        name=name,
        strategy=strategy,
        capital=initial_capital,
        created_at=now,
        config=dict(config),
    )


def check_owner(agent: TradingAgent, caller: str) -> None:
    if agent.owner != caller:
        raise NotAuthorizedError(f"Only the owner can manage agent {agent.id}")


def start_following(
    agent: TradingAgent, follower: str, allocation: int, now: datetime
) -> AgentFollower:
    """Build the follower record and bump the agent's count."""
    if not agent.is_active:
        raise AgentInactiveError(agent.id)
    validate_amount(allocation)
    if allocation == 0:
        raise InvalidAmountError("allocation must be greater than zero")
    agent.followers_count += 1
    return AgentFollower(
        agent_id=agent.id, follower=follower, allocation=allocation, started_at=now
    )


def stop_following(agent: TradingAgent) -> None:
    agent.followers_count = max(agent.followers_count - 1, 0)


def rank_by_profit(agents: list[TradingAgent], limit: int) -> list[TradingAgent]:
    return sorted(agents, key=lambda a: (-a.profit_loss, a.id))[:limit]
