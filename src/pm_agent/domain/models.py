"""Domain models for pm_agent — pure dataclasses, no I/O."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from src.pm_common.enums import AgentStrategy


@dataclass
class TradingAgent:
    id: int
    owner: str
    name: str
    strategy: AgentStrategy
    capital: int
    created_at: datetime
    config: dict[str, Any] = field(default_factory=dict)
    is_active: bool = True
    followers_count: int = 0
    # Performance figures are reported, never derived here; agents do not trade on their own
    total_trades: int = 0
    total_volume: int = 0
    profit_loss: int = 0  # signed, attos


@dataclass
class AgentFollower:
    agent_id: int
    follower: str
    allocation: int
    started_at: datetime
