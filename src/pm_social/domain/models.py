"""Domain models for pm_social — pure dataclasses, no I/O."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from src.pm_common.enums import FeedItemType


@dataclass
class FeedItem:
    id: int
    author: str
    item_type: FeedItemType
    content: str
    created_at: datetime
    market_id: int | None = None
    data: dict[str, Any] = field(default_factory=dict)
    likes_count: int = 0
