# src/pm_social/application/schemas.py
from typing import Any

from pydantic import BaseModel, Field

from src.pm_social.domain.models import FeedItem


class PostCommentRequest(BaseModel):
    market_id: int = Field(ge=0)
    content: str = Field(min_length=1, max_length=1000)


class FeedItemResponse(BaseModel):
    id: int
    author: str
    item_type: str
    content: str
    market_id: int | None
    data: dict[str, Any]
    likes_count: int
    created_at: str

    @classmethod
    def from_domain(cls, i: FeedItem) -> "FeedItemResponse":
        return cls(
            id=i.id,
            author=i.author,
            item_type=i.item_type.value,
            content=i.content,
            market_id=i.market_id,
            data=i.data,
            likes_count=i.likes_count,
            created_at=i.created_at.isoformat(),
        )


class FeedListResponse(BaseModel):
    items: list[FeedItemResponse]
    total: int


class UserListResponse(BaseModel):
    users: list[str]
    total: int
