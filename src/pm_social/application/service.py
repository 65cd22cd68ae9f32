# src/pm_social/application/service.py
"""Feed reads are plain projections; every write goes through the operation service."""
from src.pm_common.enums import FeedItemType
from src.pm_common.errors import FeedItemNotFoundError
from src.pm_engine.application.service import get_operation_service
from src.pm_engine.domain.operations import (
    FollowUser,
    LikeFeedItem,
    OperationResponse,
    PostComment,
    UnfollowUser,
)
from src.pm_engine.domain.store import StateStore
from src.pm_social.application.schemas import (
    FeedItemResponse,
    FeedListResponse,
    PostCommentRequest,
    UserListResponse,
)

DEFAULT_FEED_LIMIT = 50


async def list_feed(
    store: StateStore,
    limit: int = DEFAULT_FEED_LIMIT,
    market_id: int | None = None,
    item_type: FeedItemType | None = None,
) -> FeedListResponse:
    items = await store.list_feed_items(market_id=market_id, item_type=item_type, limit=limit)
    return FeedListResponse(
        items=[FeedItemResponse.from_domain(i) for i in items],
        total=len(items),
    )


async def get_feed_item(store: StateStore, item_id: int) -> FeedItemResponse:
    item = await store.get_feed_item(item_id)
    if item is None:
        raise FeedItemNotFoundError(item_id)
    return FeedItemResponse.from_domain(item)


async def post_comment(
    req: PostCommentRequest, caller: str, store: StateStore
) -> OperationResponse:
    op = PostComment(market_id=req.market_id, content=req.content)
    return await get_operation_service().submit(store, op, caller)


async def like_item(item_id: int, caller: str, store: StateStore) -> OperationResponse:
    return await get_operation_service().submit(store, LikeFeedItem(item_id=item_id), caller)


async def follow_user(user: str, caller: str, store: StateStore) -> OperationResponse:
    return await get_operation_service().submit(store, FollowUser(user=user), caller)


async def unfollow_user(user: str, caller: str, store: StateStore) -> OperationResponse:
    return await get_operation_service().submit(store, UnfollowUser(user=user), caller)


async def list_followers(user: str, store: StateStore) -> UserListResponse:
    users = await store.list_followers(user)
    return UserListResponse(users=users, total=len(users))


async def list_following(user: str, store: StateStore) -> UserListResponse:
    users = await store.list_following(user)
    return UserListResponse(users=users, total=len(users))
