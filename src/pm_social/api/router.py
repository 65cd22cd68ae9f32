# src/pm_social/api/router.py
from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query

from src.pm_common.enums import FeedItemType
from src.pm_common.response import ApiResponse, success_response
from src.pm_engine.domain.store import StateStore
from src.pm_engine.infrastructure.provider import get_state_store
from src.pm_gateway.auth.dependencies import get_current_caller
from src.pm_social.application import service as svc
from src.pm_social.application.schemas import PostCommentRequest

router = APIRouter(prefix="/feed", tags=["social"])
users_router = APIRouter(prefix="/users", tags=["social"])

UserName = Annotated[str, Path(min_length=1, max_length=128)]


@router.get("")
async def list_feed(
    caller: Annotated[str, Depends(get_current_caller)],
    store: Annotated[StateStore, Depends(get_state_store)],
    limit: int = Query(svc.DEFAULT_FEED_LIMIT, ge=1, le=200),
    market_id: int | None = Query(None, ge=0, description="Only items about this market"),
    item_type: FeedItemType | None = Query(None, alias="type"),
) -> ApiResponse:
    result = await svc.list_feed(store, limit, market_id, item_type)
    return success_response(result.model_dump(mode="json"))


@router.post("/comments", status_code=201)
async def post_comment(
    req: PostCommentRequest,
    caller: Annotated[str, Depends(get_current_caller)],
    store: Annotated[StateStore, Depends(get_state_store)],
) -> ApiResponse:
    result = await svc.post_comment(req, caller, store)
    return success_response(result.model_dump(mode="json"))


@router.get("/{item_id}")
async def get_feed_item(
    item_id: Annotated[int, Path(ge=0)],
    caller: Annotated[str, Depends(get_current_caller)],
    store: Annotated[StateStore, Depends(get_state_store)],
) -> ApiResponse:
    result = await svc.get_feed_item(store, item_id)
    return success_response(result.model_dump(mode="json"))


@router.post("/{item_id}/like")
async def like_item(
    item_id: Annotated[int, Path(ge=0)],
    caller: Annotated[str, Depends(get_current_caller)],
    store: Annotated[StateStore, Depends(get_state_store)],
) -> ApiResponse:
    result = await svc.like_item(item_id, caller, store)
    return success_response(result.model_dump(mode="json"))


@users_router.post("/{user}/follow")
async def follow_user(
    user: UserName,
    caller: Annotated[str, Depends(get_current_caller)],
    store: Annotated[StateStore, Depends(get_state_store)],
) -> ApiResponse:
    result = await svc.follow_user(user, caller, store)
    return success_response(result.model_dump(mode="json"))


@users_router.post("/{user}/unfollow")
async def unfollow_user(
    user: UserName,
    caller: Annotated[str, Depends(get_current_caller)],
    store: Annotated[StateStore, Depends(get_state_store)],
) -> ApiResponse:
    result = await svc.unfollow_user(user, caller, store)
    return success_response(result.model_dump(mode="json"))


@users_router.get("/{user}/followers")
async def list_followers(
    user: UserName,
    caller: Annotated[str, Depends(get_current_caller)],
    store: Annotated[StateStore, Depends(get_state_store)],
) -> ApiResponse:
    result = await svc.list_followers(user, store)
    return success_response(result.model_dump(mode="json"))


@users_router.get("/{user}/following")
async def list_following(
    user: UserName,
    caller: Annotated[str, Depends(get_current_caller)],
    store: Annotated[StateStore, Depends(get_state_store)],
) -> ApiResponse:
    result = await svc.list_following(user, store)
    return success_response(result.model_dump(mode="json"))
