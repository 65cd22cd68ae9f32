"""pm_market REST endpoints.

POST /markets                         — create (caller becomes creator)
GET  /markets                         — list, filter by status / category
GET  /markets/{market_id}             — full detail incl. implied prices
POST /markets/{market_id}/buy         — buy YES/NO shares from the pool
POST /markets/{market_id}/sell        — sell shares back into the pool
POST /markets/{market_id}/resolve     — creator sets the outcome
POST /markets/{market_id}/claim       — pay out winning shares
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, Request

from src.pm_common.response import ApiResponse, success_response
from src.pm_engine.domain.store import StateStore
from src.pm_engine.infrastructure.provider import get_state_store
from src.pm_gateway.auth.dependencies import get_current_caller
from src.pm_market.application.schemas import (
    BuySharesRequest,
    CreateMarketRequest,
    ResolveMarketRequest,
    SellSharesRequest,
)
from src.pm_market.application.service import MarketApplicationService, MarketStatusFilter

router = APIRouter(prefix="/markets", tags=["markets"])

_service = MarketApplicationService()

MarketId = Annotated[int, Path(ge=0)]


@router.post("", status_code=201)
async def create_market(
    body: CreateMarketRequest,
    request: Request,
    caller: Annotated[str, Depends(get_current_caller)],
    store: Annotated[StateStore, Depends(get_state_store)],
) -> ApiResponse:
    result = await _service.create_market(store, body, caller)
    resp = success_response(result.model_dump(mode="json"))
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("")
async def list_markets(
    request: Request,
    caller: Annotated[str, Depends(get_current_caller)],
    store: Annotated[StateStore, Depends(get_state_store)],
    status: MarketStatusFilter = Query("active"),
    category: str | None = Query(None),
) -> ApiResponse:
    result = await _service.list_markets(store, status, category)
    resp = success_response(result.model_dump(mode="json"))
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("/{market_id}")
async def get_market(
    market_id: MarketId,
    request: Request,
    caller: Annotated[str, Depends(get_current_caller)],
    store: Annotated[StateStore, Depends(get_state_store)],
) -> ApiResponse:
    result = await _service.get_market(store, market_id)
    resp = success_response(result.model_dump(mode="json"))
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.post("/{market_id}/buy")
async def buy_shares(
    market_id: MarketId,
    body: BuySharesRequest,
    request: Request,
    caller: Annotated[str, Depends(get_current_caller)],
    store: Annotated[StateStore, Depends(get_state_store)],
) -> ApiResponse:
    result = await _service.buy(store, market_id, body, caller)
    resp = success_response(result.model_dump(mode="json"))
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.post("/{market_id}/sell")
async def sell_shares(
    market_id: MarketId,
    body: SellSharesRequest,
    request: Request,
    caller: Annotated[str, Depends(get_current_caller)],
    store: Annotated[StateStore, Depends(get_state_store)],
) -> ApiResponse:
    result = await _service.sell(store, market_id, body, caller)
    resp = success_response(result.model_dump(mode="json"))
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.post("/{market_id}/resolve")
async def resolve_market(
    market_id: MarketId,
    body: ResolveMarketRequest,
    request: Request,
    caller: Annotated[str, Depends(get_current_caller)],
    store: Annotated[StateStore, Depends(get_state_store)],
) -> ApiResponse:
    result = await _service.resolve(store, market_id, body, caller)
    resp = success_response(result.model_dump(mode="json"))
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.post("/{market_id}/claim")
async def claim_winnings(
    market_id: MarketId,
    request: Request,
    caller: Annotated[str, Depends(get_current_caller)],
    store: Annotated[StateStore, Depends(get_state_store)],
) -> ApiResponse:
    result = await _service.claim(store, market_id, caller)
    resp = success_response(result.model_dump(mode="json"))
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
