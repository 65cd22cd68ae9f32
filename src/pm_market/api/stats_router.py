"""GET /stats — process-wide totals."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from src.pm_common.response import ApiResponse, success_response
from src.pm_engine.domain.store import StateStore
from src.pm_engine.infrastructure.provider import get_state_store
from src.pm_gateway.auth.dependencies import get_current_caller
from src.pm_market.application.service import MarketApplicationService

router = APIRouter(tags=["stats"])

_service = MarketApplicationService()


@router.get("/stats")
async def get_stats(
    request: Request,
    caller: Annotated[str, Depends(get_current_caller)],
    store: Annotated[StateStore, Depends(get_state_store)],
) -> ApiResponse:
    result = await _service.get_stats(store)
    resp = success_response(result.model_dump(mode="json"))
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
