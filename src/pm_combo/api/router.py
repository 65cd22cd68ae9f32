"""pm_combo REST endpoints.

POST /combos                     — create a parlay over 2..10 markets
GET  /combos                     — caller's combos (?active=true for open only)
GET  /combos/{combo_id}          — one combo with its legs
POST /combos/{combo_id}/cancel   — owner cancels while no leg has resolved
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, Request

from src.pm_combo.application.schemas import CreateComboRequest
from src.pm_combo.application.service import ComboApplicationService
from src.pm_common.response import ApiResponse, success_response
from src.pm_engine.domain.store import StateStore
from src.pm_engine.infrastructure.provider import get_state_store
from src.pm_gateway.auth.dependencies import get_current_caller

router = APIRouter(prefix="/combos", tags=["combos"])

_service = ComboApplicationService()

ComboId = Annotated[int, Path(ge=0)]


@router.post("", status_code=201)
async def create_combo(
    body: CreateComboRequest,
    request: Request,
    caller: Annotated[str, Depends(get_current_caller)],
    store: Annotated[StateStore, Depends(get_state_store)],
) -> ApiResponse:
    result = await _service.create_combo(store, body, caller)
    resp = success_response(result.model_dump(mode="json"))
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("")
async def list_combos(
    request: Request,
    caller: Annotated[str, Depends(get_current_caller)],
    store: Annotated[StateStore, Depends(get_state_store)],
    active: bool = Query(False),
) -> ApiResponse:
    result = await _service.list_combos(store, caller, active)
    resp = success_response(result.model_dump(mode="json"))
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("/{combo_id}")
async def get_combo(
    combo_id: ComboId,
    request: Request,
    caller: Annotated[str, Depends(get_current_caller)],
    store: Annotated[StateStore, Depends(get_state_store)],
) -> ApiResponse:
    result = await _service.get_combo(store, combo_id)
    resp = success_response(result.model_dump(mode="json"))
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.post("/{combo_id}/cancel")
async def cancel_combo(
    combo_id: ComboId,
    request: Request,
    caller: Annotated[str, Depends(get_current_caller)],
    store: Annotated[StateStore, Depends(get_state_store)],
) -> ApiResponse:
    result = await _service.cancel_combo(store, combo_id, caller)
    resp = success_response(result.model_dump(mode="json"))
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
