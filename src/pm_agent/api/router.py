"""pm_agent REST endpoints.

POST /agents                       — register a trading agent
GET  /agents                       — all agents (?active=true for active only)
GET  /agents/top                   — best reported profit first (?limit=10)
GET  /agents/{agent_id}            — one agent
GET  /agents/{agent_id}/followers  — copy-trading followers
POST /agents/{agent_id}/config     — owner replaces the strategy config
POST /agents/{agent_id}/toggle     — owner activates or pauses
POST /agents/{agent_id}/follow     — follow with an allocation
POST /agents/{agent_id}/unfollow
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, Request

from src.pm_agent.application.schemas import (
    CreateAgentRequest,
    FollowAgentRequest,
    ToggleAgentRequest,
    UpdateAgentConfigRequest,
)
from src.pm_agent.application.service import DEFAULT_TOP_LIMIT, AgentApplicationService
from src.pm_common.response import ApiResponse, success_response
from src.pm_engine.domain.store import StateStore
from src.pm_engine.infrastructure.provider import get_state_store
from src.pm_gateway.auth.dependencies import get_current_caller

router = APIRouter(prefix="/agents", tags=["agents"])

_service = AgentApplicationService()

AgentId = Annotated[int, Path(ge=0)]


def _respond(request: Request, data: object) -> ApiResponse:
    resp = success_response(data)
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.post("", status_code=201)
async def create_agent(
    body: CreateAgentRequest,
    request: Request,
    caller: Annotated[str, Depends(get_current_caller)],
    store: Annotated[StateStore, Depends(get_state_store)],
) -> ApiResponse:
    result = await _service.create_agent(store, body, caller)
    return _respond(request, result.model_dump(mode="json"))


@router.get("")
async def list_agents(
    request: Request,
    caller: Annotated[str, Depends(get_current_caller)],
    store: Annotated[StateStore, Depends(get_state_store)],
    active: bool = Query(False),
) -> ApiResponse:
    result = await _service.list_agents(store, active)
    return _respond(request, result.model_dump(mode="json"))


@router.get("/top")
async def top_agents(
    request: Request,
    caller: Annotated[str, Depends(get_current_caller)],
    store: Annotated[StateStore, Depends(get_state_store)],
    limit: int = Query(DEFAULT_TOP_LIMIT, ge=1, le=100),
) -> ApiResponse:
    result = await _service.top_agents(store, limit)
    return _respond(request, result.model_dump(mode="json"))


@router.get("/{agent_id}")
async def get_agent(
    agent_id: AgentId,
    request: Request,
    caller: Annotated[str, Depends(get_current_caller)],
    store: Annotated[StateStore, Depends(get_state_store)],
) -> ApiResponse:
    result = await _service.get_agent(store, agent_id)
    return _respond(request, result.model_dump(mode="json"))


@router.get("/{agent_id}/followers")
async def list_followers(
    agent_id: AgentId,
    request: Request,
    caller: Annotated[str, Depends(get_current_caller)],
    store: Annotated[StateStore, Depends(get_state_store)],
) -> ApiResponse:
    result = await _service.list_followers(store, agent_id)
    return _respond(request, result.model_dump(mode="json"))


@router.post("/{agent_id}/config")
async def update_config(
    agent_id: AgentId,
    body: UpdateAgentConfigRequest,
    request: Request,
    caller: Annotated[str, Depends(get_current_caller)],
    store: Annotated[StateStore, Depends(get_state_store)],
) -> ApiResponse:
    result = await _service.update_config(store, agent_id, body.config, caller)
    return _respond(request, result.model_dump(mode="json"))


@router.post("/{agent_id}/toggle")
async def toggle_agent(
    agent_id: AgentId,
    body: ToggleAgentRequest,
    request: Request,
    caller: Annotated[str, Depends(get_current_caller)],
    store: Annotated[StateStore, Depends(get_state_store)],
) -> ApiResponse:
    result = await _service.toggle(store, agent_id, body.active, caller)
    return _respond(request, result.model_dump(mode="json"))


@router.post("/{agent_id}/follow")
async def follow_agent(
    agent_id: AgentId,
    body: FollowAgentRequest,
    request: Request,
    caller: Annotated[str, Depends(get_current_caller)],
    store: Annotated[StateStore, Depends(get_state_store)],
) -> ApiResponse:
    result = await _service.follow(store, agent_id, body.allocation, caller)
    return _respond(request, result.model_dump(mode="json"))


@router.post("/{agent_id}/unfollow")
async def unfollow_agent(
    agent_id: AgentId,
    request: Request,
    caller: Annotated[str, Depends(get_current_caller)],
    store: Annotated[StateStore, Depends(get_state_store)],
) -> ApiResponse:
    result = await _service.unfollow(store, agent_id, caller)
    return _respond(request, result.model_dump(mode="json"))
