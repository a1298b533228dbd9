# src/pm_position/api/router.py
"""Positions REST API — 3 endpoints.

Reads default to the caller's own positions; ``user`` looks up someone else's.
"""
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Path, Query, Request

from src.pm_common.database import get_db_session
from src.pm_common.enums import Outcome
from src.pm_common.response import ApiResponse, success_response
from src.pm_gateway.auth.dependencies import get_current_caller
from src.pm_market.domain.models import MAX_MARKET_ID
from src.pm_position.application.service import PositionQueryService

MarketIdPath = Annotated[int, Path(ge=1, le=MAX_MARKET_ID)]

router = APIRouter(prefix="/positions", tags=["positions"])
_service = PositionQueryService()


@router.get("")
async def list_positions(
    request: Request,
    caller: Annotated[str, Depends(get_current_caller)],
    db: Annotated[Any, Depends(get_db_session)],
    user: str | None = Query(None),
) -> ApiResponse:
    data = await _service.list_user_positions(db, user or caller)
    resp = success_response(data.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("/{market_id}")
async def get_position(
    market_id: MarketIdPath,
    request: Request,
    caller: Annotated[str, Depends(get_current_caller)],
    db: Annotated[Any, Depends(get_db_session)],
    user: str | None = Query(None),
) -> ApiResponse:
    data = await _service.get_user_position(db, market_id, user or caller)
    resp = success_response(data.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("/{market_id}/potential-payout")
async def get_potential_payout(
    market_id: MarketIdPath,
    request: Request,
    caller: Annotated[str, Depends(get_current_caller)],
    db: Annotated[Any, Depends(get_db_session)],
    outcome: Outcome = Query(...),
    user: str | None = Query(None),
) -> ApiResponse:
    data = await _service.get_potential_payout(db, market_id, user or caller, outcome)
    resp = success_response(data.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
