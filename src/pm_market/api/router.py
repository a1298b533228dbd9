"""pm_market REST endpoints (read-only, public).

GET /markets                         — list with status/category filter, sort, offset pagination
GET /markets/{market_id}             — full detail including odds
GET /markets/{market_id}/odds        — implied probabilities
GET /markets/{market_id}/quote       — shares and payout a bet would receive now
"""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Path, Query, Request

from src.pm_common.database import get_db_session
from src.pm_common.enums import CategoryKind, MarketSort, MarketStatus, Outcome
from src.pm_common.response import ApiResponse, success_response
from src.pm_market.application.service import MarketQueryService
from src.pm_market.domain.models import MAX_MARKET_ID

MarketIdPath = Annotated[int, Path(ge=1, le=MAX_MARKET_ID)]

router = APIRouter(prefix="/markets", tags=["markets"])

_service = MarketQueryService()


@router.get("")
async def list_markets(
    request: Request,
    db: Annotated[Any, Depends(get_db_session)],
    status: MarketStatus | None = Query(None, description="Filter by status. Default: all."),
    category: CategoryKind | None = Query(None),
    sort: MarketSort = Query(MarketSort.ENDING_SOON),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
) -> ApiResponse:
    result = await _service.list_markets(db, status, category, sort, limit, offset)
    resp = success_response(result.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("/{market_id}")
async def get_market(
    market_id: MarketIdPath,
    request: Request,
    db: Annotated[Any, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.get_market(db, market_id)
    resp = success_response(result.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("/{market_id}/odds")
async def get_market_odds(
    market_id: MarketIdPath,
    request: Request,
    db: Annotated[Any, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.get_market_odds(db, market_id)
    resp = success_response(result.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("/{market_id}/quote")
async def quote_bet(
    market_id: MarketIdPath,
    request: Request,
    db: Annotated[Any, Depends(get_db_session)],
    outcome: Outcome = Query(...),
    amount: int = Query(..., ge=1),
) -> ApiResponse:
    result = await _service.quote_bet(db, market_id, outcome, amount)
    resp = success_response(result.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
