"""Market lifecycle REST endpoints (auth required).

POST /markets                          — create an Active market
POST /markets/{market_id}/bets         — stake on Yes or No
POST /markets/{market_id}/resolve      — oracle declares the winning outcome
POST /markets/{market_id}/cancel       — creator or oracle cancels
POST /markets/{market_id}/claim        — collect payout or refund
"""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Path, Request, status

from src.pm_common.database import get_db_session
from src.pm_common.response import ApiResponse, success_response
from src.pm_gateway.auth.dependencies import get_current_caller
from src.pm_lifecycle.application.schemas import (
    ClaimResponse,
    CreateMarketRequest,
    CreateMarketResponse,
    PlaceBetRequest,
    PlaceBetResponse,
    ResolveMarketRequest,
)
from src.pm_lifecycle.application.service import get_lifecycle_controller
from src.pm_market.application.schemas import MarketDetail
from src.pm_market.domain.models import MAX_MARKET_ID

MarketIdPath = Annotated[int, Path(ge=1, le=MAX_MARKET_ID)]

router = APIRouter(prefix="/markets", tags=["lifecycle"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_market(
    body: CreateMarketRequest,
    request: Request,
    caller: Annotated[str, Depends(get_current_caller)],
    db: Annotated[Any, Depends(get_db_session)],
) -> ApiResponse:
    market_id = await get_lifecycle_controller().create_market(
        db,
        caller,
        question=body.question,
        category=body.category.to_domain(),
        end_time=body.end_time,
        oracle=body.oracle,
    )
    resp = success_response(CreateMarketResponse(market_id=market_id).model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.post("/{market_id}/bets", status_code=status.HTTP_201_CREATED)
async def place_bet(
    market_id: MarketIdPath,
    body: PlaceBetRequest,
    request: Request,
    caller: Annotated[str, Depends(get_current_caller)],
    db: Annotated[Any, Depends(get_db_session)],
) -> ApiResponse:
    shares = await get_lifecycle_controller().place_bet(
        db, caller, market_id, body.outcome, body.amount
    )
    result = PlaceBetResponse(
        market_id=market_id, outcome=body.outcome.value, amount=body.amount, shares=shares
    )
    resp = success_response(result.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.post("/{market_id}/resolve")
async def resolve_market(
    market_id: MarketIdPath,
    body: ResolveMarketRequest,
    request: Request,
    caller: Annotated[str, Depends(get_current_caller)],
    db: Annotated[Any, Depends(get_db_session)],
) -> ApiResponse:
    market = await get_lifecycle_controller().resolve_market(db, caller, market_id, body.outcome)
    resp = success_response(MarketDetail.from_domain(market).model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.post("/{market_id}/cancel")
async def cancel_market(
    market_id: MarketIdPath,
    request: Request,
    caller: Annotated[str, Depends(get_current_caller)],
    db: Annotated[Any, Depends(get_db_session)],
) -> ApiResponse:
    market = await get_lifecycle_controller().cancel_market(db, caller, market_id)
    resp = success_response(MarketDetail.from_domain(market).model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.post("/{market_id}/claim")
async def claim_winnings(
    market_id: MarketIdPath,
    request: Request,
    caller: Annotated[str, Depends(get_current_caller)],
    db: Annotated[Any, Depends(get_db_session)],
) -> ApiResponse:
    payout = await get_lifecycle_controller().claim_winnings(db, caller, market_id)
    resp = success_response(ClaimResponse(market_id=market_id, payout=payout).model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
