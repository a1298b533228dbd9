# src/pm_position/application/schemas.py
"""Pydantic schemas for positions API."""
from pydantic import BaseModel

from src.pm_position.domain.models import UserPosition


class PositionResponse(BaseModel):
    market_id: int
    user: str
    yes_shares: int
    no_shares: int
    yes_amount: int
    no_amount: int
    total_amount: int
    claimed: bool
    last_bet_time: str | None

    @classmethod
    def from_domain(cls, p: UserPosition) -> "PositionResponse":
        return cls(
            market_id=p.market_id,
            user=p.user,
            yes_shares=p.yes_shares,
            no_shares=p.no_shares,
            yes_amount=p.yes_amount,
            no_amount=p.no_amount,
            total_amount=p.total_amount,
            claimed=p.claimed,
            last_bet_time=p.last_bet_time.isoformat() if p.last_bet_time else None,
        )


class PositionListResponse(BaseModel):
    items: list[PositionResponse]
    total: int


class PotentialPayoutResponse(BaseModel):
    market_id: int
    user: str
    outcome: str
    shares: int
    potential_payout: int
