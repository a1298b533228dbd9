"""Pydantic request/response schemas for the market lifecycle endpoints.

Question length, end_time and bet size are not validated here: the
controller owns those rules and reports them with their own error codes.
"""

from datetime import UTC, datetime

from pydantic import BaseModel, Field, field_validator

from src.pm_common.enums import Outcome
from src.pm_market.application.schemas import CategoryIn


class CreateMarketRequest(BaseModel):
    question: str
    category: CategoryIn
    end_time: datetime
    oracle: str | None = Field(None, description="Defaults to the caller")

    @field_validator("end_time")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        # Naive timestamps are taken as UTC.
        return v if v.tzinfo is not None else v.replace(tzinfo=UTC)


class CreateMarketResponse(BaseModel):
    market_id: int


class PlaceBetRequest(BaseModel):
    outcome: Outcome
    amount: int


class PlaceBetResponse(BaseModel):
    market_id: int
    outcome: str
    amount: int
    shares: int


class ResolveMarketRequest(BaseModel):
    outcome: Outcome


class ClaimResponse(BaseModel):
    market_id: int
    payout: int
