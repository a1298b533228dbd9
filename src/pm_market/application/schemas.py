"""Pydantic schemas for pm_market API requests and responses.

Categories travel as {"kind": "Sports" | "Crypto" | "Binary", ...fields} and
are validated with a discriminated union on ``kind``. Times are ISO-8601
strings; ``end_time_us`` repeats end_time as integer microseconds since the
epoch for clients that compare timestamps numerically.
"""

from datetime import datetime
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field

from src.pm_clearing.domain.pari_mutuel import calculate_odds
from src.pm_common.datetime_utils import to_micros
from src.pm_market.domain.models import (
    BinaryCategory,
    Category,
    CryptoCategory,
    Market,
    SportsCategory,
    category_to_dict,
)


def _iso(dt: datetime | None) -> str | None:
    return dt.isoformat() if dt is not None else None


# ---------------------------------------------------------------------------
# Category input
# ---------------------------------------------------------------------------


class SportsCategoryIn(BaseModel):
    kind: Literal["Sports"]
    event_id: str
    sport_type: str
    home_team: str
    away_team: str

    def to_domain(self) -> Category:
        return SportsCategory(
            event_id=self.event_id,
            sport_type=self.sport_type,
            home_team=self.home_team,
            away_team=self.away_team,
        )


class CryptoCategoryIn(BaseModel):
    kind: Literal["Crypto"]
    symbol: str
    threshold: float

    def to_domain(self) -> Category:
        return CryptoCategory(symbol=self.symbol, threshold=self.threshold)


class BinaryCategoryIn(BaseModel):
    kind: Literal["Binary"]
    metadata: str = ""

    def to_domain(self) -> Category:
        return BinaryCategory(metadata=self.metadata)


CategoryIn = Annotated[
    SportsCategoryIn | CryptoCategoryIn | BinaryCategoryIn,
    Field(discriminator="kind"),
]


# ---------------------------------------------------------------------------
# Odds / quote
# ---------------------------------------------------------------------------


class OddsResponse(BaseModel):
    market_id: int
    yes_odds: float
    no_odds: float

    @classmethod
    def from_domain(cls, m: Market) -> "OddsResponse":
        yes_odds, no_odds = calculate_odds(m.yes_pool, m.no_pool)
        return cls(market_id=m.id, yes_odds=yes_odds, no_odds=no_odds)


class QuoteResponse(BaseModel):
    market_id: int
    outcome: str
    amount: int
    shares: int
    potential_payout: int


# ---------------------------------------------------------------------------
# Market list item (lightweight — no share totals, no creator/oracle)
# ---------------------------------------------------------------------------


class MarketListItem(BaseModel):
    id: int
    question: str
    category: dict[str, Any]
    status: str
    end_time: str
    end_time_us: int
    yes_pool: int
    no_pool: int
    total_pool: int
    yes_odds: float
    no_odds: float
    winning_outcome: str | None

    @classmethod
    def from_domain(cls, m: Market) -> "MarketListItem":
        yes_odds, no_odds = calculate_odds(m.yes_pool, m.no_pool)
        return cls(
            id=m.id,
            question=m.question,
            category=category_to_dict(m.category),
            status=m.status.value,
            end_time=m.end_time.isoformat(),
            end_time_us=to_micros(m.end_time),
            yes_pool=m.yes_pool,
            no_pool=m.no_pool,
            total_pool=m.total_pool,
            yes_odds=yes_odds,
            no_odds=no_odds,
            winning_outcome=m.winning_outcome.value if m.winning_outcome else None,
        )


class MarketListResponse(BaseModel):
    items: list[MarketListItem]
    total: int
    limit: int
    offset: int


# ---------------------------------------------------------------------------
# Market detail (full fields)
# ---------------------------------------------------------------------------


class MarketDetail(BaseModel):
    id: int
    question: str
    category: dict[str, Any]
    status: str
    end_time: str
    end_time_us: int
    yes_pool: int
    no_pool: int
    total_pool: int
    total_yes_shares: int
    total_no_shares: int
    yes_odds: float
    no_odds: float
    winning_outcome: str | None
    creator: str
    oracle_address: str
    created_at: str
    resolved_at: str | None

    @classmethod
    def from_domain(cls, m: Market) -> "MarketDetail":
        yes_odds, no_odds = calculate_odds(m.yes_pool, m.no_pool)
        return cls(
            id=m.id,
            question=m.question,
            category=category_to_dict(m.category),
            status=m.status.value,
            end_time=m.end_time.isoformat(),
            end_time_us=to_micros(m.end_time),
            yes_pool=m.yes_pool,
            no_pool=m.no_pool,
            total_pool=m.total_pool,
            total_yes_shares=m.total_yes_shares,
            total_no_shares=m.total_no_shares,
            yes_odds=yes_odds,
            no_odds=no_odds,
            winning_outcome=m.winning_outcome.value if m.winning_outcome else None,
            creator=m.creator,
            oracle_address=m.oracle_address,
            created_at=m.created_at.isoformat(),
            resolved_at=_iso(m.resolved_at),
        )
