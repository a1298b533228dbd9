"""Domain models for pm_market — pure dataclasses, no business logic."""

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any

from src.pm_common.enums import CategoryKind, MarketStatus, Outcome

# markets.id is BIGINT
MAX_MARKET_ID = 2**63 - 1


@dataclass
class SportsCategory:
    event_id: str
    sport_type: str
    home_team: str
    away_team: str

    kind = CategoryKind.SPORTS


@dataclass
class CryptoCategory:
    symbol: str
    threshold: float

    kind = CategoryKind.CRYPTO


@dataclass
class BinaryCategory:
    metadata: str

    kind = CategoryKind.BINARY


Category = SportsCategory | CryptoCategory | BinaryCategory

_CATEGORY_TYPES: dict[CategoryKind, type] = {
    CategoryKind.SPORTS: SportsCategory,
    CategoryKind.CRYPTO: CryptoCategory,
    CategoryKind.BINARY: BinaryCategory,
}


def category_to_dict(category: Category) -> dict[str, Any]:
    """{"kind": "...", ...fields}: the storage and wire shape of a category."""
    return {"kind": category.kind.value, **asdict(category)}


def category_from_dict(data: dict[str, Any]) -> Category:
    fields = dict(data)
    kind = CategoryKind(fields.pop("kind"))
    return _CATEGORY_TYPES[kind](**fields)  # type: ignore[no-any-return]


@dataclass
class Market:
    id: int
    question: str
    category: Category
    end_time: datetime
    creator: str
    oracle_address: str
    created_at: datetime
    yes_pool: int = 0
    no_pool: int = 0
    total_yes_shares: int = 0
    total_no_shares: int = 0
    status: MarketStatus = MarketStatus.ACTIVE
    winning_outcome: Outcome | None = None
    resolved_at: datetime | None = None

    @property
    def total_pool(self) -> int:
        return self.yes_pool + self.no_pool

    def pool_for(self, outcome: Outcome) -> int:
        return self.yes_pool if outcome == Outcome.YES else self.no_pool

    def shares_for(self, outcome: Outcome) -> int:
        return self.total_yes_shares if outcome == Outcome.YES else self.total_no_shares


@dataclass
class MarketPage:
    items: list[Market]
    total: int
