# src/pm_market/domain/repository.py
"""Repository Protocol — dependency inversion for testability.

Unit tests inject a mock that conforms to this Protocol.
Infrastructure layer provides the real implementations (PostgreSQL, memory).
Writes are staged in `db` and become visible on db.commit().
"""

from typing import Any, Protocol

from src.pm_common.enums import CategoryKind, MarketSort, MarketStatus
from src.pm_market.domain.models import Market


class MarketRepositoryProtocol(Protocol):
    async def get_market(
        self, db: Any, market_id: int, for_update: bool = False
    ) -> Market | None: ...

    async def put_market(self, db: Any, market: Market) -> None: ...

    async def get_next_id(self, db: Any) -> int: ...

    async def set_next_id(self, db: Any, next_id: int) -> None: ...

    async def list_markets(
        self,
        db: Any,
        status: MarketStatus | None,
        category: CategoryKind | None,
        sort: MarketSort,
        limit: int,
        offset: int,
    ) -> list[Market]: ...

    async def count_markets(
        self,
        db: Any,
        status: MarketStatus | None,
        category: CategoryKind | None,
    ) -> int: ...
