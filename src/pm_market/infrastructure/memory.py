"""In-memory MarketRepositoryProtocol backed by a MemorySession."""

from src.pm_common.enums import CategoryKind, MarketSort, MarketStatus
from src.pm_common.memory_store import MemorySession
from src.pm_market.domain.models import Market

_MARKETS = "markets"
_META = "meta"
_NEXT_ID_KEY = "next_market_id"

_SORT_KEYS = {
    MarketSort.ENDING_SOON: lambda m: (m.end_time, m.id),
    MarketSort.NEWEST: lambda m: (-m.created_at.timestamp(), -m.id),
    MarketSort.POPULAR: lambda m: (-m.total_pool, m.id),
    MarketSort.ALPHABETICAL: lambda m: (m.question, m.id),
}


def _matches(
    market: Market, status: MarketStatus | None, category: CategoryKind | None
) -> bool:
    if status is not None and market.status != status:
        return False
    if category is not None and market.category.kind != category:
        return False
    return True


class InMemoryMarketRepository:
    async def get_market(
        self, db: MemorySession, market_id: int, for_update: bool = False
    ) -> Market | None:
        # for_update is a no-op: the controller's market lock already serializes writers.
        return db.get(_MARKETS, market_id)  # type: ignore[no-any-return]

    async def put_market(self, db: MemorySession, market: Market) -> None:
        db.put(_MARKETS, market.id, market)

    async def get_next_id(self, db: MemorySession) -> int:
        return db.get(_META, _NEXT_ID_KEY, 1)  # type: ignore[no-any-return]

    async def set_next_id(self, db: MemorySession, next_id: int) -> None:
        db.put(_META, _NEXT_ID_KEY, next_id)

    async def list_markets(
        self,
        db: MemorySession,
        status: MarketStatus | None,
        category: CategoryKind | None,
        sort: MarketSort,
        limit: int,
        offset: int,
    ) -> list[Market]:
        markets = [m for m in db.scan(_MARKETS) if _matches(m, status, category)]
        markets.sort(key=_SORT_KEYS[sort])
        return markets[offset : offset + limit]

    async def count_markets(
        self,
        db: MemorySession,
        status: MarketStatus | None,
        category: CategoryKind | None,
    ) -> int:
        return sum(1 for m in db.scan(_MARKETS) if _matches(m, status, category))
