"""MarketQueryService — thin read-only composition layer.

No method mutates state, so there is no commit/rollback here. The caller
(router) passes the db session; reads go through MarketCatalog.
"""

from typing import Any

from src.pm_clearing.domain.pari_mutuel import calculate_quote
from src.pm_common.enums import CategoryKind, MarketSort, MarketStatus, Outcome
from src.pm_common.errors import InvalidInputError
from src.pm_market.application.schemas import (
    MarketDetail,
    MarketListItem,
    MarketListResponse,
    OddsResponse,
    QuoteResponse,
)
from src.pm_market.domain.catalog import MarketCatalog
from src.pm_market.domain.repository import MarketRepositoryProtocol
from src.pm_market.infrastructure.factory import get_market_repository


class MarketQueryService:
    def __init__(self, repo: MarketRepositoryProtocol | None = None) -> None:
        self._catalog = MarketCatalog(repo or get_market_repository())

    async def get_market(self, db: Any, market_id: int) -> MarketDetail:
        market = await self._catalog.get(db, market_id)
        return MarketDetail.from_domain(market)

    async def get_market_odds(self, db: Any, market_id: int) -> OddsResponse:
        market = await self._catalog.get(db, market_id)
        return OddsResponse.from_domain(market)

    async def list_markets(
        self,
        db: Any,
        status: MarketStatus | None = None,
        category: CategoryKind | None = None,
        sort: MarketSort = MarketSort.ENDING_SOON,
        limit: int = 20,
        offset: int = 0,
    ) -> MarketListResponse:
        if limit < 0 or offset < 0:
            raise InvalidInputError("limit and offset must be non-negative")
        page = await self._catalog.list(db, status, category, sort, limit, offset)
        return MarketListResponse(
            items=[MarketListItem.from_domain(m) for m in page.items],
            total=page.total,
            limit=limit,
            offset=offset,
        )

    async def quote_bet(
        self, db: Any, market_id: int, outcome: Outcome, amount: int
    ) -> QuoteResponse:
        """Shares a bet of amount would get now, and its payout if outcome won next."""
        if amount <= 0:
            raise InvalidInputError("amount must be positive")
        market = await self._catalog.get(db, market_id)
        shares, payout = calculate_quote(
            market.yes_pool,
            market.no_pool,
            market.pool_for(outcome),
            market.shares_for(outcome),
            amount,
        )
        return QuoteResponse(
            market_id=market_id,
            outcome=outcome.value,
            amount=amount,
            shares=shares,
            potential_payout=payout,
        )
