"""MarketCatalog — sole owner of Market records.

Creation validates input and allocates the next sequential id. Transition
helpers (apply_bet, resolve, cancel) are pure: they return a new Market and
leave persisting it to save(), so callers can finish every check before the
first write is staged. Status preconditions and authorization belong to the
lifecycle controller, not here.
"""

import logging
from dataclasses import replace
from datetime import datetime
from typing import Any

from src.pm_common.amounts import checked_add
from src.pm_common.enums import CategoryKind, MarketSort, MarketStatus, Outcome
from src.pm_common.errors import EndTimeInPastError, InvalidInputError, MarketNotFoundError
from src.pm_market.domain.models import Category, Market, MarketPage
from src.pm_market.domain.repository import MarketRepositoryProtocol

logger = logging.getLogger(__name__)

QUESTION_MIN_LENGTH = 10
QUESTION_MAX_LENGTH = 500


class MarketCatalog:
    def __init__(self, repo: MarketRepositoryProtocol) -> None:
        self._repo = repo

    async def create(
        self,
        db: Any,
        question: str,
        category: Category,
        end_time: datetime,
        creator: str,
        oracle: str,
        now: datetime,
    ) -> Market:
        if not (QUESTION_MIN_LENGTH <= len(question) <= QUESTION_MAX_LENGTH):
            raise InvalidInputError(
                f"question length must be in [{QUESTION_MIN_LENGTH}, {QUESTION_MAX_LENGTH}],"
                f" got {len(question)}"
            )
        if end_time <= now:
            raise EndTimeInPastError()

        market_id = await self._repo.get_next_id(db)
        market = Market(
            id=market_id,
            question=question,
            category=category,
            end_time=end_time,
            creator=creator,
            oracle_address=oracle,
            created_at=now,
        )
        await self._repo.put_market(db, market)
        await self._repo.set_next_id(db, market_id + 1)
        return market

    async def get(self, db: Any, market_id: int, for_update: bool = False) -> Market:
        market = await self._repo.get_market(db, market_id, for_update=for_update)
        if market is None:
            raise MarketNotFoundError(market_id)
        return market

    async def list(
        self,
        db: Any,
        status: MarketStatus | None = None,
        category: CategoryKind | None = None,
        sort: MarketSort = MarketSort.ENDING_SOON,
        limit: int = 20,
        offset: int = 0,
    ) -> MarketPage:
        items = await self._repo.list_markets(db, status, category, sort, limit, offset)
        total = await self._repo.count_markets(db, status, category)
        return MarketPage(items=items, total=total)

    async def save(self, db: Any, market: Market) -> None:
        await self._repo.put_market(db, market)

    @staticmethod
    def apply_bet(market: Market, outcome: Outcome, amount: int, shares: int) -> Market:
        if outcome == Outcome.YES:
            return replace(
                market,
                yes_pool=checked_add(market.yes_pool, amount, "yes_pool"),
                total_yes_shares=checked_add(market.total_yes_shares, shares, "total_yes_shares"),
            )
        return replace(
            market,
            no_pool=checked_add(market.no_pool, amount, "no_pool"),
            total_no_shares=checked_add(market.total_no_shares, shares, "total_no_shares"),
        )

    @staticmethod
    def resolve(market: Market, outcome: Outcome, now: datetime) -> Market:
        # Locked only exists between these two replace() calls; one record is written.
        locked = replace(market, status=MarketStatus.LOCKED, winning_outcome=outcome)
        return replace(locked, status=MarketStatus.RESOLVED, resolved_at=now)

    @staticmethod
    def cancel(market: Market, now: datetime) -> Market:
        return replace(market, status=MarketStatus.CANCELLED, resolved_at=now)
