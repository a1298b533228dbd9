"""PositionQueryService — read-only projections over the ledger.

Potential payout answers "what would this position collect if outcome won
right now": floor(total_pool * user_shares / total_shares) on that side,
0 when the side has no shares.
"""

from typing import Any

from src.pm_clearing.domain.pari_mutuel import calculate_payout
from src.pm_common.amounts import checked_add
from src.pm_common.enums import Outcome
from src.pm_market.domain.catalog import MarketCatalog
from src.pm_market.domain.repository import MarketRepositoryProtocol
from src.pm_market.infrastructure.factory import get_market_repository
from src.pm_position.application.schemas import (
    PositionListResponse,
    PositionResponse,
    PotentialPayoutResponse,
)
from src.pm_position.domain.ledger import PositionLedger
from src.pm_position.domain.repository import PositionRepositoryProtocol
from src.pm_position.infrastructure.factory import get_position_repository


class PositionQueryService:
    def __init__(
        self,
        repo: PositionRepositoryProtocol | None = None,
        market_repo: MarketRepositoryProtocol | None = None,
    ) -> None:
        self._ledger = PositionLedger(repo or get_position_repository())
        self._catalog = MarketCatalog(market_repo or get_market_repository())

    async def get_user_position(self, db: Any, market_id: int, user: str) -> PositionResponse:
        position = await self._ledger.require(db, market_id, user)
        return PositionResponse.from_domain(position)

    async def list_user_positions(self, db: Any, user: str) -> PositionListResponse:
        positions = await self._ledger.list_for_user(db, user)
        return PositionListResponse(
            items=[PositionResponse.from_domain(p) for p in positions],
            total=len(positions),
        )

    async def get_potential_payout(
        self, db: Any, market_id: int, user: str, outcome: Outcome
    ) -> PotentialPayoutResponse:
        market = await self._catalog.get(db, market_id)
        position = await self._ledger.require(db, market_id, user)
        shares = position.shares_for(outcome)
        payout = calculate_payout(
            checked_add(market.yes_pool, market.no_pool, "total pool"),
            shares,
            market.shares_for(outcome),
        )
        return PotentialPayoutResponse(
            market_id=market_id,
            user=user,
            outcome=outcome.value,
            shares=shares,
            potential_payout=payout,
        )
