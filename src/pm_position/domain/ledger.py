"""PositionLedger — sole owner of UserPosition records.

A position is created lazily by the first bet, grows with each later bet
while the market is Active, and changes exactly once more when it is claimed.
Positions are never deleted.
"""

from dataclasses import replace
from datetime import datetime
from typing import Any

from src.pm_common.amounts import checked_add
from src.pm_common.enums import Outcome
from src.pm_common.errors import AlreadyClaimedError, PositionNotFoundError
from src.pm_position.domain.models import StakeTotals, UserPosition
from src.pm_position.domain.repository import PositionRepositoryProtocol


class PositionLedger:
    def __init__(self, repo: PositionRepositoryProtocol) -> None:
        self._repo = repo

    async def get(self, db: Any, market_id: int, user: str) -> UserPosition | None:
        return await self._repo.get_position(db, market_id, user)

    async def require(self, db: Any, market_id: int, user: str) -> UserPosition:
        position = await self._repo.get_position(db, market_id, user)
        if position is None:
            raise PositionNotFoundError(market_id, user)
        return position

    @staticmethod
    def apply_bet(
        position: UserPosition | None,
        market_id: int,
        user: str,
        outcome: Outcome,
        amount: int,
        shares: int,
        now: datetime,
    ) -> UserPosition:
        """Return the position after one more bet; a missing position starts zeroed."""
        if position is None:
            position = UserPosition(market_id=market_id, user=user)
        if outcome == Outcome.YES:
            return replace(
                position,
                yes_amount=checked_add(position.yes_amount, amount, "yes_amount"),
                yes_shares=checked_add(position.yes_shares, shares, "yes_shares"),
                last_bet_time=now,
            )
        return replace(
            position,
            no_amount=checked_add(position.no_amount, amount, "no_amount"),
            no_shares=checked_add(position.no_shares, shares, "no_shares"),
            last_bet_time=now,
        )

    async def save(self, db: Any, position: UserPosition) -> None:
        await self._repo.put_position(db, position)

    async def mark_claimed(self, db: Any, position: UserPosition) -> UserPosition:
        if position.claimed:
            raise AlreadyClaimedError(position.market_id)
        claimed = replace(position, claimed=True)
        await self._repo.put_position(db, claimed)
        return claimed

    async def list_for_user(self, db: Any, user: str) -> list[UserPosition]:
        return await self._repo.list_by_user(db, user)

    async def list_for_market(self, db: Any, market_id: int) -> list[UserPosition]:
        return await self._repo.list_by_market(db, market_id)

    async def stake_totals(self, db: Any, market_id: int) -> StakeTotals:
        return await self._repo.stake_totals(db, market_id)
