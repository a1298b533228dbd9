"""In-memory PositionRepositoryProtocol backed by a MemorySession.

Positions live in one table per market ("positions:<id>", keyed by user), so
per-market reads touch only that market's rows. "user_markets:<user>" records
which markets a user holds a position in.
"""

from src.pm_common.memory_store import MemorySession
from src.pm_position.domain.models import StakeTotals, UserPosition


def _market_table(market_id: int) -> str:
    return f"positions:{market_id}"


def _user_table(user: str) -> str:
    return f"user_markets:{user}"


class InMemoryPositionRepository:
    async def get_position(
        self, db: MemorySession, market_id: int, user: str
    ) -> UserPosition | None:
        return db.get(_market_table(market_id), user)  # type: ignore[no-any-return]

    async def put_position(self, db: MemorySession, position: UserPosition) -> None:
        db.put(_market_table(position.market_id), position.user, position)
        db.put(_user_table(position.user), position.market_id, position.market_id)

    async def list_by_user(self, db: MemorySession, user: str) -> list[UserPosition]:
        return [
            db.get(_market_table(market_id), user)
            for market_id in sorted(db.scan(_user_table(user)))
        ]

    async def list_by_market(self, db: MemorySession, market_id: int) -> list[UserPosition]:
        return sorted(db.scan(_market_table(market_id)), key=lambda p: p.user)

    async def stake_totals(self, db: MemorySession, market_id: int) -> StakeTotals:
        totals = StakeTotals()
        for p in db.scan(_market_table(market_id)):
            totals.yes_amount += p.yes_amount
            totals.no_amount += p.no_amount
            totals.yes_shares += p.yes_shares
            totals.no_shares += p.no_shares
        return totals
