"""Repository Protocol for user positions.

Positions are keyed by (market_id, user). Writes are staged in `db`
and become visible on db.commit().
"""

from typing import Any, Protocol

from src.pm_position.domain.models import StakeTotals, UserPosition


class PositionRepositoryProtocol(Protocol):
    async def get_position(
        self, db: Any, market_id: int, user: str
    ) -> UserPosition | None: ...

    async def put_position(self, db: Any, position: UserPosition) -> None: ...

    async def list_by_user(self, db: Any, user: str) -> list[UserPosition]: ...

    async def list_by_market(self, db: Any, market_id: int) -> list[UserPosition]: ...

    async def stake_totals(self, db: Any, market_id: int) -> StakeTotals: ...
