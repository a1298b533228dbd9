"""PositionRepository — PostgreSQL implementation of PositionRepositoryProtocol.

Raw text() SQL, one row per (market_id, user_id).
"""

from decimal import Decimal
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_position.domain.models import StakeTotals, UserPosition

_POSITION_COLUMNS = """
    market_id, user_id, yes_shares, no_shares, yes_amount, no_amount,
    claimed, last_bet_time
"""

_GET_SQL = text(f"""
    SELECT {_POSITION_COLUMNS}
    FROM positions
    WHERE market_id = :market_id AND user_id = :user_id
""")

_LIST_BY_USER_SQL = text(f"""
    SELECT {_POSITION_COLUMNS}
    FROM positions
    WHERE user_id = :user_id
    ORDER BY market_id
""")

_LIST_BY_MARKET_SQL = text(f"""
    SELECT {_POSITION_COLUMNS}
    FROM positions
    WHERE market_id = :market_id
    ORDER BY user_id
""")

_UPSERT_SQL = text("""
    INSERT INTO positions (
        market_id, user_id, yes_shares, no_shares, yes_amount, no_amount,
        claimed, last_bet_time
    ) VALUES (
        :market_id, :user_id, :yes_shares, :no_shares, :yes_amount, :no_amount,
        :claimed, :last_bet_time
    )
    ON CONFLICT (market_id, user_id) DO UPDATE SET
        yes_shares = EXCLUDED.yes_shares,
        no_shares = EXCLUDED.no_shares,
        yes_amount = EXCLUDED.yes_amount,
        no_amount = EXCLUDED.no_amount,
        claimed = EXCLUDED.claimed,
        last_bet_time = EXCLUDED.last_bet_time
""")

_STAKE_TOTALS_SQL = text("""
    SELECT COALESCE(SUM(yes_amount), 0) AS yes_amount,
           COALESCE(SUM(no_amount), 0) AS no_amount,
           COALESCE(SUM(yes_shares), 0) AS yes_shares,
           COALESCE(SUM(no_shares), 0) AS no_shares
    FROM positions
    WHERE market_id = :market_id
""")


def _row_to_position(row: Any) -> UserPosition:
    return UserPosition(
        market_id=int(row.market_id),
        user=row.user_id,
        yes_shares=int(row.yes_shares),
        no_shares=int(row.no_shares),
        yes_amount=int(row.yes_amount),
        no_amount=int(row.no_amount),
        claimed=bool(row.claimed),
        last_bet_time=row.last_bet_time,
    )


class PositionRepository:
    async def get_position(
        self, db: AsyncSession, market_id: int, user: str
    ) -> UserPosition | None:
        row = (
            await db.execute(_GET_SQL, {"market_id": market_id, "user_id": user})
        ).fetchone()
        return _row_to_position(row) if row else None

    async def put_position(self, db: AsyncSession, position: UserPosition) -> None:
        await db.execute(
            _UPSERT_SQL,
            {
                "market_id": position.market_id,
                "user_id": position.user,
                "yes_shares": Decimal(position.yes_shares),
                "no_shares": Decimal(position.no_shares),
                "yes_amount": Decimal(position.yes_amount),
                "no_amount": Decimal(position.no_amount),
                "claimed": position.claimed,
                "last_bet_time": position.last_bet_time,
            },
        )

    async def list_by_user(self, db: AsyncSession, user: str) -> list[UserPosition]:
        rows = (await db.execute(_LIST_BY_USER_SQL, {"user_id": user})).fetchall()
        return [_row_to_position(r) for r in rows]

    async def list_by_market(self, db: AsyncSession, market_id: int) -> list[UserPosition]:
        rows = (
            await db.execute(_LIST_BY_MARKET_SQL, {"market_id": market_id})
        ).fetchall()
        return [_row_to_position(r) for r in rows]

    async def stake_totals(self, db: AsyncSession, market_id: int) -> StakeTotals:
        row = (await db.execute(_STAKE_TOTALS_SQL, {"market_id": market_id})).fetchone()
        return StakeTotals(
            yes_amount=int(row.yes_amount),
            no_amount=int(row.no_amount),
            yes_shares=int(row.yes_shares),
            no_shares=int(row.no_shares),
        )
