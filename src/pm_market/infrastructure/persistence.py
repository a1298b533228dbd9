"""MarketRepository — PostgreSQL implementation of MarketRepositoryProtocol.

All queries use raw text() SQL (no ORM).
asyncpg NULL parameter pattern: CAST(:param AS TYPE) IS NULL required for None values.
u64 amounts live in NUMERIC(20, 0) columns; asyncpg hands them back as Decimal.
"""

import json
from decimal import Decimal
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_common.enums import CategoryKind, MarketSort, MarketStatus, Outcome
from src.pm_market.domain.models import Market, category_from_dict, category_to_dict

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_MARKET_COLUMNS = """
    id, question, category_kind, category_data, end_time,
    yes_pool, no_pool, total_yes_shares, total_no_shares,
    status, winning_outcome, creator, oracle_address,
    created_at, resolved_at
"""

_GET_MARKET_SQL = text(f"SELECT {_MARKET_COLUMNS} FROM markets WHERE id = :market_id")

_GET_MARKET_FOR_UPDATE_SQL = text(
    f"SELECT {_MARKET_COLUMNS} FROM markets WHERE id = :market_id FOR UPDATE"
)

_UPSERT_MARKET_SQL = text("""
    INSERT INTO markets (
        id, question, category_kind, category_data, end_time,
        yes_pool, no_pool, total_yes_shares, total_no_shares,
        status, winning_outcome, creator, oracle_address,
        created_at, resolved_at
    ) VALUES (
        :id, :question, :category_kind, :category_data, :end_time,
        :yes_pool, :no_pool, :total_yes_shares, :total_no_shares,
        :status, :winning_outcome, :creator, :oracle_address,
        :created_at, :resolved_at
    )
    ON CONFLICT (id) DO UPDATE SET
        yes_pool = EXCLUDED.yes_pool,
        no_pool = EXCLUDED.no_pool,
        total_yes_shares = EXCLUDED.total_yes_shares,
        total_no_shares = EXCLUDED.total_no_shares,
        status = EXCLUDED.status,
        winning_outcome = EXCLUDED.winning_outcome,
        resolved_at = EXCLUDED.resolved_at
""")

_GET_NEXT_ID_SQL = text("SELECT next_id FROM market_sequence WHERE name = 'markets' FOR UPDATE")

_SET_NEXT_ID_SQL = text("UPDATE market_sequence SET next_id = :next_id WHERE name = 'markets'")

_FILTER_SQL = """
    WHERE
        (CAST(:status AS TEXT) IS NULL OR status = CAST(:status AS TEXT))
        AND (CAST(:category AS TEXT) IS NULL OR category_kind = CAST(:category AS TEXT))
"""

# Whitelisted ORDER BY clauses; id breaks ties so offsets are stable.
_ORDER_BY = {
    MarketSort.ENDING_SOON: "end_time ASC, id ASC",
    MarketSort.NEWEST: "created_at DESC, id DESC",
    MarketSort.POPULAR: "(yes_pool + no_pool) DESC, id ASC",
    MarketSort.ALPHABETICAL: "question ASC, id ASC",
}

_LIST_MARKETS_SQL = {
    sort: text(
        f"SELECT {_MARKET_COLUMNS} FROM markets {_FILTER_SQL}"
        f" ORDER BY {order} LIMIT :limit OFFSET :offset"
    )
    for sort, order in _ORDER_BY.items()
}

_COUNT_MARKETS_SQL = text(f"SELECT COUNT(*) FROM markets {_FILTER_SQL}")

# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------


def _load_json(value: Any) -> dict[str, Any]:
    if isinstance(value, str):
        return json.loads(value)  # type: ignore[no-any-return]
    return dict(value)


def _row_to_market(row: Any) -> Market:
    category_data = _load_json(row.category_data)
    return Market(
        id=int(row.id),
        question=row.question,
        category=category_from_dict({"kind": row.category_kind, **category_data}),
        end_time=row.end_time,
        yes_pool=int(row.yes_pool),
        no_pool=int(row.no_pool),
        total_yes_shares=int(row.total_yes_shares),
        total_no_shares=int(row.total_no_shares),
        status=MarketStatus(row.status),
        winning_outcome=Outcome(row.winning_outcome) if row.winning_outcome else None,
        creator=row.creator,
        oracle_address=row.oracle_address,
        created_at=row.created_at,
        resolved_at=row.resolved_at,
    )


def _market_params(market: Market) -> dict[str, Any]:
    category_data = category_to_dict(market.category)
    category_kind = category_data.pop("kind")
    return {
        "id": market.id,
        "question": market.question,
        "category_kind": category_kind,
        "category_data": json.dumps(category_data),
        "end_time": market.end_time,
        "yes_pool": Decimal(market.yes_pool),
        "no_pool": Decimal(market.no_pool),
        "total_yes_shares": Decimal(market.total_yes_shares),
        "total_no_shares": Decimal(market.total_no_shares),
        "status": market.status.value,
        "winning_outcome": market.winning_outcome.value if market.winning_outcome else None,
        "creator": market.creator,
        "oracle_address": market.oracle_address,
        "created_at": market.created_at,
        "resolved_at": market.resolved_at,
    }


def _filter_params(
    status: MarketStatus | None, category: CategoryKind | None
) -> dict[str, Any]:
    return {
        "status": status.value if status else None,
        "category": category.value if category else None,
    }


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class MarketRepository:
    """Concrete repository — writes join the caller's transaction, caller commits."""

    async def get_market(
        self, db: AsyncSession, market_id: int, for_update: bool = False
    ) -> Market | None:
        sql = _GET_MARKET_FOR_UPDATE_SQL if for_update else _GET_MARKET_SQL
        result = await db.execute(sql, {"market_id": market_id})
        row = result.fetchone()
        return _row_to_market(row) if row else None

    async def put_market(self, db: AsyncSession, market: Market) -> None:
        await db.execute(_UPSERT_MARKET_SQL, _market_params(market))

    async def get_next_id(self, db: AsyncSession) -> int:
        result = await db.execute(_GET_NEXT_ID_SQL)
        return int(result.scalar_one())

    async def set_next_id(self, db: AsyncSession, next_id: int) -> None:
        await db.execute(_SET_NEXT_ID_SQL, {"next_id": next_id})

    async def list_markets(
        self,
        db: AsyncSession,
        status: MarketStatus | None,
        category: CategoryKind | None,
        sort: MarketSort,
        limit: int,
        offset: int,
    ) -> list[Market]:
        result = await db.execute(
            _LIST_MARKETS_SQL[sort],
            {**_filter_params(status, category), "limit": limit, "offset": offset},
        )
        return [_row_to_market(row) for row in result.fetchall()]

    async def count_markets(
        self,
        db: AsyncSession,
        status: MarketStatus | None,
        category: CategoryKind | None,
    ) -> int:
        result = await db.execute(_COUNT_MARKETS_SQL, _filter_params(status, category))
        return int(result.scalar_one())
