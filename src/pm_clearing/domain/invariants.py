"""Market invariant verification after each mutating operation."""

import logging

from src.pm_common.enums import TERMINAL_STATUSES, MarketStatus
from src.pm_market.domain.models import Market
from src.pm_position.domain.models import StakeTotals

logger = logging.getLogger(__name__)


def verify_market_invariants(market: Market, totals: StakeTotals) -> None:
    """Verify critical market invariants. Raises AssertionError if violated.

    INV-1: yes_pool / no_pool == sum of yes_amount / no_amount over positions
    INV-2: total_*_shares == sum of *_shares over positions
    INV-3: total_*_shares >= *_pool (share price never above 1)
    INV-4: winning_outcome set iff Resolved; resolved_at set iff Resolved/Cancelled
    INV-5: Locked is never stored
    """
    mid = market.id

    assert market.yes_pool == totals.yes_amount and market.no_pool == totals.no_amount, (
        f"INV-1 violated: market={mid} pools=({market.yes_pool}, {market.no_pool})"
        f" != stakes=({totals.yes_amount}, {totals.no_amount})"
    )
    assert (
        market.total_yes_shares == totals.yes_shares
        and market.total_no_shares == totals.no_shares
    ), (
        f"INV-2 violated: market={mid} shares=({market.total_yes_shares}, {market.total_no_shares})"
        f" != position shares=({totals.yes_shares}, {totals.no_shares})"
    )
    assert market.total_yes_shares >= market.yes_pool and market.total_no_shares >= market.no_pool, (
        f"INV-3 violated: market={mid} shares below stake"
    )
    assert (market.winning_outcome is not None) == (market.status == MarketStatus.RESOLVED), (
        f"INV-4 violated: market={mid} status={market.status.value}"
        f" winning_outcome={market.winning_outcome}"
    )
    assert (market.resolved_at is not None) == (market.status in TERMINAL_STATUSES), (
        f"INV-4 violated: market={mid} status={market.status.value} resolved_at={market.resolved_at}"
    )
    assert market.status != MarketStatus.LOCKED, f"INV-5 violated: market={mid} stored as Locked"

    logger.debug(
        "Invariants OK: market=%s, pools=(%d, %d), shares=(%d, %d)",
        mid,
        market.yes_pool,
        market.no_pool,
        market.total_yes_shares,
        market.total_no_shares,
    )
