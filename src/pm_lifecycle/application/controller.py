"""MarketLifecycleController — the only path that mutates markets and positions.

State machine:
    Active --resolve--> (Locked) --> Resolved     terminal
    Active --cancel---> Cancelled                 terminal

Each operation runs inside the market's critical section and follows
check-then-act: load, validate every precondition, compute every new value
(all arithmetic checked), and only then stage writes. Before commit the
market's invariants are re-verified against the ledger. Any exception rolls
the unit of work back, so nothing from a rejected operation is ever visible.
The controller holds no persistent state; the caller identity and the clock
reading are explicit inputs to every operation.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any

from src.pm_clearing.domain.invariants import verify_market_invariants
from src.pm_clearing.domain.pari_mutuel import (
    MIN_BET_AMOUNT,
    calculate_payout,
    calculate_shares,
)
from src.pm_common.amounts import checked_add, ensure_u64
from src.pm_common.datetime_utils import Clock, SystemClock
from src.pm_common.enums import TERMINAL_STATUSES, MarketStatus, Outcome
from src.pm_common.errors import (
    AlreadyClaimedError,
    BetTooSmallError,
    BettingClosedError,
    InvalidMarketStatusError,
    UnauthorizedError,
)
from src.pm_common.locks import (
    CATALOG_LOCK_KEY,
    LocalMarketLocks,
    MarketLockManager,
    market_lock_key,
)
from src.pm_market.domain.catalog import MarketCatalog
from src.pm_market.domain.models import Category, Market
from src.pm_position.domain.ledger import PositionLedger

logger = logging.getLogger(__name__)


class MarketLifecycleController:
    def __init__(
        self,
        catalog: MarketCatalog,
        ledger: PositionLedger,
        locks: MarketLockManager | None = None,
        clock: Clock | None = None,
        min_bet_amount: int = MIN_BET_AMOUNT,
    ) -> None:
        self._catalog = catalog
        self._ledger = ledger
        self._locks: MarketLockManager = locks or LocalMarketLocks()
        self._clock: Clock = clock or SystemClock()
        self._min_bet_amount = min_bet_amount

    @asynccontextmanager
    async def _transaction(self, db: Any, lock_key: str) -> AsyncIterator[None]:
        async with self._locks.hold(lock_key):
            try:
                yield
                await db.commit()
            except Exception:
                await db.rollback()
                raise

    async def _verify(self, db: Any, market: Market) -> None:
        totals = await self._ledger.stake_totals(db, market.id)
        verify_market_invariants(market, totals)

    # ------------------------------------------------------------------
    # CreateMarket
    # ------------------------------------------------------------------

    async def create_market(
        self,
        db: Any,
        caller: str,
        question: str,
        category: Category,
        end_time: datetime,
        oracle: str | None = None,
    ) -> int:
        """Create an Active market owned by caller; oracle defaults to caller. Returns the id."""
        async with self._transaction(db, CATALOG_LOCK_KEY):
            market = await self._catalog.create(
                db,
                question=question,
                category=category,
                end_time=end_time,
                creator=caller,
                oracle=oracle or caller,
                now=self._clock.now(),
            )
        logger.info(
            "Market created: id=%d creator=%s oracle=%s end_time=%s",
            market.id,
            market.creator,
            market.oracle_address,
            market.end_time.isoformat(),
        )
        return market.id

    # ------------------------------------------------------------------
    # PlaceBet
    # ------------------------------------------------------------------

    async def place_bet(
        self, db: Any, caller: str, market_id: int, outcome: Outcome, amount: int
    ) -> int:
        """Stake amount on outcome. Returns the number of shares issued."""
        async with self._transaction(db, market_lock_key(market_id)):
            now = self._clock.now()
            market = await self._catalog.get(db, market_id, for_update=True)
            if market.status != MarketStatus.ACTIVE:
                raise InvalidMarketStatusError(MarketStatus.ACTIVE.value, market.status.value)
            if now >= market.end_time:
                raise BettingClosedError(market_id)
            if amount < self._min_bet_amount:
                raise BetTooSmallError(self._min_bet_amount, amount)
            ensure_u64(amount, "bet amount")

            # Pre-bet pool and share totals price the bet.
            shares = calculate_shares(
                market.pool_for(outcome), market.shares_for(outcome), amount
            )
            updated_market = self._catalog.apply_bet(market, outcome, amount, shares)
            position = await self._ledger.get(db, market_id, caller)
            updated_position = self._ledger.apply_bet(
                position, market_id, caller, outcome, amount, shares, now
            )

            await self._catalog.save(db, updated_market)
            await self._ledger.save(db, updated_position)
            await self._verify(db, updated_market)

        logger.info(
            "Bet placed: market=%d user=%s outcome=%s amount=%d shares=%d",
            market_id,
            caller,
            outcome.value,
            amount,
            shares,
        )
        return shares

    # ------------------------------------------------------------------
    # ResolveMarket
    # ------------------------------------------------------------------

    async def resolve_market(
        self, db: Any, caller: str, market_id: int, outcome: Outcome
    ) -> Market:
        async with self._transaction(db, market_lock_key(market_id)):
            market = await self._catalog.get(db, market_id, for_update=True)
            if caller != market.oracle_address:
                raise UnauthorizedError("Only the market oracle can resolve this market")
            if market.status != MarketStatus.ACTIVE:
                raise InvalidMarketStatusError(MarketStatus.ACTIVE.value, market.status.value)

            resolved = self._catalog.resolve(market, outcome, self._clock.now())
            await self._catalog.save(db, resolved)
            await self._verify(db, resolved)

        logger.info(
            "Market resolved: id=%d outcome=%s pools=(%d, %d)",
            market_id,
            outcome.value,
            resolved.yes_pool,
            resolved.no_pool,
        )
        return resolved

    # ------------------------------------------------------------------
    # CancelMarket
    # ------------------------------------------------------------------

    async def cancel_market(self, db: Any, caller: str, market_id: int) -> Market:
        """Cancel an Active market; every position becomes refundable at its full stake."""
        async with self._transaction(db, market_lock_key(market_id)):
            market = await self._catalog.get(db, market_id, for_update=True)
            if caller not in (market.creator, market.oracle_address):
                raise UnauthorizedError("Only the market creator or oracle can cancel this market")
            if market.status != MarketStatus.ACTIVE:
                raise InvalidMarketStatusError(MarketStatus.ACTIVE.value, market.status.value)

            cancelled = self._catalog.cancel(market, self._clock.now())
            await self._catalog.save(db, cancelled)
            await self._verify(db, cancelled)

        logger.info("Market cancelled: id=%d by=%s", market_id, caller)
        return cancelled

    # ------------------------------------------------------------------
    # ClaimWinnings
    # ------------------------------------------------------------------

    async def claim_winnings(self, db: Any, caller: str, market_id: int) -> int:
        """Mark the caller's position claimed and return its entitlement.

        Resolved: pari-mutuel share of the whole pool on the winning side.
        Cancelled: refund of everything the caller staked.
        """
        async with self._transaction(db, market_lock_key(market_id)):
            market = await self._catalog.get(db, market_id, for_update=True)
            if market.status not in TERMINAL_STATUSES:
                raise InvalidMarketStatusError(
                    [s.value for s in TERMINAL_STATUSES], market.status.value
                )
            position = await self._ledger.require(db, market_id, caller)
            if position.claimed:
                raise AlreadyClaimedError(market_id)

            if market.status == MarketStatus.RESOLVED:
                winner = market.winning_outcome
                assert winner is not None, f"market {market_id} resolved without an outcome"
                payout = calculate_payout(
                    checked_add(market.yes_pool, market.no_pool, "total pool"),
                    position.shares_for(winner),
                    market.shares_for(winner),
                )
            else:
                payout = checked_add(position.yes_amount, position.no_amount, "refund")

            await self._ledger.mark_claimed(db, position)
            await self._verify(db, market)

        logger.info(
            "Winnings claimed: market=%d user=%s status=%s payout=%d",
            market_id,
            caller,
            market.status.value,
            payout,
        )
        return payout
