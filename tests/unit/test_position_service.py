# tests/unit/test_position_service.py
"""Unit tests for PositionQueryService using mock repositories."""
from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.pm_common.enums import Outcome
from src.pm_common.errors import MarketNotFoundError, PositionNotFoundError
from src.pm_market.domain.models import BinaryCategory, Market
from src.pm_position.application.service import PositionQueryService
from src.pm_position.domain.models import UserPosition

NOW = datetime(2026, 1, 1, tzinfo=UTC)


def _market() -> Market:
    return Market(
        id=1, question="Will it rain tomorrow?", category=BinaryCategory(metadata=""),
        end_time=NOW, creator="c", oracle_address="o", created_at=NOW,
        yes_pool=100, no_pool=300, total_yes_shares=100_000, total_no_shares=300_000,
    )


@pytest.fixture
def db():
    return MagicMock()


@pytest.fixture
def repos():
    return MagicMock(), MagicMock()


class TestGetPosition:
    @pytest.mark.asyncio
    async def test_found(self, db, repos):
        pos_repo, market_repo = repos
        pos_repo.get_position = AsyncMock(return_value=UserPosition(
            market_id=1, user="A", yes_shares=100_000, yes_amount=100, last_bet_time=NOW,
        ))
        svc = PositionQueryService(repo=pos_repo, market_repo=market_repo)

        resp = await svc.get_user_position(db, 1, "A")

        assert resp.total_amount == 100
        assert resp.claimed is False
        assert resp.last_bet_time == NOW.isoformat()

    @pytest.mark.asyncio
    async def test_missing(self, db, repos):
        pos_repo, market_repo = repos
        pos_repo.get_position = AsyncMock(return_value=None)
        svc = PositionQueryService(repo=pos_repo, market_repo=market_repo)
        with pytest.raises(PositionNotFoundError):
            await svc.get_user_position(db, 1, "A")


class TestPotentialPayout:
    @pytest.mark.asyncio
    async def test_winning_side(self, db, repos):
        pos_repo, market_repo = repos
        market_repo.get_market = AsyncMock(return_value=_market())
        pos_repo.get_position = AsyncMock(return_value=UserPosition(
            market_id=1, user="A", yes_shares=100_000, yes_amount=100,
        ))
        svc = PositionQueryService(repo=pos_repo, market_repo=market_repo)

        resp = await svc.get_potential_payout(db, 1, "A", Outcome.YES)
        assert (resp.shares, resp.potential_payout) == (100_000, 400)

        resp = await svc.get_potential_payout(db, 1, "A", Outcome.NO)
        assert (resp.shares, resp.potential_payout) == (0, 0)

    @pytest.mark.asyncio
    async def test_unknown_market(self, db, repos):
        pos_repo, market_repo = repos
        market_repo.get_market = AsyncMock(return_value=None)
        svc = PositionQueryService(repo=pos_repo, market_repo=market_repo)
        with pytest.raises(MarketNotFoundError):
            await svc.get_potential_payout(db, 1, "A", Outcome.YES)


class TestListPositions:
    @pytest.mark.asyncio
    async def test_lists_with_total(self, db, repos):
        pos_repo, market_repo = repos
        pos_repo.list_by_user = AsyncMock(return_value=[
            UserPosition(market_id=1, user="A", no_amount=5, no_shares=5000),
            UserPosition(market_id=2, user="A", yes_amount=1, yes_shares=1000, claimed=True),
        ])
        svc = PositionQueryService(repo=pos_repo, market_repo=market_repo)

        resp = await svc.list_user_positions(db, "A")

        assert resp.total == 2
        assert [p.market_id for p in resp.items] == [1, 2]
        assert resp.items[1].claimed is True
