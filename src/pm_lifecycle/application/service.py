# src/pm_lifecycle/application/service.py
from config.settings import settings
from src.pm_common.datetime_utils import SystemClock
from src.pm_common.locks import build_lock_manager
from src.pm_lifecycle.application.controller import MarketLifecycleController
from src.pm_market.domain.catalog import MarketCatalog
from src.pm_market.infrastructure.factory import get_market_repository
from src.pm_position.domain.ledger import PositionLedger
from src.pm_position.infrastructure.factory import get_position_repository

_controller: MarketLifecycleController | None = None


def get_lifecycle_controller() -> MarketLifecycleController:
    global _controller  # noqa: PLW0603
    if _controller is None:
        _controller = MarketLifecycleController(
            catalog=MarketCatalog(get_market_repository()),
            ledger=PositionLedger(get_position_repository()),
            locks=build_lock_manager(),
            clock=SystemClock(),
            min_bet_amount=settings.MIN_BET_AMOUNT,
        )
    return _controller
