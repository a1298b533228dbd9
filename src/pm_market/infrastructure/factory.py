from config.settings import settings
from src.pm_market.domain.repository import MarketRepositoryProtocol
from src.pm_market.infrastructure.memory import InMemoryMarketRepository
from src.pm_market.infrastructure.persistence import MarketRepository


def get_market_repository() -> MarketRepositoryProtocol:
    if settings.STORE_BACKEND == "memory":
        return InMemoryMarketRepository()
    return MarketRepository()
