from config.settings import settings
from src.pm_position.domain.repository import PositionRepositoryProtocol
from src.pm_position.infrastructure.memory import InMemoryPositionRepository
from src.pm_position.infrastructure.persistence import PositionRepository


def get_position_repository() -> PositionRepositoryProtocol:
    if settings.STORE_BACKEND == "memory":
        return InMemoryPositionRepository()
    return PositionRepository()
