from sqlalchemy.ext.asyncio import AsyncSession

from ursol.database.models import StakingPosition
from ursol.repositories.base_repository import BaseRepository


class StakingRepository(BaseRepository[StakingPosition]):
    """Repository for staking positions."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, StakingPosition)
