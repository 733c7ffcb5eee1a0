from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from ursol.database.models import Loan
from ursol.repositories.base_repository import BaseRepository


class LoanRepository(BaseRepository[Loan]):
    """Repository for loans drawn against policies."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, Loan)

    async def list_active(self, user_id: str) -> List[Loan]:
        return await self.list_by_user(user_id, filters={"is_active": True})
