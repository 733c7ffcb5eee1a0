from sqlalchemy.ext.asyncio import AsyncSession

from ursol.database.models import User
from ursol.repositories.base_repository import BaseRepository


class UserRepository(BaseRepository[User]):
    """Repository for wallet users."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, User)

    async def set_balance(self, user: User, balance: str) -> User:
        return await self.update(user, ursol_balance=balance)

    async def mark_verified(self, user: User) -> User:
        return await self.update(user, is_world_id_verified=True)
