from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ursol.database.models import Policy
from ursol.repositories.base_repository import BaseRepository


class PolicyRepository(BaseRepository[Policy]):
    """Repository for NFT-backed policies."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, Policy)

    async def exists_token_id(self, token_id: int) -> bool:
        result = await self.session.execute(
            select(Policy.id).where(Policy.token_id == token_id)
        )
        return result.first() is not None
