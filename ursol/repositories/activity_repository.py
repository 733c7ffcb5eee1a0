from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ursol.database.models import Activity
from ursol.repositories.base_repository import BaseRepository


class ActivityRepository(BaseRepository[Activity]):
    """Append-only activity log. Lists newest first."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, Activity)

    def _apply_ordering(self, query):
        return query.order_by(Activity.created_at.desc())

    async def record(
        self,
        user_id: str,
        type: str,
        description: str,
        amount: Optional[str] = None,
    ) -> Activity:
        return await self.create(
            user_id=user_id, type=type, description=description, amount=amount
        )
