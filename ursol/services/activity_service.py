from typing import Any, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ursol.core.exceptions import AppError
from ursol.repositories.activity_repository import ActivityRepository
from ursol.schemas.responses import ActivityResponse
from ursol.services.base_service import BaseService


class ActivityService(BaseService):
    """Read side of the activity log."""

    def __init__(self, session: AsyncSession):
        super().__init__(session)
        self.activity_repo = ActivityRepository(session)

    async def run(self, *args, **kwargs) -> Any:
        action = kwargs.get("action")

        if action == "list_activities":
            activities = await self.activity_repo.list_by_user(kwargs["user_id"], limit=kwargs.get("limit"))
            return [ActivityResponse.model_validate(a) for a in activities]
        else:
            raise AppError(f"Unknown action: {action}")

    async def list_activities(self, user_id: str, limit: Optional[int] = None) -> List[ActivityResponse]:
        """Newest first."""
        return await self.execute(action="list_activities", user_id=user_id, limit=limit)
