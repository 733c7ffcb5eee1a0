from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, Query

from ursol.core.dependencies import CurrentUserId, get_activity_service
from ursol.core.exceptions import AppError
from ursol.schemas.responses import ActivityResponse
from ursol.services.activity_service import ActivityService
from ursol.utils.responses import raise_http_error

router = APIRouter()


@router.get(
    "",
    response_model=List[ActivityResponse],
    summary="List activity, newest first",
    operation_id="list_activities",
)
async def list_activities(
    user_id: CurrentUserId,
    activity_service: Annotated[ActivityService, Depends(get_activity_service)],
    limit: Annotated[Optional[int], Query(ge=1, le=500)] = None,
) -> List[ActivityResponse]:
    try:
        return await activity_service.list_activities(user_id, limit=limit)
    except AppError as e:
        raise_http_error(e)
