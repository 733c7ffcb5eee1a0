from typing import Annotated

from fastapi import APIRouter, Depends

from ursol.core.dependencies import CurrentUserId, get_dashboard_service
from ursol.core.exceptions import AppError
from ursol.schemas.responses import DashboardResponse
from ursol.services.dashboard_service import DashboardService
from ursol.utils.responses import raise_http_error

router = APIRouter()


@router.get(
    "/dashboard",
    response_model=DashboardResponse,
    summary="Portfolio totals and recent activity",
    operation_id="get_dashboard",
)
async def dashboard(
    user_id: CurrentUserId,
    dashboard_service: Annotated[DashboardService, Depends(get_dashboard_service)],
) -> DashboardResponse:
    try:
        return await dashboard_service.dashboard(user_id)
    except AppError as e:
        raise_http_error(e)
