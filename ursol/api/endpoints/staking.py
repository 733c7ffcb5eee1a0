from typing import Annotated, List

from fastapi import APIRouter, Depends, Query, status

from ursol.core.dependencies import CurrentUserId, get_staking_service
from ursol.core.exceptions import AppError
from ursol.schemas.requests import StakeRequest
from ursol.schemas.responses import RewardProjectionResponse, StakingPositionResponse
from ursol.services.staking_service import StakingService
from ursol.utils.logging import get_logger
from ursol.utils.responses import raise_http_error

LOGGER = get_logger(__name__)

router = APIRouter()


@router.get(
    "",
    response_model=List[StakingPositionResponse],
    summary="List staking positions",
    operation_id="list_staking_positions",
)
async def list_positions(
    user_id: CurrentUserId,
    staking_service: Annotated[StakingService, Depends(get_staking_service)],
) -> List[StakingPositionResponse]:
    try:
        return await staking_service.list_positions(user_id)
    except AppError as e:
        raise_http_error(e)


@router.get(
    "/projection",
    response_model=RewardProjectionResponse,
    summary="Project staking rewards",
    operation_id="project_staking_rewards",
)
async def project_rewards(
    staking_service: Annotated[StakingService, Depends(get_staking_service)],
    amount: Annotated[str, Query()],
    apy: Annotated[str, Query()],
    days: Annotated[int, Query(ge=0)] = 365,
) -> RewardProjectionResponse:
    try:
        return staking_service.project_rewards(amount, apy, days)
    except AppError as e:
        raise_http_error(e)


@router.post(
    "",
    response_model=StakingPositionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Stake tokens",
    operation_id="stake_tokens",
)
async def stake(
    body: StakeRequest,
    user_id: CurrentUserId,
    staking_service: Annotated[StakingService, Depends(get_staking_service)],
) -> StakingPositionResponse:
    try:
        return await staking_service.stake(user_id, body)
    except AppError as e:
        raise_http_error(e)


@router.post(
    "/{position_id}/claim",
    response_model=StakingPositionResponse,
    summary="Claim pending staking rewards",
    operation_id="claim_staking_rewards",
)
async def claim_rewards(
    position_id: str,
    user_id: CurrentUserId,
    staking_service: Annotated[StakingService, Depends(get_staking_service)],
) -> StakingPositionResponse:
    """Credit the pending rewards to the balance and reset them to zero."""
    try:
        return await staking_service.claim_rewards(user_id, position_id)
    except AppError as e:
        raise_http_error(e)
