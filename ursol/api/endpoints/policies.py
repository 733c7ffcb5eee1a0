from typing import Annotated, List

from fastapi import APIRouter, Depends, status

from ursol.core.dependencies import CurrentUserId, get_policy_service
from ursol.core.exceptions import AppError
from ursol.schemas.requests import MintPolicyRequest
from ursol.schemas.responses import PolicyResponse, PolicyTierResponse
from ursol.services.policy_service import PolicyService
from ursol.utils.logging import get_logger
from ursol.utils.responses import raise_http_error

LOGGER = get_logger(__name__)

router = APIRouter()


@router.get(
    "",
    response_model=List[PolicyResponse],
    summary="List the user's policies",
    operation_id="list_policies",
)
async def list_policies(
    user_id: CurrentUserId,
    policy_service: Annotated[PolicyService, Depends(get_policy_service)],
) -> List[PolicyResponse]:
    try:
        return await policy_service.list_policies(user_id)
    except AppError as e:
        raise_http_error(e)


@router.get(
    "/tiers",
    response_model=List[PolicyTierResponse],
    summary="Policy tier catalogue",
    operation_id="list_policy_tiers",
)
async def list_tiers() -> List[PolicyTierResponse]:
    return PolicyService.list_tiers()


@router.post(
    "",
    response_model=PolicyResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Mint a policy NFT",
    operation_id="mint_policy",
)
async def mint_policy(
    body: MintPolicyRequest,
    user_id: CurrentUserId,
    policy_service: Annotated[PolicyService, Depends(get_policy_service)],
) -> PolicyResponse:
    """Mint a policy and burn 5% of its coverage from the user's balance."""
    try:
        return await policy_service.mint_policy(user_id, body)
    except AppError as e:
        raise_http_error(e)
