from typing import Annotated, List

from fastapi import APIRouter, Depends, status

from ursol.core.dependencies import CurrentUserId, get_claim_service
from ursol.core.exceptions import AppError
from ursol.schemas.requests import ClaimRequest
from ursol.schemas.responses import ClaimResponse
from ursol.services.claim_service import ClaimService
from ursol.utils.responses import raise_http_error

router = APIRouter()


@router.get(
    "",
    response_model=List[ClaimResponse],
    summary="List claims",
    operation_id="list_claims",
)
async def list_claims(
    user_id: CurrentUserId,
    claim_service: Annotated[ClaimService, Depends(get_claim_service)],
) -> List[ClaimResponse]:
    try:
        return await claim_service.list_claims(user_id)
    except AppError as e:
        raise_http_error(e)


@router.post(
    "",
    response_model=ClaimResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit a claim",
    operation_id="submit_claim",
)
async def submit_claim(
    body: ClaimRequest,
    user_id: CurrentUserId,
    claim_service: Annotated[ClaimService, Depends(get_claim_service)],
) -> ClaimResponse:
    try:
        return await claim_service.submit_claim(user_id, body)
    except AppError as e:
        raise_http_error(e)
