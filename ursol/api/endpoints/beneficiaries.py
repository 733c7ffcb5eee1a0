from typing import Annotated, List

from fastapi import APIRouter, Depends

from ursol.core.dependencies import CurrentUserId, get_beneficiary_service
from ursol.core.exceptions import AppError
from ursol.schemas.requests import BeneficiaryRequest
from ursol.schemas.responses import BeneficiaryResponse
from ursol.services.beneficiary_service import BeneficiaryService
from ursol.utils.responses import raise_http_error

router = APIRouter()


@router.get(
    "",
    response_model=List[BeneficiaryResponse],
    summary="Get the beneficiary designation",
    operation_id="list_beneficiaries",
)
async def list_beneficiaries(
    user_id: CurrentUserId,
    beneficiary_service: Annotated[BeneficiaryService, Depends(get_beneficiary_service)],
) -> List[BeneficiaryResponse]:
    try:
        return await beneficiary_service.list_beneficiaries(user_id)
    except AppError as e:
        raise_http_error(e)


@router.post(
    "",
    response_model=BeneficiaryResponse,
    summary="Save the beneficiary designation",
    operation_id="save_beneficiary",
)
async def save_beneficiary(
    body: BeneficiaryRequest,
    user_id: CurrentUserId,
    beneficiary_service: Annotated[BeneficiaryService, Depends(get_beneficiary_service)],
) -> BeneficiaryResponse:
    """Replaces any existing designation for the user."""
    try:
        return await beneficiary_service.save_beneficiary(user_id, body)
    except AppError as e:
        raise_http_error(e)
