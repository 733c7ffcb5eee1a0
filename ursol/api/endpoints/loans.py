from typing import Annotated, List

from fastapi import APIRouter, Depends, Query, status

from ursol.core.dependencies import CurrentUserId, get_loan_service
from ursol.core.exceptions import AppError
from ursol.schemas.requests import BorrowRequest
from ursol.schemas.responses import LiquidationRiskResponse, LoanResponse
from ursol.services.loan_service import LoanService
from ursol.utils.logging import get_logger
from ursol.utils.responses import raise_http_error

LOGGER = get_logger(__name__)

router = APIRouter()


@router.get(
    "",
    response_model=List[LoanResponse],
    summary="List loans",
    operation_id="list_loans",
)
async def list_loans(
    user_id: CurrentUserId,
    loan_service: Annotated[LoanService, Depends(get_loan_service)],
) -> List[LoanResponse]:
    try:
        return await loan_service.list_loans(user_id)
    except AppError as e:
        raise_http_error(e)


@router.get(
    "/risk",
    response_model=LiquidationRiskResponse,
    summary="Liquidation risk for a collateral/debt pair",
    operation_id="get_liquidation_risk",
)
async def liquidation_risk(
    loan_service: Annotated[LoanService, Depends(get_loan_service)],
    collateral: Annotated[str, Query()],
    debt: Annotated[str, Query()],
) -> LiquidationRiskResponse:
    try:
        return loan_service.liquidation_risk(collateral, debt)
    except AppError as e:
        raise_http_error(e)


@router.post(
    "",
    response_model=LoanResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Borrow against a policy",
    operation_id="create_loan",
)
async def borrow(
    body: BorrowRequest,
    user_id: CurrentUserId,
    loan_service: Annotated[LoanService, Depends(get_loan_service)],
) -> LoanResponse:
    try:
        return await loan_service.borrow(user_id, body)
    except AppError as e:
        raise_http_error(e)
