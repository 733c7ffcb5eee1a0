from typing import Annotated

from fastapi import APIRouter, Depends

from ursol.core.dependencies import CurrentUserId, get_account_service
from ursol.core.exceptions import AppError
from ursol.schemas.requests import BalanceUpdateRequest
from ursol.schemas.responses import UserResponse
from ursol.services.account_service import AccountService
from ursol.utils.logging import get_logger
from ursol.utils.responses import raise_http_error

LOGGER = get_logger(__name__)

router = APIRouter()


@router.get(
    "",
    response_model=UserResponse,
    summary="Get the current user",
    operation_id="get_user",
)
async def get_user(
    user_id: CurrentUserId,
    account_service: Annotated[AccountService, Depends(get_account_service)],
) -> UserResponse:
    try:
        return await account_service.get_user(user_id)
    except AppError as e:
        raise_http_error(e)


@router.patch(
    "/balance",
    response_model=UserResponse,
    summary="Add to, subtract from or set the token balance",
    operation_id="update_user_balance",
)
async def update_balance(
    body: BalanceUpdateRequest,
    user_id: CurrentUserId,
    account_service: Annotated[AccountService, Depends(get_account_service)],
) -> UserResponse:
    """Subtraction never takes the balance below zero."""
    try:
        return await account_service.update_balance(user_id, body.amount, body.operation)
    except AppError as e:
        raise_http_error(e)
