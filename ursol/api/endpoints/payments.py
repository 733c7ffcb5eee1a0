from typing import Annotated, List

from fastapi import APIRouter, Depends

from ursol.core.dependencies import CurrentUserId, get_payment_service
from ursol.core.exceptions import AppError
from ursol.schemas.requests import ConfirmPaymentRequest, InitiatePaymentRequest
from ursol.schemas.responses import ConfirmPaymentResponse, InitiatePaymentResponse, PaymentResponse
from ursol.services.payment_service import PaymentService
from ursol.utils.logging import get_logger
from ursol.utils.responses import raise_http_error

LOGGER = get_logger(__name__)

router = APIRouter()


@router.get(
    "/payments",
    response_model=List[PaymentResponse],
    summary="List payments, newest first",
    operation_id="list_payments",
)
async def list_payments(
    user_id: CurrentUserId,
    payment_service: Annotated[PaymentService, Depends(get_payment_service)],
) -> List[PaymentResponse]:
    try:
        return await payment_service.list_payments(user_id)
    except AppError as e:
        raise_http_error(e)


@router.post(
    "/initiate-payment",
    response_model=InitiatePaymentResponse,
    summary="Create a pending payment and return its reference",
    operation_id="initiate_payment",
)
async def initiate_payment(
    body: InitiatePaymentRequest,
    user_id: CurrentUserId,
    payment_service: Annotated[PaymentService, Depends(get_payment_service)],
) -> InitiatePaymentResponse:
    try:
        return await payment_service.initiate_payment(user_id, body)
    except AppError as e:
        raise_http_error(e)


@router.post(
    "/payments/initiate",
    response_model=InitiatePaymentResponse,
    summary="Create a pending payment (legacy route)",
    operation_id="initiate_payment_legacy",
)
async def initiate_payment_legacy(
    body: InitiatePaymentRequest,
    user_id: CurrentUserId,
    payment_service: Annotated[PaymentService, Depends(get_payment_service)],
) -> InitiatePaymentResponse:
    try:
        return await payment_service.initiate_payment_legacy(user_id, body)
    except AppError as e:
        raise_http_error(e)


@router.post(
    "/confirm-payment",
    response_model=ConfirmPaymentResponse,
    summary="Confirm a payment reported by the wallet",
    operation_id="confirm_payment",
)
async def confirm_payment(
    body: ConfirmPaymentRequest,
    payment_service: Annotated[PaymentService, Depends(get_payment_service)],
) -> ConfirmPaymentResponse:
    """Reconcile the wallet's completion payload with the initiated payment."""
    try:
        return await payment_service.confirm_payment(body.payload)
    except AppError as e:
        LOGGER.info(f"Payment confirmation rejected: {e.error_code}", extra={"detail": e.details})
        raise_http_error(e)
