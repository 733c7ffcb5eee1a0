"""Payment initiation and confirmation.

A payment is created `pending` with a random reference id that the client
hands to the payment rail. Confirmation reconciles the rail's completion
payload against the stored record:

1. Look the record up by reference.
2. Require the payload reference to equal the stored one exactly.
3. Short-circuit records that are already settled.
4. Verify the transaction with the payment rail when credentials exist.
5. Corroborate on the ledger (advisory, never fatal).
6. Mark the payment completed and log the activity in one commit.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import pydantic
from sqlalchemy.ext.asyncio import AsyncSession

from ursol.core.config import settings
from ursol.core.exceptions import (
    AppError,
    NotFoundError,
    ReferenceMismatchError,
    ValidationError,
    VerificationMismatchError,
)
from ursol.core.locks import KeyedLocks
from ursol.database.models import Payment
from ursol.repositories.activity_repository import ActivityRepository
from ursol.repositories.payment_repository import PaymentRepository
from ursol.schemas.enums import ActivityType, PaymentStatus
from ursol.schemas.requests import InitiatePaymentRequest, PaymentConfirmationPayload
from ursol.schemas.responses import ConfirmPaymentResponse, InitiatePaymentResponse, PaymentResponse
from ursol.services.base_service import BaseService
from ursol.services.ledger.base import LedgerService
from ursol.services.verification.base import VerificationService
from ursol.utils.amounts import normalize_amount
from ursol.utils.logging import get_logger

LOGGER = get_logger(__name__)

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


def new_reference() -> str:
    """128-bit random reference rendered as 32 lowercase hex characters."""
    return uuid.uuid4().hex


def payment_lock_key(reference: str) -> str:
    return f"payment:{reference.strip().lower()}"


def parse_confirmation(payload: Dict[str, Any]) -> PaymentConfirmationPayload:
    try:
        return PaymentConfirmationPayload.model_validate(payload)
    except pydantic.ValidationError as e:
        raise ValidationError(
            "Missing reference in payload",
            original_error=e,
            details={"errors": [err["msg"] for err in e.errors()]},
        )


class PaymentService(BaseService):
    """Payment lifecycle from initiation to confirmation."""

    def __init__(
        self,
        session: AsyncSession,
        ledger: LedgerService,
        verification: VerificationService,
        locks: Optional[KeyedLocks] = None,
    ):
        super().__init__(session, locks)
        self.ledger = ledger
        self.verification = verification
        self.payment_repo = PaymentRepository(session)
        self.activity_repo = ActivityRepository(session)

    async def run(self, *args, **kwargs) -> Any:
        action = kwargs.get("action")

        if action == "list_payments":
            return await self._list_payments_logic(kwargs["user_id"])
        elif action == "initiate_payment":
            return await self._initiate_payment_logic(
                kwargs["user_id"],
                kwargs["request"],
                kwargs["default_currency"],
                kwargs.get("log_activity", False),
            )
        elif action == "confirm_payment":
            return await self._confirm_payment_logic(kwargs["payload"], kwargs["confirmation"])
        else:
            raise AppError(f"Unknown action: {action}")

    async def list_payments(self, user_id: str) -> List[PaymentResponse]:
        """Newest first."""
        return await self.execute(action="list_payments", user_id=user_id)

    async def initiate_payment(self, user_id: str, request: InitiatePaymentRequest) -> InitiatePaymentResponse:
        return await self.execute(
            action="initiate_payment", user_id=user_id, request=request, default_currency="USDC"
        )

    async def initiate_payment_legacy(
        self, user_id: str, request: InitiatePaymentRequest
    ) -> InitiatePaymentResponse:
        """Older initiation route: USDCE by default and logs the initiation."""
        return await self.execute(
            action="initiate_payment",
            user_id=user_id,
            request=request,
            default_currency="USDCE",
            log_activity=True,
        )

    async def confirm_payment(self, payload: Dict[str, Any]) -> ConfirmPaymentResponse:
        """Reconcile a completion payload with the stored payment.

        Confirmations of the same reference are serialised, and confirming an
        already completed payment returns it unchanged.
        """
        confirmation = parse_confirmation(payload)
        async with self.hold(payment_lock_key(confirmation.reference)):
            return await self.execute(
                action="confirm_payment", payload=payload, confirmation=confirmation
            )

    async def _list_payments_logic(self, user_id: str) -> List[PaymentResponse]:
        payments = await self.payment_repo.list_by_user(user_id)
        return [PaymentResponse.model_validate(p) for p in payments]

    async def _initiate_payment_logic(
        self,
        user_id: str,
        request: InitiatePaymentRequest,
        default_currency: str,
        log_activity: bool,
    ) -> InitiatePaymentResponse:
        reference = new_reference()
        amount = normalize_amount(request.amount)
        currency = request.currency or default_currency

        await self.payment_repo.create(
            user_id=user_id,
            payment_id=reference,
            type=request.type or "premium",
            amount=amount,
            currency=currency,
            status=PaymentStatus.PENDING.value,
            related_entity_id=request.related_entity_id,
            related_entity_type=request.related_entity_type.value if request.related_entity_type else None,
        )

        if log_activity:
            await self.activity_repo.record(
                user_id=user_id,
                type=ActivityType.PREMIUM_PAYMENT.value,
                description=f"Payment initiated: {amount} {currency} ({reference})",
                amount=amount,
            )

        LOGGER.info(f"Initiated payment {reference} for {amount} {currency}", extra={"user_id": user_id})
        return InitiatePaymentResponse(id=reference)

    async def _confirm_payment_logic(
        self, payload: Dict[str, Any], confirmation: PaymentConfirmationPayload
    ) -> ConfirmPaymentResponse:
        reference = confirmation.reference
        LOGGER.info("Confirming payment", extra={"reference": reference})

        payment = await self.payment_repo.get_by_reference(reference)
        if payment is None:
            LOGGER.info("Payment record not found", extra={"reference": reference})
            raise NotFoundError("Payment record not found", details={"reference": reference})

        if reference != payment.payment_id:
            LOGGER.info(
                "Payment reference mismatch",
                extra={"reference": reference, "stored_reference": payment.payment_id},
            )
            raise ReferenceMismatchError(
                "Payment reference mismatch",
                details={"payloadReference": reference, "storedReference": payment.payment_id},
            )

        if payment.status == PaymentStatus.COMPLETED.value:
            LOGGER.info("Payment already confirmed", extra={"reference": reference})
            return self._confirmed(payment, payload, "Payment already confirmed")

        if payment.status != PaymentStatus.PENDING.value:
            raise ValidationError(
                f"Payment is {payment.status} and cannot be confirmed",
                details={"reference": reference, "status": payment.status},
            )

        await self._verify_with_rail(payment, confirmation)
        ledger_tx_hash = await self._corroborate_on_ledger(payment, confirmation)

        await self.payment_repo.update(
            payment,
            status=PaymentStatus.COMPLETED.value,
            completed_at=datetime.now(timezone.utc),
            transaction_id=confirmation.transaction_id,
            ledger_tx_hash=ledger_tx_hash,
        )
        await self.activity_repo.record(
            user_id=payment.user_id,
            type=ActivityType.PREMIUM_PAYMENT.value,
            description=f"Payment completed: {payment.amount} {payment.currency} ({reference})",
            amount=payment.amount,
        )

        LOGGER.info(f"Confirmed payment {reference} successfully")
        return self._confirmed(payment, payload, "Payment confirmed successfully")

    async def _verify_with_rail(self, payment: Payment, confirmation: PaymentConfirmationPayload) -> None:
        if not confirmation.transaction_id:
            LOGGER.info("No transaction id in payload, skipping payment rail verification")
            return
        if not self.verification.has_credentials:
            LOGGER.info("Missing API credentials, skipping payment rail verification")
            return

        transaction = await self.verification.get_transaction(confirmation.transaction_id)
        details = {
            "referenceMatch": transaction.reference == payment.payment_id,
            "status": transaction.status,
        }

        if transaction.reference != payment.payment_id:
            LOGGER.info("Payment rail reported a different reference", extra={"reference": payment.payment_id})
            raise VerificationMismatchError("Transaction verification failed", details=details)

        if transaction.status == "failed":
            await self.payment_repo.update(payment, status=PaymentStatus.FAILED.value)
            await self.session.commit()
            LOGGER.info("Payment rail reported a failed transaction", extra={"reference": payment.payment_id})
            raise VerificationMismatchError("Transaction verification failed", details=details)

        LOGGER.info("Payment rail verification successful", extra={"reference": payment.payment_id})

    async def _corroborate_on_ledger(
        self, payment: Payment, confirmation: PaymentConfirmationPayload
    ) -> Optional[str]:
        try:
            await self.ledger.record_transfer(
                sender=confirmation.sender or ZERO_ADDRESS,
                recipient=settings.ledger.treasury_address,
                amount=payment.amount,
                token_address=settings.ledger.token_address_for(payment.currency),
                reference=payment.payment_id,
                success=True,
            )
            verification = await self.ledger.verify_payment_by_reference(payment.payment_id)
        except Exception:
            LOGGER.warning(
                "Ledger corroboration failed", exc_info=True, extra={"reference": payment.payment_id}
            )
            return None

        if verification.verified and verification.event is not None:
            LOGGER.info("Ledger corroboration successful", extra={"tx_hash": verification.event.tx_hash})
            return verification.event.tx_hash

        LOGGER.warning("No ledger event found for payment", extra={"reference": payment.payment_id})
        return None

    @staticmethod
    def _confirmed(payment: Payment, payload: Dict[str, Any], message: str) -> ConfirmPaymentResponse:
        return ConfirmPaymentResponse(
            success=True,
            message=message,
            payment=PaymentResponse.model_validate(payment),
            transaction=payload,
        )
