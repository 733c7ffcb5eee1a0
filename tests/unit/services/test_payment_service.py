"""Unit tests for payment initiation and reconciliation."""

import re
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from ursol.core.exceptions import (
    ExternalVerificationFailedError,
    NotFoundError,
    ReferenceMismatchError,
    ValidationError,
    VerificationMismatchError,
)
from ursol.repositories.activity_repository import ActivityRepository
from ursol.repositories.payment_repository import PaymentRepository
from ursol.schemas.requests import InitiatePaymentRequest
from ursol.services.ledger.simulated import SimulatedLedger
from ursol.services.payment_service import PaymentService, new_reference
from ursol.services.verification.base import RailTransaction

USER_ID = "demo-user-1"


@pytest.fixture
def payment_service(db_session: AsyncSession, ledger: SimulatedLedger, mock_verification: AsyncMock, locks) -> PaymentService:
    return PaymentService(db_session, ledger, mock_verification, locks)


async def _payment_activities(session: AsyncSession, reference: str) -> list:
    activities = await ActivityRepository(session).list_by_user(USER_ID)
    return [a for a in activities if reference in a.description]


def test_new_reference_is_32_hex():
    assert re.fullmatch(r"[0-9a-f]{32}", new_reference())
    assert new_reference() != new_reference()


@pytest.mark.asyncio
async def test_initiate_records_pending(payment_service: PaymentService, db_session: AsyncSession):
    result = await payment_service.initiate_payment(
        USER_ID, InitiatePaymentRequest(amount="100", currency="USDC")
    )

    payment = await PaymentRepository(db_session).get_by_reference(result.id)
    assert payment is not None
    assert payment.status == "pending"
    assert payment.amount == "100"
    assert payment.completed_at is None


@pytest.mark.asyncio
async def test_initiate_defaults(payment_service: PaymentService, db_session: AsyncSession):
    result = await payment_service.initiate_payment(USER_ID, InitiatePaymentRequest())

    payment = await PaymentRepository(db_session).get_by_reference(result.id)
    assert payment.type == "premium"
    assert payment.amount == "0"
    assert payment.currency == "USDC"
    assert await _payment_activities(db_session, result.id) == []


@pytest.mark.asyncio
async def test_confirm_completes_payment(payment_service: PaymentService, db_session: AsyncSession):
    reference = (await payment_service.initiate_payment(USER_ID, InitiatePaymentRequest(amount="100"))).id

    result = await payment_service.confirm_payment({"reference": reference})

    assert result.success is True
    assert result.payment.status == "completed"
    assert result.payment.completed_at is not None
    assert result.payment.ledger_tx_hash is not None

    activities = await _payment_activities(db_session, reference)
    assert len(activities) == 1
    assert activities[0].type == "premium_payment"
    assert activities[0].amount == "100"


@pytest.mark.asyncio
async def test_confirm_unknown_reference(payment_service: PaymentService):
    with pytest.raises(NotFoundError):
        await payment_service.confirm_payment({"reference": "f" * 32})


@pytest.mark.asyncio
async def test_confirm_missing_reference(payment_service: PaymentService):
    with pytest.raises(ValidationError):
        await payment_service.confirm_payment({"transaction_id": "tx-1"})


@pytest.mark.asyncio
async def test_confirm_reference_mismatch_leaves_status(payment_service: PaymentService, db_session: AsyncSession):
    reference = (await payment_service.initiate_payment(USER_ID, InitiatePaymentRequest(amount="5"))).id

    with pytest.raises(ReferenceMismatchError) as exc_info:
        await payment_service.confirm_payment({"reference": f"  {reference}"})

    assert exc_info.value.details["storedReference"] == reference
    payment = await PaymentRepository(db_session).get_by_reference(reference)
    assert payment.status == "pending"


@pytest.mark.asyncio
async def test_confirm_is_idempotent(payment_service: PaymentService, db_session: AsyncSession):
    reference = (await payment_service.initiate_payment(USER_ID, InitiatePaymentRequest(amount="42"))).id
    first = await payment_service.confirm_payment({"reference": reference})

    second = await payment_service.confirm_payment({"reference": reference})

    assert second.payment.completed_at == first.payment.completed_at
    assert second.message == "Payment already confirmed"
    assert len(await _payment_activities(db_session, reference)) == 1


@pytest.mark.asyncio
async def test_confirm_skips_rail_without_credentials(payment_service: PaymentService, mock_verification: AsyncMock):
    reference = (await payment_service.initiate_payment(USER_ID, InitiatePaymentRequest(amount="1"))).id

    await payment_service.confirm_payment({"reference": reference, "transaction_id": "tx-9"})

    mock_verification.get_transaction.assert_not_awaited()


@pytest.mark.asyncio
async def test_confirm_rail_reference_mismatch(
    payment_service: PaymentService, mock_verification: AsyncMock, db_session: AsyncSession
):
    reference = (await payment_service.initiate_payment(USER_ID, InitiatePaymentRequest(amount="1"))).id
    mock_verification.has_credentials = True
    mock_verification.get_transaction.return_value = RailTransaction(
        transaction_id="tx-1", reference="someone-else", status="mined"
    )

    with pytest.raises(VerificationMismatchError) as exc_info:
        await payment_service.confirm_payment({"reference": reference, "transaction_id": "tx-1"})

    assert exc_info.value.details["referenceMatch"] is False
    payment = await PaymentRepository(db_session).get_by_reference(reference)
    assert payment.status == "pending"


@pytest.mark.asyncio
async def test_confirm_rail_failed_marks_payment_failed(
    payment_service: PaymentService, mock_verification: AsyncMock, db_session: AsyncSession
):
    reference = (await payment_service.initiate_payment(USER_ID, InitiatePaymentRequest(amount="1"))).id
    mock_verification.has_credentials = True
    mock_verification.get_transaction.return_value = RailTransaction(
        transaction_id="tx-1", reference=reference, status="failed"
    )

    with pytest.raises(VerificationMismatchError):
        await payment_service.confirm_payment({"reference": reference, "transaction_id": "tx-1"})

    payment = await PaymentRepository(db_session).get_by_reference(reference)
    assert payment.status == "failed"
    assert await _payment_activities(db_session, reference) == []

    # A failed payment cannot be confirmed afterwards
    with pytest.raises(ValidationError):
        await payment_service.confirm_payment({"reference": reference})


@pytest.mark.asyncio
async def test_confirm_rail_http_failure(
    payment_service: PaymentService, mock_verification: AsyncMock, db_session: AsyncSession
):
    reference = (await payment_service.initiate_payment(USER_ID, InitiatePaymentRequest(amount="1"))).id
    mock_verification.has_credentials = True
    mock_verification.get_transaction.side_effect = ExternalVerificationFailedError("boom")

    with pytest.raises(ExternalVerificationFailedError):
        await payment_service.confirm_payment({"reference": reference, "transaction_id": "tx-1"})

    payment = await PaymentRepository(db_session).get_by_reference(reference)
    assert payment.status == "pending"


@pytest.mark.asyncio
async def test_ledger_errors_do_not_fail_confirmation(
    db_session: AsyncSession, mock_verification: AsyncMock, locks
):
    ledger = AsyncMock(spec=SimulatedLedger)
    ledger.record_transfer.side_effect = RuntimeError("ledger down")
    service = PaymentService(db_session, ledger, mock_verification, locks)
    reference = (await service.initiate_payment(USER_ID, InitiatePaymentRequest(amount="3"))).id

    result = await service.confirm_payment({"reference": reference})

    assert result.payment.status == "completed"
    assert result.payment.ledger_tx_hash is None


@pytest.mark.asyncio
async def test_ledger_transfer_uses_payment_token(
    payment_service: PaymentService, ledger: SimulatedLedger
):
    reference = (
        await payment_service.initiate_payment(USER_ID, InitiatePaymentRequest(amount="10", currency="USDC"))
    ).id

    await payment_service.confirm_payment({"reference": reference, "from": "0xsender"})

    verification = await ledger.verify_payment_by_reference(reference)
    assert verification.verified is True
    assert verification.event.sender == "0xsender"
    assert verification.event.token_address == "0xA0b86a33E6441b4c2b3Eb0e25e9b3F9b5d4F8A4B"
