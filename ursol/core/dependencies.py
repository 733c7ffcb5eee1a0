"""FastAPI dependency providers."""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from ursol.core.config import settings
from ursol.core.database import get_async_session as get_session
from ursol.core.locks import KeyedLocks
from ursol.services.account_service import AccountService
from ursol.services.activity_service import ActivityService
from ursol.services.beneficiary_service import BeneficiaryService
from ursol.services.claim_service import ClaimService
from ursol.services.dashboard_service import DashboardService
from ursol.services.identity_service import IdentityService
from ursol.services.ledger.base import LedgerService
from ursol.services.loan_service import LoanService
from ursol.services.payment_service import PaymentService
from ursol.services.policy_service import PolicyService
from ursol.services.staking_service import StakingService
from ursol.services.verification.base import VerificationService
from ursol.services.verification.worldcoin import WorldcoinVerificationService


def get_current_user_id() -> str:
    """Single demo account until an auth layer exists."""
    return settings.demo_user_id


def get_ledger(request: Request) -> LedgerService:
    return request.app.state.ledger


def get_locks(request: Request) -> KeyedLocks:
    return request.app.state.locks


def get_verification_service() -> VerificationService:
    return WorldcoinVerificationService()


SessionDep = Annotated[AsyncSession, Depends(get_session)]
LedgerDep = Annotated[LedgerService, Depends(get_ledger)]
LocksDep = Annotated[KeyedLocks, Depends(get_locks)]
VerificationDep = Annotated[VerificationService, Depends(get_verification_service)]


async def get_account_service(db_session: SessionDep, locks: LocksDep) -> AccountService:
    return AccountService(db_session, locks)


async def get_policy_service(db_session: SessionDep, ledger: LedgerDep, locks: LocksDep) -> PolicyService:
    return PolicyService(db_session, ledger, locks)


async def get_staking_service(db_session: SessionDep, ledger: LedgerDep, locks: LocksDep) -> StakingService:
    return StakingService(db_session, ledger, locks)


async def get_loan_service(db_session: SessionDep, ledger: LedgerDep, locks: LocksDep) -> LoanService:
    return LoanService(db_session, ledger, locks)


async def get_beneficiary_service(db_session: SessionDep, locks: LocksDep) -> BeneficiaryService:
    return BeneficiaryService(db_session, locks)


async def get_claim_service(db_session: SessionDep) -> ClaimService:
    return ClaimService(db_session)


async def get_activity_service(db_session: SessionDep) -> ActivityService:
    return ActivityService(db_session)


async def get_payment_service(
    db_session: SessionDep,
    ledger: LedgerDep,
    verification: VerificationDep,
    locks: LocksDep,
) -> PaymentService:
    return PaymentService(db_session, ledger, verification, locks)


async def get_identity_service(db_session: SessionDep, verification: VerificationDep) -> IdentityService:
    return IdentityService(db_session, verification)


async def get_dashboard_service(db_session: SessionDep) -> DashboardService:
    return DashboardService(db_session)


CurrentUserId = Annotated[str, Depends(get_current_user_id)]
