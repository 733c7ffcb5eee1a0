"""Borrowing against policies."""

from typing import Any, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ursol.core.exceptions import AppError, NotFoundError, ValidationError
from ursol.core.locks import KeyedLocks
from ursol.repositories.activity_repository import ActivityRepository
from ursol.repositories.loan_repository import LoanRepository
from ursol.repositories.policy_repository import PolicyRepository
from ursol.repositories.user_repository import UserRepository
from ursol.schemas.enums import ActivityType
from ursol.schemas.requests import BorrowRequest
from ursol.schemas.responses import LiquidationRiskResponse, LoanResponse
from ursol.services.account_service import credit, load_user, user_lock_key
from ursol.services.base_service import BaseService
from ursol.services.ledger.base import LedgerService
from ursol.utils.amounts import normalize_amount, to_decimal
from ursol.utils.logging import get_logger

LOGGER = get_logger(__name__)


class LoanService(BaseService):
    """Creates loans collateralised by a policy and reports liquidation risk.

    Borrowing credits the principal to the user's balance. There is no
    repayment or liquidation flow.
    """

    def __init__(self, session: AsyncSession, ledger: LedgerService, locks: Optional[KeyedLocks] = None):
        super().__init__(session, locks)
        self.ledger = ledger
        self.loan_repo = LoanRepository(session)
        self.policy_repo = PolicyRepository(session)
        self.user_repo = UserRepository(session)
        self.activity_repo = ActivityRepository(session)

    async def run(self, *args, **kwargs) -> Any:
        action = kwargs.get("action")

        if action == "list_loans":
            return await self._list_loans_logic(kwargs["user_id"])
        elif action == "borrow":
            return await self._borrow_logic(kwargs["user_id"], kwargs["request"])
        else:
            raise AppError(f"Unknown action: {action}")

    def validate(self, *args, **kwargs):
        if kwargs.get("action") == "borrow" and to_decimal(kwargs["request"].amount) <= 0:
            raise ValidationError("Loan amount must be greater than zero", details={"field": "amount"})

    async def list_loans(self, user_id: str) -> List[LoanResponse]:
        return await self.execute(action="list_loans", user_id=user_id)

    async def borrow(self, user_id: str, request: BorrowRequest) -> LoanResponse:
        async with self.hold(user_lock_key(user_id)):
            return await self.execute(action="borrow", user_id=user_id, request=request)

    def liquidation_risk(self, collateral: str, debt: str) -> LiquidationRiskResponse:
        risk = self.ledger.calculate_liquidation_risk(collateral, debt)
        return LiquidationRiskResponse(
            health_factor=risk.health_factor,
            liquidation_threshold=risk.liquidation_threshold,
            risk_level=risk.risk_level,
        )

    async def _list_loans_logic(self, user_id: str) -> List[LoanResponse]:
        loans = await self.loan_repo.list_by_user(user_id)
        return [LoanResponse.model_validate(loan) for loan in loans]

    async def _borrow_logic(self, user_id: str, request: BorrowRequest) -> LoanResponse:
        policy = await self.policy_repo.get_owned(request.policy_id, user_id)
        if policy is None:
            raise NotFoundError(
                f"Policy {request.policy_id} not found", details={"policy_id": request.policy_id}
            )

        user = await load_user(self.user_repo, user_id)
        amount = normalize_amount(request.amount)

        health_factor = request.health_factor
        if health_factor is None:
            health_factor = self.ledger.calculate_liquidation_risk(policy.coverage_amount, amount).health_factor

        loan = await self.loan_repo.create(
            user_id=user_id,
            policy_id=policy.id,
            amount=amount,
            interest_rate=normalize_amount(request.interest_rate),
            health_factor=normalize_amount(health_factor),
            liquidation_ratio=normalize_amount(request.liquidation_ratio),
            is_active=True,
        )
        await credit(self.user_repo, user, amount)
        await self.activity_repo.record(
            user_id=user_id,
            type=ActivityType.BORROW.value,
            description=f"Borrowed {amount} URSOL against policy",
            amount=amount,
        )

        LOGGER.info(
            "Loan created",
            extra={"user_id": user_id, "policy_id": policy.id, "amount": amount, "health_factor": health_factor},
        )
        return LoanResponse.model_validate(loan)
