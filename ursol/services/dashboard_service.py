from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from ursol.core.exceptions import AppError
from ursol.repositories.activity_repository import ActivityRepository
from ursol.repositories.loan_repository import LoanRepository
from ursol.repositories.policy_repository import PolicyRepository
from ursol.repositories.staking_repository import StakingRepository
from ursol.schemas.responses import ActivityResponse, DashboardResponse
from ursol.services.base_service import BaseService
from ursol.utils.amounts import format_amount, sum_amounts

RECENT_ACTIVITY_COUNT = 4


class DashboardService(BaseService):
    """Aggregates a user's holdings. Recomputed on every call."""

    def __init__(self, session: AsyncSession):
        super().__init__(session)
        self.policy_repo = PolicyRepository(session)
        self.staking_repo = StakingRepository(session)
        self.loan_repo = LoanRepository(session)
        self.activity_repo = ActivityRepository(session)

    async def run(self, *args, **kwargs) -> Any:
        action = kwargs.get("action")

        if action == "dashboard":
            return await self._dashboard_logic(kwargs["user_id"])
        else:
            raise AppError(f"Unknown action: {action}")

    async def dashboard(self, user_id: str) -> DashboardResponse:
        return await self.execute(action="dashboard", user_id=user_id)

    async def _dashboard_logic(self, user_id: str) -> DashboardResponse:
        policies = await self.policy_repo.list_by_user(user_id)
        positions = await self.staking_repo.list_by_user(user_id)
        loans = await self.loan_repo.list_by_user(user_id)
        activities = await self.activity_repo.list_by_user(user_id, limit=RECENT_ACTIVITY_COUNT)

        active_loans = [loan for loan in loans if loan.is_active]

        return DashboardResponse(
            total_coverage=format_amount(sum_amounts(p.coverage_amount for p in policies), 0),
            total_staked=format_amount(sum_amounts(s.amount for s in positions), 0),
            total_rewards=format_amount(sum_amounts(s.pending_rewards for s in positions), 1),
            total_borrowed=format_amount(sum_amounts(loan.amount for loan in active_loans), 0),
            active_policies=sum(1 for p in policies if p.is_active),
            active_loans=len(active_loans),
            recent_activities=[ActivityResponse.model_validate(a) for a in activities],
        )
