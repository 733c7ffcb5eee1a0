"""Staking positions, reward claims and reward projections."""

from typing import Any, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ursol.core.exceptions import AppError, NotFoundError, ValidationError
from ursol.core.locks import KeyedLocks
from ursol.repositories.activity_repository import ActivityRepository
from ursol.repositories.staking_repository import StakingRepository
from ursol.repositories.user_repository import UserRepository
from ursol.schemas.enums import ActivityType, StakingType
from ursol.schemas.requests import StakeRequest
from ursol.schemas.responses import RewardProjectionResponse, StakingPositionResponse
from ursol.services.account_service import credit, debit, load_user, user_lock_key
from ursol.services.base_service import BaseService
from ursol.services.ledger.base import LedgerService
from ursol.utils.amounts import normalize_amount, to_decimal
from ursol.utils.logging import get_logger

LOGGER = get_logger(__name__)


def pool_label(staking_type: str) -> str:
    return staking_type.replace("_", " ")


class StakingService(BaseService):
    """Stakes tokens into pools and pays out pending rewards."""

    def __init__(self, session: AsyncSession, ledger: LedgerService, locks: Optional[KeyedLocks] = None):
        super().__init__(session, locks)
        self.ledger = ledger
        self.staking_repo = StakingRepository(session)
        self.user_repo = UserRepository(session)
        self.activity_repo = ActivityRepository(session)

    async def run(self, *args, **kwargs) -> Any:
        action = kwargs.get("action")

        if action == "list_positions":
            return await self._list_positions_logic(kwargs["user_id"])
        elif action == "stake":
            return await self._stake_logic(kwargs["user_id"], kwargs["request"])
        elif action == "claim_rewards":
            return await self._claim_rewards_logic(kwargs["user_id"], kwargs["position_id"])
        else:
            raise AppError(f"Unknown action: {action}")

    def validate(self, *args, **kwargs):
        if kwargs.get("action") == "stake" and to_decimal(kwargs["request"].amount) <= 0:
            raise ValidationError("Stake amount must be greater than zero", details={"field": "amount"})

    async def list_positions(self, user_id: str) -> List[StakingPositionResponse]:
        return await self.execute(action="list_positions", user_id=user_id)

    async def stake(self, user_id: str, request: StakeRequest) -> StakingPositionResponse:
        async with self.hold(user_lock_key(user_id)):
            return await self.execute(action="stake", user_id=user_id, request=request)

    async def claim_rewards(self, user_id: str, position_id: str) -> StakingPositionResponse:
        async with self.hold(user_lock_key(user_id)):
            return await self.execute(action="claim_rewards", user_id=user_id, position_id=position_id)

    def project_rewards(self, amount: str, apy: str, days: int) -> RewardProjectionResponse:
        """Simple-interest projection of rewards over `days`."""
        amount = normalize_amount(amount)
        apy = normalize_amount(apy)
        return RewardProjectionResponse(
            amount=amount,
            apy=apy,
            days=days,
            projected_rewards=self.ledger.project_staking_rewards(amount, apy, days),
        )

    async def _list_positions_logic(self, user_id: str) -> List[StakingPositionResponse]:
        positions = await self.staking_repo.list_by_user(user_id)
        return [StakingPositionResponse.model_validate(p) for p in positions]

    async def _stake_logic(self, user_id: str, request: StakeRequest) -> StakingPositionResponse:
        user = await load_user(self.user_repo, user_id)
        staking_type = StakingType(request.type)
        amount = normalize_amount(request.amount)

        position = await self.staking_repo.create(
            user_id=user_id,
            type=staking_type.value,
            amount=amount,
            apy=normalize_amount(request.apy),
            pending_rewards="0",
            lock_period=request.lock_period,
        )
        await debit(self.user_repo, user, amount)
        await self.activity_repo.record(
            user_id=user_id,
            type=ActivityType.STAKE.value,
            description=f"Staked {amount} URSOL in {pool_label(staking_type.value)}",
            amount=amount,
        )

        LOGGER.info("Tokens staked", extra={"user_id": user_id, "amount": amount, "pool": staking_type.value})
        return StakingPositionResponse.model_validate(position)

    async def _claim_rewards_logic(self, user_id: str, position_id: str) -> StakingPositionResponse:
        position = await self.staking_repo.get_owned(position_id, user_id)
        if position is None:
            raise NotFoundError(
                f"Staking position {position_id} not found", details={"position_id": position_id}
            )

        user = await load_user(self.user_repo, user_id)
        rewards = normalize_amount(position.pending_rewards)

        await self.staking_repo.update(position, pending_rewards="0")
        await credit(self.user_repo, user, rewards)
        await self.activity_repo.record(
            user_id=user_id,
            type=ActivityType.CLAIM_REWARDS.value,
            description=f"Claimed rewards from {pool_label(position.type)} staking",
            amount=rewards,
        )

        LOGGER.info(
            "Staking rewards claimed",
            extra={"user_id": user_id, "position_id": position_id, "amount": rewards},
        )
        return StakingPositionResponse.model_validate(position)
