from typing import Any, List

from sqlalchemy.ext.asyncio import AsyncSession

from ursol.core.exceptions import AppError, NotFoundError, ValidationError
from ursol.repositories.activity_repository import ActivityRepository
from ursol.repositories.claim_repository import ClaimRepository
from ursol.repositories.policy_repository import PolicyRepository
from ursol.schemas.enums import ActivityType, ClaimStatus, PayoutType, VerificationMethod
from ursol.schemas.requests import ClaimRequest
from ursol.schemas.responses import ClaimResponse
from ursol.services.base_service import BaseService
from ursol.utils.amounts import normalize_amount, to_decimal
from ursol.utils.logging import get_logger

LOGGER = get_logger(__name__)


class ClaimService(BaseService):
    """Files insurance claims against the user's policies."""

    def __init__(self, session: AsyncSession):
        super().__init__(session)
        self.claim_repo = ClaimRepository(session)
        self.policy_repo = PolicyRepository(session)
        self.activity_repo = ActivityRepository(session)

    async def run(self, *args, **kwargs) -> Any:
        action = kwargs.get("action")

        if action == "list_claims":
            return await self._list_claims_logic(kwargs["user_id"])
        elif action == "submit_claim":
            return await self._submit_claim_logic(kwargs["user_id"], kwargs["request"])
        else:
            raise AppError(f"Unknown action: {action}")

    def validate(self, *args, **kwargs):
        if kwargs.get("action") == "submit_claim" and to_decimal(kwargs["request"].amount) <= 0:
            raise ValidationError("Claim amount must be greater than zero", details={"field": "amount"})

    async def list_claims(self, user_id: str) -> List[ClaimResponse]:
        return await self.execute(action="list_claims", user_id=user_id)

    async def submit_claim(self, user_id: str, request: ClaimRequest) -> ClaimResponse:
        return await self.execute(action="submit_claim", user_id=user_id, request=request)

    async def _list_claims_logic(self, user_id: str) -> List[ClaimResponse]:
        claims = await self.claim_repo.list_by_user(user_id)
        return [ClaimResponse.model_validate(c) for c in claims]

    async def _submit_claim_logic(self, user_id: str, request: ClaimRequest) -> ClaimResponse:
        policy = await self.policy_repo.get_owned(request.policy_id, user_id)
        if policy is None:
            raise NotFoundError(
                f"Policy {request.policy_id} not found", details={"policy_id": request.policy_id}
            )

        amount = normalize_amount(request.amount)
        claim = await self.claim_repo.create(
            user_id=user_id,
            policy_id=policy.id,
            payout_type=PayoutType(request.payout_type).value,
            verification_method=VerificationMethod(request.verification_method).value,
            status=ClaimStatus(request.status).value,
            amount=amount,
        )
        await self.activity_repo.record(
            user_id=user_id,
            type=ActivityType.CLAIM_SUBMITTED.value,
            description=f"Submitted claim for {amount} URSOL",
            amount=amount,
        )

        LOGGER.info("Claim submitted", extra={"user_id": user_id, "claim_id": claim.id, "amount": amount})
        return ClaimResponse.model_validate(claim)
