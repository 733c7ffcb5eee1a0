"""Policy catalogue and NFT policy minting."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ursol.core.exceptions import AppError
from ursol.core.locks import KeyedLocks
from ursol.repositories.activity_repository import ActivityRepository
from ursol.repositories.policy_repository import PolicyRepository
from ursol.repositories.user_repository import UserRepository
from ursol.schemas.enums import ActivityType, PolicyTier
from ursol.schemas.requests import MintPolicyRequest
from ursol.schemas.responses import PolicyResponse, PolicyTierResponse
from ursol.services.account_service import debit, load_user, user_lock_key
from ursol.services.base_service import BaseService
from ursol.services.ledger.base import LedgerService
from ursol.utils.amounts import format_amount, normalize_amount, to_decimal
from ursol.utils.logging import get_logger

LOGGER = get_logger(__name__)

BURN_RATE = Decimal("0.05")
PREMIUM_CYCLE = timedelta(days=30)
MAX_MINT_ATTEMPTS = 5


@dataclass(frozen=True)
class TierTerms:
    name: str
    coverage_amount: str
    monthly_premium: str
    staking_bonus: int
    price: str


TIER_CATALOGUE = {
    PolicyTier.BASIC: TierTerms("Basic", "50000", "25", 5, "500"),
    PolicyTier.PREMIUM: TierTerms("Premium", "150000", "65", 10, "1500"),
    PolicyTier.PREMIUM_URN: TierTerms("Premium + URN", "500000", "180", 20, "5000"),
}


def burn_amount_for(coverage_amount: str) -> str:
    """Tokens burned on purchase: 5% of coverage."""
    return format_amount(to_decimal(coverage_amount) * BURN_RATE, 2)


class PolicyService(BaseService):
    """Lists policies and mints new policy NFTs."""

    def __init__(self, session: AsyncSession, ledger: LedgerService, locks: Optional[KeyedLocks] = None):
        super().__init__(session, locks)
        self.ledger = ledger
        self.policy_repo = PolicyRepository(session)
        self.user_repo = UserRepository(session)
        self.activity_repo = ActivityRepository(session)

    async def run(self, *args, **kwargs) -> Any:
        action = kwargs.get("action")

        if action == "list_policies":
            return await self._list_policies_logic(kwargs["user_id"])
        elif action == "mint_policy":
            return await self._mint_policy_logic(kwargs["user_id"], kwargs["request"])
        else:
            raise AppError(f"Unknown action: {action}")

    async def list_policies(self, user_id: str) -> List[PolicyResponse]:
        return await self.execute(action="list_policies", user_id=user_id)

    async def mint_policy(self, user_id: str, request: MintPolicyRequest) -> PolicyResponse:
        async with self.hold(user_lock_key(user_id)):
            return await self.execute(action="mint_policy", user_id=user_id, request=request)

    @staticmethod
    def list_tiers() -> List[PolicyTierResponse]:
        return [
            PolicyTierResponse(
                tier=tier.value,
                name=terms.name,
                coverage_amount=terms.coverage_amount,
                monthly_premium=terms.monthly_premium,
                staking_bonus=terms.staking_bonus,
                price=terms.price,
            )
            for tier, terms in TIER_CATALOGUE.items()
        ]

    async def _list_policies_logic(self, user_id: str) -> List[PolicyResponse]:
        policies = await self.policy_repo.list_by_user(user_id)
        return [PolicyResponse.model_validate(p) for p in policies]

    async def _next_token_id(self, tier: PolicyTier) -> int:
        for _ in range(MAX_MINT_ATTEMPTS):
            minted = await self.ledger.mint_policy_nft(tier.value)
            if not await self.policy_repo.exists_token_id(minted.token_id):
                return minted.token_id
            LOGGER.warning("Minted token id already in use, minting again", extra={"token_id": minted.token_id})
        raise AppError("Could not mint a policy NFT with an unused token id")

    async def _mint_policy_logic(self, user_id: str, request: MintPolicyRequest) -> PolicyResponse:
        user = await load_user(self.user_repo, user_id)
        tier = PolicyTier(request.tier)
        terms = TIER_CATALOGUE[tier]

        coverage = request.coverage_amount or terms.coverage_amount
        premium = request.monthly_premium or terms.monthly_premium
        bonus = request.staking_bonus if request.staking_bonus is not None else terms.staking_bonus

        token_id = await self._next_token_id(tier)
        burn = burn_amount_for(coverage)
        await self.ledger.burn_tokens(burn)

        policy = await self.policy_repo.create(
            user_id=user_id,
            token_id=token_id,
            tier=tier.value,
            coverage_amount=normalize_amount(coverage),
            monthly_premium=normalize_amount(premium),
            staking_bonus=bonus,
            is_active=True,
            next_premium_due=datetime.now(timezone.utc) + PREMIUM_CYCLE,
        )

        await debit(self.user_repo, user, burn)
        await self.activity_repo.record(
            user_id=user_id,
            type=ActivityType.BURN.value,
            description=f"{burn} URSOL burned from {tier.value} policy purchase",
            amount=burn,
        )

        LOGGER.info(
            "Policy minted",
            extra={"user_id": user_id, "tier": tier.value, "token_id": token_id, "burned": burn},
        )
        return PolicyResponse.model_validate(policy)
