from unittest.mock import AsyncMock

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from ursol.core.exceptions import NotFoundError
from ursol.repositories.user_repository import UserRepository
from ursol.schemas.requests import MintPolicyRequest
from ursol.services.ledger.base import NFTMintResult, TokenBurnResult
from ursol.services.ledger.simulated import SimulatedLedger
from ursol.services.policy_service import PolicyService, burn_amount_for

USER_ID = "demo-user-1"


def _mint(token_id: int) -> NFTMintResult:
    return NFTMintResult(token_id=token_id, contract_address="0xcontract", tx_hash="0xhash")


class TestPolicyService:

    def test_burn_amount_is_five_percent(self):
        assert burn_amount_for("150000") == "7500.00"
        assert burn_amount_for("333.33") == "16.67"

    def test_tier_catalogue(self):
        tiers = {t.tier: t for t in PolicyService.list_tiers()}

        assert tiers["basic"].coverage_amount == "50000"
        assert tiers["premium"].monthly_premium == "65"
        assert tiers["premium_urn"].staking_bonus == 20

    @pytest.mark.asyncio
    async def test_mint_remints_on_token_collision(self, db_session: AsyncSession, locks):
        ledger = AsyncMock(spec=SimulatedLedger)
        ledger.mint_policy_nft.side_effect = [_mint(1247), _mint(5000)]
        ledger.burn_tokens.return_value = TokenBurnResult(amount="2500.00", tx_hash="0xburn", block_number=1)
        service = PolicyService(db_session, ledger, locks)

        policy = await service.mint_policy(USER_ID, MintPolicyRequest(tier="basic"))

        assert policy.token_id == 5000
        assert ledger.mint_policy_nft.await_count == 2
        ledger.burn_tokens.assert_awaited_once_with("2500.00")

    @pytest.mark.asyncio
    async def test_mint_debits_balance(self, db_session: AsyncSession, ledger, locks):
        service = PolicyService(db_session, ledger, locks)

        await service.mint_policy(USER_ID, MintPolicyRequest(tier="premium_urn"))

        user = await UserRepository(db_session).get_by_id(USER_ID)
        # 5% of 500000 exceeds the balance, so it floors at zero
        assert user.ursol_balance == "0.00"
        assert len(await service.list_policies(USER_ID)) == 3

    @pytest.mark.asyncio
    async def test_mint_for_missing_user(self, db_session: AsyncSession, ledger, locks):
        service = PolicyService(db_session, ledger, locks)

        with pytest.raises(NotFoundError):
            await service.mint_policy("ghost", MintPolicyRequest(tier="basic"))

        assert len(await service.list_policies(USER_ID)) == 2
