"""Unit tests for the repository layer against the in-memory store."""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from ursol.repositories.activity_repository import ActivityRepository
from ursol.repositories.beneficiary_repository import BeneficiaryRepository
from ursol.repositories.payment_repository import PaymentRepository
from ursol.repositories.policy_repository import PolicyRepository
from ursol.repositories.staking_repository import StakingRepository

USER_ID = "demo-user-1"


class TestBeneficiaryRepository:
    """Tests for BeneficiaryRepository."""

    @pytest.mark.asyncio
    async def test_upsert_keeps_identity(self, db_session: AsyncSession):
        repo = BeneficiaryRepository(db_session)

        first = await repo.upsert(USER_ID, "cipher-1", {"chain": "world"})
        await db_session.commit()
        first_id = first.id

        second = await repo.upsert(USER_ID, "cipher-2")
        await db_session.commit()

        assert second.id == first_id
        assert second.encrypted_data == "cipher-2"
        assert second.on_chain_settings is None
        assert await repo.count({"user_id": USER_ID}) == 1

    @pytest.mark.asyncio
    async def test_get_by_user_missing(self, db_session: AsyncSession):
        assert await BeneficiaryRepository(db_session).get_by_user(USER_ID) is None


class TestPaymentRepository:
    """Tests for PaymentRepository."""

    @pytest.mark.asyncio
    async def test_get_by_reference_normalizes_key(self, db_session: AsyncSession):
        repo = PaymentRepository(db_session)
        await repo.create(
            user_id=USER_ID,
            payment_id="abc123",
            type="premium",
            amount="10",
            currency="USDC",
            status="pending",
        )
        await db_session.commit()

        found = await repo.get_by_reference("  ABC123 ")

        assert found is not None
        assert found.payment_id == "abc123"

    @pytest.mark.asyncio
    async def test_get_by_reference_blank(self, db_session: AsyncSession):
        assert await PaymentRepository(db_session).get_by_reference("   ") is None


class TestActivityRepository:
    """Tests for ActivityRepository."""

    @pytest.mark.asyncio
    async def test_lists_newest_first(self, db_session: AsyncSession):
        repo = ActivityRepository(db_session)
        await repo.record(USER_ID, "stake", "Staked 1 URSOL in rewards", "1")
        await db_session.commit()

        activities = await repo.list_by_user(USER_ID)

        assert activities[0].description == "Staked 1 URSOL in rewards"
        assert [a.id for a in activities[1:]] == ["activity-1", "activity-2", "activity-3", "activity-4"]

    @pytest.mark.asyncio
    async def test_limit(self, db_session: AsyncSession):
        activities = await ActivityRepository(db_session).list_by_user(USER_ID, limit=2)

        assert [a.id for a in activities] == ["activity-1", "activity-2"]

    @pytest.mark.asyncio
    async def test_timestamps_are_utc(self, db_session: AsyncSession):
        activity = await ActivityRepository(db_session).get_by_id("activity-4")

        assert activity.created_at.tzinfo is not None
        assert activity.created_at < datetime.now(timezone.utc) - timedelta(days=6)


class TestOwnership:

    @pytest.mark.asyncio
    async def test_get_owned_filters_by_user(self, db_session: AsyncSession):
        repo = StakingRepository(db_session)

        assert await repo.get_owned("stake-1", USER_ID) is not None
        assert await repo.get_owned("stake-1", "someone-else") is None

    @pytest.mark.asyncio
    async def test_exists_token_id(self, db_session: AsyncSession):
        repo = PolicyRepository(db_session)

        assert await repo.exists_token_id(1247) is True
        assert await repo.exists_token_id(1) is False
