"""Demo data set loaded into a fresh store on startup."""

from datetime import datetime, timedelta, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from ursol.core.config import settings
from ursol.database.models import Activity, Loan, Policy, StakingPosition, User
from ursol.utils.logging import get_logger

LOGGER = get_logger(__name__)

DEMO_ADDRESS = "0x742d35cc6639c0532fea175b7b6c7b50f5f3a8f8"


async def seed_demo_data(session: AsyncSession) -> None:
    """Insert the demo user with two policies, two stakes, a loan and history."""
    now = datetime.now(timezone.utc)
    user_id = settings.demo_user_id

    if await session.get(User, user_id) is not None:
        LOGGER.info("Demo data already present, skipping seed", extra={"user_id": user_id})
        return

    session.add(
        User(
            id=user_id,
            address=DEMO_ADDRESS,
            ursol_balance="15750.00",
            is_world_id_verified=True,
            created_at=now,
        )
    )
    # Loans reference policies, so the parents go in first
    await session.flush()

    session.add_all(
        [
            Policy(
                id="policy-1",
                user_id=user_id,
                token_id=1247,
                tier="premium",
                coverage_amount="150000",
                monthly_premium="65",
                staking_bonus=10,
                is_active=True,
                next_premium_due=now + timedelta(days=15),
                created_at=now,
            ),
            Policy(
                id="policy-2",
                user_id=user_id,
                token_id=892,
                tier="basic",
                coverage_amount="50000",
                monthly_premium="25",
                staking_bonus=5,
                is_active=True,
                next_premium_due=now + timedelta(days=10),
                created_at=now,
            ),
            StakingPosition(
                id="stake-1",
                user_id=user_id,
                type="insurance_pool",
                amount="2500",
                apy="12.5",
                pending_rewards="15.6",
                lock_period=30,
                created_at=now,
            ),
            StakingPosition(
                id="stake-2",
                user_id=user_id,
                type="rewards",
                amount="1000",
                apy="0",
                pending_rewards="0",
                lock_period=0,
                created_at=now,
            ),
        ]
    )
    await session.flush()

    session.add_all(
        [
            Loan(
                id="loan-1",
                user_id=user_id,
                policy_id="policy-2",
                amount="15000",
                interest_rate="8.5",
                health_factor="2.4",
                liquidation_ratio="150",
                is_active=True,
                created_at=now,
            ),
            Activity(
                id="activity-1",
                user_id=user_id,
                type="claim_rewards",
                description="Earned 15.6 URSOL from Insurance Pool",
                amount="15.6",
                created_at=now - timedelta(hours=2),
            ),
            Activity(
                id="activity-2",
                user_id=user_id,
                type="premium_payment",
                description="Paid 65 URSOL for Premium Policy #1247",
                amount="65",
                created_at=now - timedelta(hours=24),
            ),
            Activity(
                id="activity-3",
                user_id=user_id,
                type="borrow",
                description="Borrowed 15k URSOL against Basic Policy",
                amount="15000",
                created_at=now - timedelta(days=3),
            ),
            Activity(
                id="activity-4",
                user_id=user_id,
                type="burn",
                description="75 URSOL burned from Premium policy purchase",
                amount="75",
                created_at=now - timedelta(days=7),
            ),
        ]
    )
    await session.commit()

    LOGGER.info("Demo data seeded", extra={"user_id": user_id})
