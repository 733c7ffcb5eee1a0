"""SQLAlchemy models for all database tables."""

import uuid
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.types import TypeDecorator

from ursol.core.database import Base


def new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UTCDateTime(TypeDecorator):
    """Timezone-aware datetime that survives backends without tz support (SQLite)."""

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: Optional[datetime], dialect) -> Optional[datetime]:
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value

    def process_result_value(self, value: Optional[datetime], dialect) -> Optional[datetime]:
        if value is not None and value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value


class User(Base):
    """Wallet holder with an URSOL token balance."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    address: Mapped[str] = mapped_column(String, unique=True, nullable=False)
    ursol_balance: Mapped[str] = mapped_column(String, nullable=False, default="0")
    is_world_id_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow)

    # Relationships
    policies: Mapped[list["Policy"]] = relationship("Policy", back_populates="user")
    beneficiary: Mapped[Optional["Beneficiary"]] = relationship(
        "Beneficiary", back_populates="user", uselist=False
    )


class Policy(Base):
    """NFT-backed insurance policy. Created on mint, never deleted."""

    __tablename__ = "policies"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(String(64), ForeignKey("users.id"), nullable=False, index=True)
    token_id: Mapped[int] = mapped_column(Integer, unique=True, nullable=False)
    tier: Mapped[str] = mapped_column(String, nullable=False)  # basic | premium | premium_urn
    coverage_amount: Mapped[str] = mapped_column(String, nullable=False)
    monthly_premium: Mapped[str] = mapped_column(String, nullable=False)
    staking_bonus: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    next_premium_due: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow)

    user: Mapped["User"] = relationship("User", back_populates="policies")


class StakingPosition(Base):
    """Tokens locked in a staking pool."""

    __tablename__ = "staking_positions"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(String(64), ForeignKey("users.id"), nullable=False, index=True)
    type: Mapped[str] = mapped_column(String, nullable=False)  # insurance_pool | rewards
    amount: Mapped[str] = mapped_column(String, nullable=False)
    apy: Mapped[str] = mapped_column(String, nullable=False)
    pending_rewards: Mapped[str] = mapped_column(String, nullable=False, default="0")
    lock_period: Mapped[int] = mapped_column(Integer, nullable=False)  # days
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow)


class Loan(Base):
    """Loan drawn against a policy."""

    __tablename__ = "loans"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(String(64), ForeignKey("users.id"), nullable=False, index=True)
    policy_id: Mapped[str] = mapped_column(String(64), ForeignKey("policies.id"), nullable=False)
    amount: Mapped[str] = mapped_column(String, nullable=False)
    interest_rate: Mapped[str] = mapped_column(String, nullable=False)
    health_factor: Mapped[str] = mapped_column(String, nullable=False)
    liquidation_ratio: Mapped[str] = mapped_column(String, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow)


class Beneficiary(Base):
    """Encrypted beneficiary designation. One row per user."""

    __tablename__ = "beneficiaries"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(String(64), ForeignKey("users.id"), unique=True, nullable=False)
    encrypted_data: Mapped[str] = mapped_column(Text, nullable=False)
    on_chain_settings: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow)

    user: Mapped["User"] = relationship("User", back_populates="beneficiary")


class Claim(Base):
    """Insurance claim filed against a policy."""

    __tablename__ = "claims"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(String(64), ForeignKey("users.id"), nullable=False, index=True)
    policy_id: Mapped[str] = mapped_column(String(64), ForeignKey("policies.id"), nullable=False)
    payout_type: Mapped[str] = mapped_column(String, nullable=False)  # lump_sum | installments | custom
    status: Mapped[str] = mapped_column(String, nullable=False, default="pending")
    verification_method: Mapped[str] = mapped_column(String, nullable=False)  # world_id | oracle | community
    amount: Mapped[str] = mapped_column(String, nullable=False)
    submitted_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow)


class Activity(Base):
    """Append-only, human-readable event log entry."""

    __tablename__ = "activities"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(String(64), ForeignKey("users.id"), nullable=False, index=True)
    type: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    amount: Mapped[str | None] = mapped_column(String, nullable=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow, index=True)


class Payment(Base):
    """Payment tracked from initiation to completion via its reference id."""

    __tablename__ = "payments"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(String(64), ForeignKey("users.id"), nullable=False, index=True)
    payment_id: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)  # reference id
    type: Mapped[str] = mapped_column(String, nullable=False)
    amount: Mapped[str] = mapped_column(String, nullable=False)
    currency: Mapped[str] = mapped_column(String, nullable=False, default="USDCE")
    status: Mapped[str] = mapped_column(String, nullable=False, default="pending")
    related_entity_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    related_entity_type: Mapped[str | None] = mapped_column(String, nullable=True)  # policy | loan | claim
    transaction_id: Mapped[str | None] = mapped_column(String, nullable=True)
    ledger_tx_hash: Mapped[str | None] = mapped_column(String, nullable=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=utcnow)
    completed_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
