"""Enumerations shared by request schemas and services."""

from enum import Enum


class PolicyTier(str, Enum):
    BASIC = "basic"
    PREMIUM = "premium"
    PREMIUM_URN = "premium_urn"


class StakingType(str, Enum):
    INSURANCE_POOL = "insurance_pool"
    REWARDS = "rewards"


class PayoutType(str, Enum):
    LUMP_SUM = "lump_sum"
    INSTALLMENTS = "installments"
    CUSTOM = "custom"


class ClaimStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    PAID = "paid"


class VerificationMethod(str, Enum):
    WORLD_ID = "world_id"
    ORACLE = "oracle"
    COMMUNITY = "community"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


class RelatedEntityType(str, Enum):
    POLICY = "policy"
    LOAN = "loan"
    CLAIM = "claim"


class BalanceOperation(str, Enum):
    ADD = "add"
    SUBTRACT = "subtract"
    SET = "set"


class ActivityType(str, Enum):
    """Tags written by the services. The column itself is free-form."""

    BURN = "burn"
    STAKE = "stake"
    CLAIM_REWARDS = "claim_rewards"
    BORROW = "borrow"
    CLAIM_SUBMITTED = "claim_submitted"
    PREMIUM_PAYMENT = "premium_payment"
    VERIFICATION = "verification"


class RiskLevel(str, Enum):
    SAFE = "safe"
    MODERATE = "moderate"
    HIGH = "high"
