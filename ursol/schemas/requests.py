"""Request bodies accepted by the HTTP API."""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from ursol.schemas.common import CamelModel, DecimalString
from ursol.schemas.enums import (
    BalanceOperation,
    ClaimStatus,
    PayoutType,
    PolicyTier,
    RelatedEntityType,
    StakingType,
    VerificationMethod,
)


class BalanceUpdateRequest(CamelModel):
    amount: DecimalString
    operation: BalanceOperation


class MintPolicyRequest(CamelModel):
    """Mint a policy NFT. Omitted figures come from the tier catalogue."""

    tier: PolicyTier
    coverage_amount: Optional[DecimalString] = None
    monthly_premium: Optional[DecimalString] = None
    staking_bonus: Optional[int] = Field(default=None, ge=0)


class StakeRequest(CamelModel):
    type: StakingType
    amount: DecimalString
    apy: DecimalString = "0"
    lock_period: int = Field(default=0, ge=0, description="Lock period in days")


class BorrowRequest(CamelModel):
    policy_id: str = Field(..., min_length=1)
    amount: DecimalString
    interest_rate: DecimalString
    health_factor: Optional[DecimalString] = None
    liquidation_ratio: DecimalString = "150"


class BeneficiaryRequest(CamelModel):
    encrypted_data: str = Field(..., min_length=1)
    on_chain_settings: Optional[Dict[str, Any]] = None


class ClaimRequest(CamelModel):
    policy_id: str = Field(..., min_length=1)
    payout_type: PayoutType
    verification_method: VerificationMethod
    amount: DecimalString
    status: ClaimStatus = ClaimStatus.PENDING


class InitiatePaymentRequest(CamelModel):
    type: str = "premium"
    amount: DecimalString = "0"
    currency: Optional[str] = None
    related_entity_id: Optional[str] = None
    related_entity_type: Optional[RelatedEntityType] = None


class ConfirmPaymentRequest(BaseModel):
    """Body of /confirm-payment. The payload is echoed back untouched."""

    payload: Dict[str, Any]


class PaymentConfirmationPayload(BaseModel):
    """Completion payload reported by the wallet's payment command."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    reference: str = Field(..., min_length=1)
    transaction_id: Optional[str] = None
    sender: Optional[str] = Field(default=None, alias="from")


class VerifyRequest(BaseModel):
    payload: Dict[str, Any]
    action: str = Field(..., min_length=1)
    signal: Optional[str] = None
