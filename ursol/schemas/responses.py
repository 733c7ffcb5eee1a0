"""Response payloads returned by the HTTP API."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ursol.schemas.common import CamelModel


class UserResponse(CamelModel):
    id: str
    address: str
    ursol_balance: str
    is_world_id_verified: bool
    created_at: Optional[datetime] = None


class PolicyResponse(CamelModel):
    id: str
    user_id: str
    token_id: int
    tier: str
    coverage_amount: str
    monthly_premium: str
    staking_bonus: int
    is_active: bool
    next_premium_due: Optional[datetime] = None
    created_at: Optional[datetime] = None


class PolicyTierResponse(CamelModel):
    tier: str
    name: str
    coverage_amount: str
    monthly_premium: str
    staking_bonus: int
    price: str


class StakingPositionResponse(CamelModel):
    id: str
    user_id: str
    type: str
    amount: str
    apy: str
    pending_rewards: str
    lock_period: int
    created_at: Optional[datetime] = None


class RewardProjectionResponse(CamelModel):
    amount: str
    apy: str
    days: int
    projected_rewards: str


class LoanResponse(CamelModel):
    id: str
    user_id: str
    policy_id: str
    amount: str
    interest_rate: str
    health_factor: str
    liquidation_ratio: str
    is_active: bool
    created_at: Optional[datetime] = None


class LiquidationRiskResponse(CamelModel):
    health_factor: str
    liquidation_threshold: str
    risk_level: str


class BeneficiaryResponse(CamelModel):
    id: str
    user_id: str
    encrypted_data: str
    on_chain_settings: Optional[Dict[str, Any]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ClaimResponse(CamelModel):
    id: str
    user_id: str
    policy_id: str
    payout_type: str
    status: str
    verification_method: str
    amount: str
    submitted_at: Optional[datetime] = None


class ActivityResponse(CamelModel):
    id: str
    user_id: str
    type: str
    description: str
    amount: Optional[str] = None
    created_at: Optional[datetime] = None


class PaymentResponse(CamelModel):
    id: str
    user_id: str
    payment_id: str
    type: str
    amount: str
    currency: str
    status: str
    related_entity_id: Optional[str] = None
    related_entity_type: Optional[str] = None
    transaction_id: Optional[str] = None
    ledger_tx_hash: Optional[str] = None
    created_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None


class InitiatePaymentResponse(BaseModel):
    id: str = Field(..., description="Payment reference id to hand to the payment rail")


class ConfirmPaymentResponse(BaseModel):
    success: bool = True
    message: str
    payment: PaymentResponse
    transaction: Dict[str, Any]


class VerifyResponse(CamelModel):
    verify_res: Dict[str, Any] = Field(..., alias="verifyRes")
    status: int


class DashboardResponse(CamelModel):
    total_coverage: str
    total_staked: str
    total_rewards: str
    total_borrowed: str
    active_policies: int
    active_loans: int
    recent_activities: List[ActivityResponse]


class HealthCheckResponse(BaseModel):
    status: str = Field(..., description="Health check status")
    version: str = Field(..., description="Running application version")
    service: str = Field(..., description="Service name")


class RootResponse(BaseModel):
    """Root endpoint response payload."""

    model_config = ConfigDict(frozen=True)

    message: str = Field(..., description="Service status message")
    version: str = Field(..., description="Running application version")
    docs: str = Field(..., description="Path to the interactive API docs")
    health: str = Field(..., description="Path to the health check endpoint")
