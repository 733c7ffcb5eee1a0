from ursol.repositories.activity_repository import ActivityRepository
from ursol.repositories.beneficiary_repository import BeneficiaryRepository
from ursol.repositories.claim_repository import ClaimRepository
from ursol.repositories.loan_repository import LoanRepository
from ursol.repositories.payment_repository import PaymentRepository
from ursol.repositories.policy_repository import PolicyRepository
from ursol.repositories.staking_repository import StakingRepository
from ursol.repositories.user_repository import UserRepository

__all__ = [
    "ActivityRepository",
    "BeneficiaryRepository",
    "ClaimRepository",
    "LoanRepository",
    "PaymentRepository",
    "PolicyRepository",
    "StakingRepository",
    "UserRepository",
]
