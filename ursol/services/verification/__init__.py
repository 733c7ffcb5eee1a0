from ursol.services.verification.base import ProofVerification, RailTransaction, VerificationService
from ursol.services.verification.worldcoin import WorldcoinVerificationService

__all__ = [
    "ProofVerification",
    "RailTransaction",
    "VerificationService",
    "WorldcoinVerificationService",
]
