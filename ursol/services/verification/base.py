"""External verification capability interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class RailTransaction:
    """Transaction as reported by the payment rail."""

    transaction_id: str
    reference: Optional[str]
    status: Optional[str]
    raw: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ProofVerification:
    """Outcome of a cloud proof verification. `body` is the verifier's response."""

    success: bool
    body: Dict[str, Any] = field(default_factory=dict)


class VerificationService(ABC):
    """Payment rail lookups and World ID proof verification."""

    @property
    @abstractmethod
    def has_credentials(self) -> bool:
        """Whether transaction lookups can be performed."""

    @abstractmethod
    async def get_transaction(self, transaction_id: str) -> RailTransaction:
        """Fetch a transaction from the payment rail.

        Raises:
            ExternalVerificationFailedError: On HTTP errors, transport errors or timeouts
        """

    @abstractmethod
    async def verify_proof(
        self, payload: Dict[str, Any], action: str, signal: Optional[str] = None
    ) -> ProofVerification:
        """Verify a World ID proof with the cloud verifier.

        Raises:
            ExternalServiceUnavailableError: When the verifier cannot be reached
        """
