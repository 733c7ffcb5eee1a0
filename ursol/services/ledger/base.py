"""Ledger capability interface and result types."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional


@dataclass
class TokenBurnResult:
    amount: str
    tx_hash: str
    block_number: int


@dataclass
class NFTMintResult:
    token_id: int
    contract_address: str
    tx_hash: str


@dataclass
class TransferEvent:
    """Token transfer observed on the ledger, tagged with a payment reference."""

    sender: str
    recipient: str
    amount: str
    token_address: str
    reference: str
    tx_hash: str
    block_number: int
    success: bool = True
    observed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class LedgerVerification:
    verified: bool
    event: Optional[TransferEvent] = None


@dataclass
class LiquidationRisk:
    health_factor: str
    liquidation_threshold: str
    risk_level: str


class LedgerService(ABC):
    """On-chain operations the services depend on.

    Implementations are injected through the application state so tests and a
    real chain client can replace the simulated one.
    """

    @abstractmethod
    async def burn_tokens(self, amount: str) -> TokenBurnResult:
        """Burn tokens and return the burn receipt."""

    @abstractmethod
    async def mint_policy_nft(self, tier: str) -> NFTMintResult:
        """Mint a policy NFT for the given tier."""

    @abstractmethod
    async def record_transfer(
        self,
        sender: str,
        recipient: str,
        amount: str,
        token_address: str,
        reference: str,
        success: bool = True,
    ) -> TransferEvent:
        """Record a transfer event keyed by a payment reference."""

    @abstractmethod
    async def verify_payment_by_reference(self, reference: str) -> LedgerVerification:
        """Look up the transfer event carrying the given reference."""

    @abstractmethod
    async def recent_events(self, limit: int = 10) -> List[TransferEvent]:
        """Return the most recent transfer events, newest first."""

    @abstractmethod
    def project_staking_rewards(self, amount: str, apy: str, days: int) -> str:
        """Simple-interest reward projection."""

    @abstractmethod
    def calculate_liquidation_risk(self, collateral_value: str, debt_value: str) -> LiquidationRisk:
        """Health factor and risk level for a collateralised debt."""
