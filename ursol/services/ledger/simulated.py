"""In-process ledger used for development and tests."""

import asyncio
import random
import secrets
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, List, Optional

from ursol.core.config import settings
from ursol.core.exceptions import ValidationError
from ursol.schemas.enums import RiskLevel
from ursol.services.ledger.base import (
    LedgerService,
    LedgerVerification,
    LiquidationRisk,
    NFTMintResult,
    TokenBurnResult,
    TransferEvent,
)
from ursol.utils.amounts import to_decimal
from ursol.utils.logging import get_logger

LOGGER = get_logger(__name__)

COLLATERAL_RATIO = Decimal("0.8")
LIQUIDATION_THRESHOLD = Decimal("1.5")
HIGH_RISK_BELOW = Decimal("1.2")


class SimulatedLedger(LedgerService):
    """Ledger that fabricates receipts and keeps transfer events in memory.

    Args:
        latency: Seconds to sleep per chain call, to mimic network delay
        policy_contract_address: Address reported on NFT mints
    """

    def __init__(self, latency: float = 0.0, policy_contract_address: Optional[str] = None):
        self.latency = latency
        self.policy_contract_address = policy_contract_address or settings.ledger.policy_contract_address
        self._events: List[TransferEvent] = []
        self._by_reference: Dict[str, TransferEvent] = {}

    async def _simulate_delay(self) -> None:
        if self.latency > 0:
            await asyncio.sleep(self.latency)

    @staticmethod
    def _tx_hash() -> str:
        return "0x" + secrets.token_hex(32)

    @staticmethod
    def _block_number() -> int:
        return random.randint(18_000_000, 18_999_999)

    async def burn_tokens(self, amount: str) -> TokenBurnResult:
        await self._simulate_delay()
        result = TokenBurnResult(amount=amount, tx_hash=self._tx_hash(), block_number=self._block_number())
        LOGGER.info("Tokens burned", extra={"amount": amount, "tx_hash": result.tx_hash})
        return result

    async def mint_policy_nft(self, tier: str) -> NFTMintResult:
        await self._simulate_delay()
        result = NFTMintResult(
            token_id=random.randint(1000, 10999),
            contract_address=self.policy_contract_address,
            tx_hash=self._tx_hash(),
        )
        LOGGER.info("Policy NFT minted", extra={"tier": tier, "token_id": result.token_id})
        return result

    async def record_transfer(
        self,
        sender: str,
        recipient: str,
        amount: str,
        token_address: str,
        reference: str,
        success: bool = True,
    ) -> TransferEvent:
        await self._simulate_delay()
        event = TransferEvent(
            sender=sender,
            recipient=recipient,
            amount=amount,
            token_address=token_address,
            reference=reference,
            tx_hash=self._tx_hash(),
            block_number=self._block_number(),
            success=success,
        )
        self._events.append(event)
        self._by_reference[reference] = event
        LOGGER.info("Transfer event recorded", extra={"reference": reference, "tx_hash": event.tx_hash})
        return event

    async def verify_payment_by_reference(self, reference: str) -> LedgerVerification:
        await self._simulate_delay()
        event = self._by_reference.get(reference)
        if event is None or not event.success:
            return LedgerVerification(verified=False, event=event)
        return LedgerVerification(verified=True, event=event)

    async def recent_events(self, limit: int = 10) -> List[TransferEvent]:
        return list(reversed(self._events[-limit:])) if limit > 0 else []

    def project_staking_rewards(self, amount: str, apy: str, days: int) -> str:
        if days < 0:
            raise ValidationError("days must not be negative", details={"days": days})
        rewards = to_decimal(amount) * to_decimal(apy, "apy") / 100 * days / 365
        return str(rewards.quantize(Decimal("0.000001"), rounding=ROUND_HALF_UP))

    def calculate_liquidation_risk(self, collateral_value: str, debt_value: str) -> LiquidationRisk:
        collateral = to_decimal(collateral_value, "collateral")
        debt = to_decimal(debt_value, "debt")
        if debt <= 0:
            raise ValidationError("debt must be greater than zero", details={"debt": debt_value})

        health_factor = collateral * COLLATERAL_RATIO / debt
        if health_factor < HIGH_RISK_BELOW:
            risk_level = RiskLevel.HIGH
        elif health_factor < LIQUIDATION_THRESHOLD:
            risk_level = RiskLevel.MODERATE
        else:
            risk_level = RiskLevel.SAFE

        return LiquidationRisk(
            health_factor=str(health_factor.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)),
            liquidation_threshold=str(LIQUIDATION_THRESHOLD),
            risk_level=risk_level.value,
        )

    def __len__(self) -> int:
        return len(self._events)
