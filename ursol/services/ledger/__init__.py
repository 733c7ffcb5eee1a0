from ursol.services.ledger.base import (
    LedgerService,
    LedgerVerification,
    LiquidationRisk,
    NFTMintResult,
    TokenBurnResult,
    TransferEvent,
)
from ursol.services.ledger.simulated import SimulatedLedger

__all__ = [
    "LedgerService",
    "LedgerVerification",
    "LiquidationRisk",
    "NFTMintResult",
    "SimulatedLedger",
    "TokenBurnResult",
    "TransferEvent",
]
