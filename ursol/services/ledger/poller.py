"""Periodic ledger event poll. Log-only."""

import asyncio

from ursol.services.ledger.base import LedgerService
from ursol.utils.logging import get_logger

LOGGER = get_logger(__name__)


async def poll_ledger_events(ledger: LedgerService, interval: float) -> None:
    """Log the latest transfer events every `interval` seconds until cancelled."""
    LOGGER.info("Ledger event polling started", extra={"interval": interval})

    while True:
        await asyncio.sleep(interval)
        try:
            events = await ledger.recent_events(limit=5)
            LOGGER.info(f"Ledger poll: {len(events)} recent transfer events")
            for event in events:
                LOGGER.debug(
                    "Transfer event",
                    extra={"reference": event.reference, "tx_hash": event.tx_hash, "amount": event.amount},
                )
        except Exception as e:
            LOGGER.error(f"Ledger poll failed: {e}", exc_info=True)
