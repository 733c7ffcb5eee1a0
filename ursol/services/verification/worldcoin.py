"""Worldcoin developer portal client."""

import re
from typing import Any, Dict, Optional

import httpx
from Crypto.Hash import keccak

from ursol.core.config import WorldcoinSettings, settings
from ursol.core.exceptions import (
    ConfigurationError,
    ExternalServiceUnavailableError,
    ExternalVerificationFailedError,
)
from ursol.services.verification.base import ProofVerification, RailTransaction, VerificationService
from ursol.utils.logging import get_logger

LOGGER = get_logger(__name__)

PROOF_FIELDS = ("proof", "merkle_root", "nullifier_hash")

HEX_PATTERN = re.compile(r"0x[0-9a-fA-F]*")


def hash_to_field(value: str) -> str:
    """Encode a signal the way World ID proofs commit to it.

    Hex strings are hashed as the bytes they encode, anything else as UTF-8.
    The keccak256 digest is shifted right by 8 bits to fit the field and
    rendered as 0x-prefixed, zero-padded hex.
    """
    if HEX_PATTERN.fullmatch(value):
        digits = value[2:]
        data = bytes.fromhex(digits.rjust(len(digits) + len(digits) % 2, "0"))
    else:
        data = value.encode("utf-8")

    digest = keccak.new(digest_bits=256, data=data).digest()
    return "0x" + format(int.from_bytes(digest, "big") >> 8, "064x")


class WorldcoinVerificationService(VerificationService):
    """Talks to the Worldcoin developer portal over HTTPS.

    Every request opens a short-lived httpx.AsyncClient bounded by the
    configured HTTP timeout.
    """

    def __init__(self, config: Optional[WorldcoinSettings] = None, timeout: Optional[float] = None):
        self.config = config or settings.worldcoin
        self.timeout = timeout if timeout is not None else settings.http_timeout
        self.base_url = self.config.api_url.rstrip("/")

    @property
    def has_credentials(self) -> bool:
        return self.config.has_credentials

    async def get_transaction(self, transaction_id: str) -> RailTransaction:
        if not self.has_credentials:
            raise ConfigurationError("APP_ID and DEV_PORTAL_API_KEY are required for transaction lookups")

        url = f"{self.base_url}/api/v2/minikit/transaction/{transaction_id}"
        LOGGER.info("Fetching transaction from payment rail", extra={"transaction_id": transaction_id})

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(
                    url,
                    params={"app_id": self.config.app_id},
                    headers={"Authorization": f"Bearer {self.config.dev_portal_api_key}"},
                )
                response.raise_for_status()
                data = response.json()
                if not isinstance(data, dict):
                    raise ValueError("unexpected transaction payload")
        except httpx.HTTPStatusError as e:
            LOGGER.error(
                f"Payment rail returned {e.response.status_code} for transaction {transaction_id}",
                extra={"transaction_id": transaction_id},
            )
            raise ExternalVerificationFailedError(
                "Failed to verify transaction with Worldcoin API",
                original_error=e,
                details={"status_code": e.response.status_code},
            )
        except (httpx.HTTPError, ValueError) as e:
            LOGGER.error(f"Payment rail request failed: {e}", extra={"transaction_id": transaction_id})
            raise ExternalVerificationFailedError(
                "Failed to verify transaction with Worldcoin API",
                original_error=e,
                details={"reason": type(e).__name__},
            )

        return RailTransaction(
            transaction_id=transaction_id,
            reference=data.get("reference"),
            status=data.get("transaction_status") or data.get("status"),
            raw=data,
        )

    async def verify_proof(
        self, payload: Dict[str, Any], action: str, signal: Optional[str] = None
    ) -> ProofVerification:
        url = f"{self.base_url}/api/v2/verify/{self.config.verify_app_id}"
        body: Dict[str, Any] = {field: payload[field] for field in PROOF_FIELDS}
        body["action"] = action
        if payload.get("verification_level"):
            body["verification_level"] = payload["verification_level"]
        if payload.get("signal_hash"):
            body["signal_hash"] = payload["signal_hash"]
        elif signal is not None:
            body["signal_hash"] = hash_to_field(signal)

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(url, json=body)
        except httpx.HTTPError as e:
            LOGGER.warning(f"World ID verifier unreachable: {e}", extra={"action": action})
            raise ExternalServiceUnavailableError(
                "World ID verification service unavailable", original_error=e
            )

        try:
            data = response.json()
        except ValueError:
            data = {"detail": response.text}
        if not isinstance(data, dict):
            data = {"detail": data}

        if response.is_success:
            data.setdefault("success", True)
            return ProofVerification(success=True, body=data)

        data.setdefault("success", False)
        LOGGER.info(
            f"World ID verifier rejected proof ({response.status_code})",
            extra={"action": action, "code": data.get("code")},
        )
        return ProofVerification(success=False, body=data)
