"""Unit tests for the Worldcoin developer portal client."""

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from ursol.core.config import WorldcoinSettings
from ursol.core.exceptions import (
    ConfigurationError,
    ExternalServiceUnavailableError,
    ExternalVerificationFailedError,
)
from ursol.services.verification.worldcoin import WorldcoinVerificationService, hash_to_field

API_URL = "https://portal.test"

# keccak256 of empty input, shifted right one byte
EMPTY_SIGNAL_HASH = "0x00c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a4"


def _response(method: str, url: str, status_code: int, json=None) -> httpx.Response:
    return httpx.Response(status_code, json=json, request=httpx.Request(method, url))


@pytest.fixture
def config() -> WorldcoinSettings:
    return WorldcoinSettings(APP_ID="app_ursol", DEV_PORTAL_API_KEY="secret", WORLDCOIN_API_URL=API_URL)


@pytest.fixture
def http_client():
    """Patch httpx.AsyncClient and hand back the client used inside `async with`."""
    client = AsyncMock()
    with patch("ursol.services.verification.worldcoin.httpx.AsyncClient") as client_cls:
        client_cls.return_value.__aenter__.return_value = client
        yield client


class TestGetTransaction:

    @pytest.mark.asyncio
    async def test_fetches_transaction(self, config, http_client):
        url = f"{API_URL}/api/v2/minikit/transaction/tx-1"
        http_client.get.return_value = _response(
            "GET", url, 200, {"reference": "abc", "transaction_status": "mined"}
        )

        result = await WorldcoinVerificationService(config, timeout=1.0).get_transaction("tx-1")

        assert result.reference == "abc"
        assert result.status == "mined"
        http_client.get.assert_awaited_once_with(
            url,
            params={"app_id": "app_ursol"},
            headers={"Authorization": "Bearer secret"},
        )

    @pytest.mark.asyncio
    async def test_status_fallback_field(self, config, http_client):
        http_client.get.return_value = _response(
            "GET", f"{API_URL}/x", 200, {"reference": "abc", "status": "failed"}
        )

        result = await WorldcoinVerificationService(config).get_transaction("tx-1")

        assert result.status == "failed"

    @pytest.mark.asyncio
    async def test_http_error(self, config, http_client):
        http_client.get.return_value = _response("GET", f"{API_URL}/x", 500, {"error": "boom"})

        with pytest.raises(ExternalVerificationFailedError) as exc_info:
            await WorldcoinVerificationService(config).get_transaction("tx-1")

        assert exc_info.value.details["status_code"] == 500

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [httpx.ReadTimeout("slow"), httpx.ConnectError("refused")])
    async def test_transport_errors(self, config, http_client, error):
        http_client.get.side_effect = error

        with pytest.raises(ExternalVerificationFailedError):
            await WorldcoinVerificationService(config).get_transaction("tx-1")

    @pytest.mark.asyncio
    async def test_non_object_body(self, config, http_client):
        http_client.get.return_value = _response("GET", f"{API_URL}/x", 200, ["not", "a", "dict"])

        with pytest.raises(ExternalVerificationFailedError):
            await WorldcoinVerificationService(config).get_transaction("tx-1")

    @pytest.mark.asyncio
    async def test_requires_credentials(self, http_client):
        service = WorldcoinVerificationService(WorldcoinSettings(APP_ID="", DEV_PORTAL_API_KEY=""))

        assert service.has_credentials is False
        with pytest.raises(ConfigurationError):
            await service.get_transaction("tx-1")
        http_client.get.assert_not_awaited()


class TestVerifyProof:

    @pytest.mark.asyncio
    async def test_success(self, config, http_client, proof_payload):
        url = f"{API_URL}/api/v2/verify/app_ursol"
        http_client.post.return_value = _response("POST", url, 200, {"nullifier_hash": "0xnullifier"})

        result = await WorldcoinVerificationService(config).verify_proof(proof_payload, "login")

        assert result.success is True
        assert result.body["success"] is True
        http_client.post.assert_awaited_once_with(
            url,
            json={
                "proof": "0xproof",
                "merkle_root": "0xroot",
                "nullifier_hash": "0xnullifier",
                "action": "login",
                "verification_level": "orb",
            },
        )

    @pytest.mark.asyncio
    async def test_forwards_signal_hash(self, config, http_client, proof_payload):
        http_client.post.return_value = _response("POST", f"{API_URL}/x", 200, {})

        await WorldcoinVerificationService(config).verify_proof(
            {**proof_payload, "signal_hash": "0xsignal"}, "login"
        )

        assert http_client.post.await_args.kwargs["json"]["signal_hash"] == "0xsignal"

    @pytest.mark.asyncio
    async def test_derives_signal_hash_from_signal(self, config, http_client, proof_payload):
        http_client.post.return_value = _response("POST", f"{API_URL}/x", 200, {})

        await WorldcoinVerificationService(config).verify_proof(proof_payload, "vote", signal="user-42")

        signal_hash = http_client.post.await_args.kwargs["json"]["signal_hash"]
        assert signal_hash == hash_to_field("user-42")
        assert len(signal_hash) == 66
        assert signal_hash.startswith("0x00")

    @pytest.mark.asyncio
    async def test_empty_signal_is_hashed(self, config, http_client, proof_payload):
        http_client.post.return_value = _response("POST", f"{API_URL}/x", 200, {})

        await WorldcoinVerificationService(config).verify_proof(proof_payload, "vote", signal="")

        assert http_client.post.await_args.kwargs["json"]["signal_hash"] == EMPTY_SIGNAL_HASH

    @pytest.mark.asyncio
    async def test_payload_signal_hash_wins_over_signal(self, config, http_client, proof_payload):
        http_client.post.return_value = _response("POST", f"{API_URL}/x", 200, {})

        await WorldcoinVerificationService(config).verify_proof(
            {**proof_payload, "signal_hash": "0xsignal"}, "vote", signal="user-42"
        )

        assert http_client.post.await_args.kwargs["json"]["signal_hash"] == "0xsignal"

    @pytest.mark.asyncio
    async def test_rejection(self, config, http_client, proof_payload):
        http_client.post.return_value = _response(
            "POST", f"{API_URL}/x", 400, {"code": "invalid_proof", "detail": "bad proof"}
        )

        result = await WorldcoinVerificationService(config).verify_proof(proof_payload, "login")

        assert result.success is False
        assert result.body["code"] == "invalid_proof"
        assert result.body["success"] is False

    @pytest.mark.asyncio
    async def test_unreachable(self, config, http_client, proof_payload):
        http_client.post.side_effect = httpx.ConnectError("refused")

        with pytest.raises(ExternalServiceUnavailableError):
            await WorldcoinVerificationService(config).verify_proof(proof_payload, "login")

    @pytest.mark.asyncio
    async def test_staging_app_id_without_credentials(self, http_client, proof_payload):
        settings = WorldcoinSettings(APP_ID="", WORLDCOIN_API_URL=API_URL, WORLD_ID_STAGING_APP_ID="app_staging")
        http_client.post.return_value = _response("POST", f"{API_URL}/x", 200, {})

        await WorldcoinVerificationService(settings).verify_proof(proof_payload, "login")

        assert http_client.post.await_args.args[0] == f"{API_URL}/api/v2/verify/app_staging"


def test_base_url_and_timeout(config):
    service = WorldcoinVerificationService(config, timeout=2.5)

    assert service.timeout == 2.5
    assert service.base_url == API_URL


class TestHashToField:

    def test_empty_string(self):
        assert hash_to_field("") == EMPTY_SIGNAL_HASH

    def test_hex_input_is_hashed_as_bytes(self):
        assert hash_to_field("0x") == EMPTY_SIGNAL_HASH
        assert hash_to_field("0xabc") == hash_to_field("0x0abc")
        assert hash_to_field("0xABC") == hash_to_field("0x0abc")

    def test_text_and_hex_differ(self):
        assert hash_to_field("abc") != hash_to_field("0xabc")

    def test_fits_the_field(self):
        value = hash_to_field("user-42")

        assert len(value) == 66
        assert int(value, 16) < 2 ** 248
