"""World ID proof verification."""

from typing import Any, Dict, Optional

from fastapi import status
from sqlalchemy.ext.asyncio import AsyncSession

from ursol.core.config import settings
from ursol.core.exceptions import AppError, ExternalServiceUnavailableError, InvalidProofError
from ursol.repositories.activity_repository import ActivityRepository
from ursol.repositories.user_repository import UserRepository
from ursol.schemas.enums import ActivityType
from ursol.schemas.responses import VerifyResponse
from ursol.services.base_service import BaseService
from ursol.services.verification.base import VerificationService
from ursol.services.verification.worldcoin import PROOF_FIELDS
from ursol.utils.logging import get_logger

LOGGER = get_logger(__name__)


class IdentityService(BaseService):
    """Passes World ID proofs to the cloud verifier and records the outcome.

    When the verifier is unreachable and the mock fallback is enabled in a
    development environment, the proof is accepted optimistically.
    """

    def __init__(
        self,
        session: AsyncSession,
        verification: VerificationService,
        mock_fallback: Optional[bool] = None,
    ):
        super().__init__(session)
        self.verification = verification
        self.mock_fallback = settings.world_id_mock_enabled if mock_fallback is None else mock_fallback
        self.user_repo = UserRepository(session)
        self.activity_repo = ActivityRepository(session)

    async def run(self, *args, **kwargs) -> Any:
        action = kwargs.get("action")

        if action == "verify_proof":
            return await self._verify_proof_logic(
                kwargs["user_id"], kwargs["payload"], kwargs["proof_action"], kwargs.get("signal")
            )
        else:
            raise AppError(f"Unknown action: {action}")

    def validate(self, *args, **kwargs):
        payload = kwargs.get("payload") or {}
        missing = [field for field in PROOF_FIELDS if not payload.get(field)]
        if missing:
            raise InvalidProofError("Invalid proof data", details={"missing": missing})

    async def verify_proof(
        self, user_id: str, payload: Dict[str, Any], action: str, signal: Optional[str] = None
    ) -> VerifyResponse:
        return await self.execute(
            action="verify_proof", user_id=user_id, payload=payload, proof_action=action, signal=signal
        )

    async def _verify_proof_logic(
        self, user_id: str, payload: Dict[str, Any], action: str, signal: Optional[str]
    ) -> VerifyResponse:
        try:
            result = await self.verification.verify_proof(payload, action, signal)
        except ExternalServiceUnavailableError:
            if not self.mock_fallback:
                raise
            LOGGER.warning("Cloud verification not available, using mock verification", extra={"action": action})
            await self._record_verified(user_id, action, mock=True)
            return VerifyResponse(
                verify_res={"success": True, "action": action, "nullifier_hash": payload["nullifier_hash"]},
                status=status.HTTP_200_OK,
            )

        if not result.success:
            LOGGER.info(f"World ID verification failed for action: {action}", extra={"code": result.body.get("code")})
            return VerifyResponse(verify_res=result.body, status=status.HTTP_400_BAD_REQUEST)

        await self._record_verified(user_id, action, mock=False)
        LOGGER.info(
            f"World ID verification successful for action: {action}",
            extra={"nullifier_hash": payload["nullifier_hash"]},
        )
        return VerifyResponse(verify_res=result.body, status=status.HTTP_200_OK)

    async def _record_verified(self, user_id: str, action: str, mock: bool) -> None:
        description = f"World ID verification completed for action: {action}"
        if mock:
            description += " (mock)"

        await self.activity_repo.record(
            user_id=user_id,
            type=ActivityType.VERIFICATION.value,
            description=description,
            amount="0",
        )
        user = await self.user_repo.get_by_id(user_id)
        if user is not None:
            await self.user_repo.mark_verified(user)
