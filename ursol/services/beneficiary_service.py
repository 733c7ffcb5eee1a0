from typing import Any, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ursol.core.exceptions import AppError
from ursol.core.locks import KeyedLocks
from ursol.repositories.beneficiary_repository import BeneficiaryRepository
from ursol.schemas.requests import BeneficiaryRequest
from ursol.schemas.responses import BeneficiaryResponse
from ursol.services.account_service import user_lock_key
from ursol.services.base_service import BaseService
from ursol.utils.logging import get_logger

LOGGER = get_logger(__name__)


class BeneficiaryService(BaseService):
    """Stores the user's encrypted beneficiary designation (one per user)."""

    def __init__(self, session: AsyncSession, locks: Optional[KeyedLocks] = None):
        super().__init__(session, locks)
        self.beneficiary_repo = BeneficiaryRepository(session)

    async def run(self, *args, **kwargs) -> Any:
        action = kwargs.get("action")

        if action == "list_beneficiaries":
            return await self._list_beneficiaries_logic(kwargs["user_id"])
        elif action == "save_beneficiary":
            return await self._save_beneficiary_logic(kwargs["user_id"], kwargs["request"])
        else:
            raise AppError(f"Unknown action: {action}")

    async def list_beneficiaries(self, user_id: str) -> List[BeneficiaryResponse]:
        return await self.execute(action="list_beneficiaries", user_id=user_id)

    async def save_beneficiary(self, user_id: str, request: BeneficiaryRequest) -> BeneficiaryResponse:
        async with self.hold(user_lock_key(user_id)):
            return await self.execute(action="save_beneficiary", user_id=user_id, request=request)

    async def _list_beneficiaries_logic(self, user_id: str) -> List[BeneficiaryResponse]:
        beneficiary = await self.beneficiary_repo.get_by_user(user_id)
        return [BeneficiaryResponse.model_validate(beneficiary)] if beneficiary else []

    async def _save_beneficiary_logic(self, user_id: str, request: BeneficiaryRequest) -> BeneficiaryResponse:
        beneficiary = await self.beneficiary_repo.upsert(
            user_id=user_id,
            encrypted_data=request.encrypted_data,
            on_chain_settings=request.on_chain_settings,
        )
        LOGGER.info("Beneficiary saved", extra={"user_id": user_id, "beneficiary_id": beneficiary.id})
        return BeneficiaryResponse.model_validate(beneficiary)
