from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ursol.database.models import Beneficiary
from ursol.repositories.base_repository import BaseRepository


class BeneficiaryRepository(BaseRepository[Beneficiary]):
    """Repository for beneficiary designations, keyed by user."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, Beneficiary)

    async def get_by_user(self, user_id: str) -> Optional[Beneficiary]:
        result = await self.session.execute(
            select(Beneficiary).where(Beneficiary.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def upsert(
        self,
        user_id: str,
        encrypted_data: str,
        on_chain_settings: Optional[Dict[str, Any]] = None,
    ) -> Beneficiary:
        """Replace the user's designation, creating it on first save.

        The existing row keeps its id and created_at.
        """
        existing = await self.get_by_user(user_id)
        if existing is None:
            return await self.create(
                user_id=user_id,
                encrypted_data=encrypted_data,
                on_chain_settings=on_chain_settings,
            )

        try:
            existing.encrypted_data = encrypted_data
            existing.on_chain_settings = on_chain_settings
            existing.updated_at = datetime.now(timezone.utc)
            await self.session.flush()
            return existing
        except SQLAlchemyError as e:
            self.logger.error(
                f"Error replacing beneficiary for user {user_id}: {str(e)}",
                exc_info=True
            )
            raise
