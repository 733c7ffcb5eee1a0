from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ursol.database.models import Payment
from ursol.repositories.base_repository import BaseRepository


class PaymentRepository(BaseRepository[Payment]):
    """Repository for payments keyed by their reference id."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, Payment)

    def _apply_ordering(self, query):
        return query.order_by(Payment.created_at.desc())

    async def get_by_reference(self, reference: str) -> Optional[Payment]:
        """Look up a payment by reference.

        References are stored lowercase, so the key is trimmed and lowercased
        before matching.
        """
        key = (reference or "").strip().lower()
        if not key:
            return None

        try:
            result = await self.session.execute(
                select(Payment).where(Payment.payment_id == key)
            )
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            self.logger.error(
                f"Error retrieving payment by reference {key}: {str(e)}",
                exc_info=True
            )
            raise
