from sqlalchemy.ext.asyncio import AsyncSession

from ursol.database.models import Claim
from ursol.repositories.base_repository import BaseRepository


class ClaimRepository(BaseRepository[Claim]):
    """Repository for insurance claims."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, Claim)

    def _apply_ordering(self, query):
        return query.order_by(Claim.submitted_at.asc())
