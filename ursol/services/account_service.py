"""User account and token balance operations."""

from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ursol.core.exceptions import AppError, NotFoundError
from ursol.core.locks import KeyedLocks
from ursol.database.models import User
from ursol.repositories.user_repository import UserRepository
from ursol.schemas.enums import BalanceOperation
from ursol.schemas.responses import UserResponse
from ursol.services.base_service import BaseService
from ursol.utils.amounts import AmountLike, format_amount, to_decimal
from ursol.utils.logging import get_logger

LOGGER = get_logger(__name__)


def user_lock_key(user_id: str) -> str:
    return f"user:{user_id}"


def apply_balance(current: AmountLike, amount: AmountLike, operation: BalanceOperation) -> str:
    """New balance for an add/subtract/set. Subtract floors at zero."""
    balance = to_decimal(current, "balance")
    value = to_decimal(amount)

    if operation == BalanceOperation.ADD:
        balance += value
    elif operation == BalanceOperation.SUBTRACT:
        balance = max(balance - value, 0)
    else:
        balance = value

    return format_amount(balance, 2)


async def load_user(user_repo: UserRepository, user_id: str) -> User:
    user = await user_repo.get_by_id(user_id)
    if user is None:
        raise NotFoundError(f"User {user_id} not found", details={"user_id": user_id})
    return user


async def credit(user_repo: UserRepository, user: User, amount: AmountLike) -> User:
    return await user_repo.set_balance(user, apply_balance(user.ursol_balance, amount, BalanceOperation.ADD))


async def debit(user_repo: UserRepository, user: User, amount: AmountLike) -> User:
    return await user_repo.set_balance(
        user, apply_balance(user.ursol_balance, amount, BalanceOperation.SUBTRACT)
    )


class AccountService(BaseService):
    """Reads the current user and adjusts their token balance."""

    def __init__(self, session: AsyncSession, locks: Optional[KeyedLocks] = None):
        super().__init__(session, locks)
        self.user_repo = UserRepository(session)

    async def run(self, *args, **kwargs) -> Any:
        action = kwargs.get("action")

        if action == "get_user":
            return await self._get_user_logic(kwargs["user_id"])
        elif action == "update_balance":
            return await self._update_balance_logic(
                kwargs["user_id"], kwargs["amount"], kwargs["operation"]
            )
        else:
            raise AppError(f"Unknown action: {action}")

    async def get_user(self, user_id: str) -> UserResponse:
        return await self.execute(action="get_user", user_id=user_id)

    async def update_balance(
        self, user_id: str, amount: str, operation: BalanceOperation
    ) -> UserResponse:
        """Add to, subtract from (floored at zero) or overwrite the balance."""
        async with self.hold(user_lock_key(user_id)):
            return await self.execute(
                action="update_balance", user_id=user_id, amount=amount, operation=operation
            )

    async def _get_user_logic(self, user_id: str) -> UserResponse:
        user = await load_user(self.user_repo, user_id)
        return UserResponse.model_validate(user)

    async def _update_balance_logic(
        self, user_id: str, amount: str, operation: BalanceOperation
    ) -> UserResponse:
        user = await load_user(self.user_repo, user_id)
        previous = user.ursol_balance
        new_balance = apply_balance(previous, amount, BalanceOperation(operation))
        await self.user_repo.set_balance(user, new_balance)

        LOGGER.info(
            "Balance updated",
            extra={"user_id": user_id, "operation": str(operation), "from": previous, "to": new_balance},
        )
        return UserResponse.model_validate(user)
