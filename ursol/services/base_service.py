from contextlib import nullcontext
from typing import Optional, Any
from abc import ABC, abstractmethod

from sqlalchemy.ext.asyncio import AsyncSession

from ursol.core.exceptions import AppError
from ursol.core.locks import KeyedLocks
from ursol.utils.logging import get_logger

LOGGER = get_logger(__name__)


class BaseService(ABC):
    """Base class for application services.

    Provides a standardized execution flow with validation, a single
    commit per operation and error handling.
    """

    def __init__(self, session: Optional[AsyncSession] = None, locks: Optional[KeyedLocks] = None):
        """Initialize the service.

        Args:
            session: Database session owning the unit of work
            locks: Per-key lock registry serialising read-modify-write operations
        """
        self.session = session
        self.locks = locks
        self.logger = LOGGER

    def hold(self, key: str):
        """Lock `key` for the duration of an operation, if a registry is configured."""
        if self.locks is None:
            return nullcontext()
        return self.locks.hold(key)

    async def execute(self, *args, **kwargs) -> Any:
        """Execute the service logic.

        This template method handles:
        1. Input validation
        2. Core logic execution
        3. Commit on success, rollback on any failure

        Args:
            *args: Positional arguments for the service
            **kwargs: Keyword arguments for the service

        Returns:
            Result of the service execution

        Raises:
            AppError: If execution fails
        """
        try:
            self.validate(*args, **kwargs)

            result = await self.run(*args, **kwargs)

            if self.session is not None:
                await self.session.commit()

            return result

        except AppError:
            await self._rollback()
            raise

        except Exception as e:
            await self._rollback()
            self.logger.error(
                f"Service execution failed: {str(e)}",
                exc_info=True,
                extra={"service": self.__class__.__name__, "action": kwargs.get("action")}
            )
            raise AppError(f"Service execution failed: {str(e)}", original_error=e)

    async def _rollback(self) -> None:
        if self.session is not None:
            await self.session.rollback()

    def validate(self, *args, **kwargs):
        """Validate service input.

        Override this method to implement custom validation logic.

        Raises:
            ValidationError: If input is invalid
        """
        pass

    @abstractmethod
    async def run(self, *args, **kwargs) -> Any:
        """Run the core service logic.

        Must be implemented by subclasses.
        """
        pass
