"""
Base use case classes for the application layer.
Provides common patterns and structure for use case implementations.
"""

import logging
from abc import ABC, abstractmethod
from datetime import date
from typing import Callable, Optional, TypeVar, Generic

from crefin.domain.models.base import utcnow
from crefin.domain.repositories.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)

T = TypeVar('T')
R = TypeVar('R')


class BaseUseCase(ABC, Generic[T, R]):
    """
    Base class for all use cases.

    Every use case runs on behalf of one authenticated owner. Domain
    exceptions propagate to the caller; the web layer maps them to HTTP
    responses in one place.
    """

    def __init__(self, uow: UnitOfWork, today: Optional[Callable[[], date]] = None):
        self.uow = uow
        self.today = today or date.today

    async def execute(self, owner_id: str, request: T) -> R:
        """
        Execute the use case for ``owner_id``.
        """
        started = utcnow()
        await self._validate_request(owner_id, request)

        try:
            return await self._execute_business_logic(owner_id, request)
        finally:
            elapsed = (utcnow() - started).total_seconds()
            logger.debug(f"{type(self).__name__} finished in {elapsed:.3f}s")

    async def _validate_request(self, owner_id: str, request: T) -> None:
        """
        Validate the request. Override in subclasses if needed.
        """
        if not owner_id:
            raise PermissionError("User authentication required")

    @abstractmethod
    async def _execute_business_logic(self, owner_id: str, request: T) -> R:
        """
        Execute the core business logic. Must be implemented by subclasses.
        """
        pass


class QueryUseCase(BaseUseCase[T, R]):
    """
    Base class for query use cases (read operations).
    """
    pass


class CommandUseCase(BaseUseCase[T, R]):
    """
    Base class for command use cases (write operations).
    Runs the command inside the unit of work; the command commits explicitly
    and any exception rolls back everything it wrote.
    """

    async def _execute_business_logic(self, owner_id: str, request: T) -> R:
        with self.uow:
            return await self._execute_command_logic(owner_id, request)

    @abstractmethod
    async def _execute_command_logic(self, owner_id: str, request: T) -> R:
        """Execute the command logic. Must be implemented by subclasses."""
        pass


# Specific use case patterns
class CreateUseCase(CommandUseCase[T, R]):
    """Base class for entity creation use cases."""
    pass


class UpdateUseCase(CommandUseCase[T, R]):
    """Base class for entity update use cases."""
    pass


class DeleteUseCase(CommandUseCase[T, R]):
    """Base class for entity deletion use cases."""
    pass


class GetByIdUseCase(QueryUseCase[T, R]):
    """Base class for get-by-id use cases."""

    async def _validate_request(self, owner_id: str, request: T) -> None:
        """Validate get-by-id request."""
        await super()._validate_request(owner_id, request)

        if isinstance(request, int) and request <= 0:
            raise ValueError("ID must be positive")


class ListUseCase(QueryUseCase[T, R]):
    """Base class for list use cases."""
    pass
