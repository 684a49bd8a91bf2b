"""Unit of work interface.
Groups the repositories that share one database transaction.
"""

from abc import ABC, abstractmethod

from .client_repository import ClientRepository
from .invoice_repository import InvoiceRepository
from .income_repository import IncomeRepository
from .user_repository import UserProfileRepository
from .invoice_sequence_repository import InvoiceSequenceRepository


class UnitOfWork(ABC):
    """
    Transaction boundary for use cases.

    Used as a context manager: leaving the block with an exception rolls
    back everything written through its repositories. Leaving it normally
    does not commit; callers commit explicitly. Unique-key violations
    raised by the store surface as ``DuplicateEntityError``.
    """

    clients: ClientRepository
    invoices: InvoiceRepository
    income: IncomeRepository
    users: UserProfileRepository
    sequences: InvoiceSequenceRepository

    def __enter__(self) -> "UnitOfWork":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is not None:
            self.rollback()

    @abstractmethod
    def commit(self) -> None:
        pass

    @abstractmethod
    def rollback(self) -> None:
        pass

