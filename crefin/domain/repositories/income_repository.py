"""Income ledger repository interface."""

from abc import ABC, abstractmethod
from typing import List, Optional

from crefin.domain.models.income import IncomeRecord


class IncomeRepository(ABC):
    """Persistence contract for income records."""

    @abstractmethod
    def add(self, record: IncomeRecord) -> IncomeRecord:
        """Insert a record inside the caller's transaction and assign its ID."""
        pass

    @abstractmethod
    def get_by_id(self, record_id: int) -> Optional[IncomeRecord]:
        pass

    @abstractmethod
    def list_by_owner(self, owner_id: str) -> List[IncomeRecord]:
        pass
