"""Client repository interface.
Defines the contract for client data persistence operations.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from crefin.domain.models.client import Client


class ClientRepository(ABC):
    """
    Repository interface for Client aggregate.
    Every lookup is scoped to the owning user.
    """

    @abstractmethod
    def save(self, client: Client) -> Client:
        """
        Save a client entity.
        Returns the saved client with its ID assigned.
        """
        pass

    @abstractmethod
    def get_by_id(self, client_id: int) -> Optional[Client]:
        """Find a client by ID regardless of owner."""
        pass

    @abstractmethod
    def get_owned(self, owner_id: str, client_id: int) -> Optional[Client]:
        """Find a client by ID only if it belongs to ``owner_id``."""
        pass

    @abstractmethod
    def get_many_owned(self, owner_id: str, client_ids: List[int]) -> List[Client]:
        """Fetch several of an owner's clients at once; unknown ids are skipped."""
        pass

    @abstractmethod
    def list_by_owner(
        self,
        owner_id: str,
        search: Optional[str] = None,
        limit: int = 50,
        offset: int = 0
    ) -> List[Client]:
        """
        List an owner's clients, newest first.
        ``search`` matches name, email or company case-insensitively.
        """
        pass

    @abstractmethod
    def count_by_owner(self, owner_id: str, search: Optional[str] = None) -> int:
        pass

    @abstractmethod
    def has_invoices(self, client_id: int) -> bool:
        """Check whether any invoice references the client."""
        pass

    @abstractmethod
    def delete(self, client_id: int) -> bool:
        pass
