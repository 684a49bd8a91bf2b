"""User profile repository interface."""

from abc import ABC, abstractmethod
from typing import Optional

from crefin.domain.models.user import UserProfile


class UserProfileRepository(ABC):
    """Read-only access to owner profiles."""

    @abstractmethod
    def get_by_id(self, user_id: str) -> Optional[UserProfile]:
        pass
