"""
User profile repository implementation using SQLAlchemy.
"""

from typing import Optional
from sqlalchemy.orm import Session

from crefin.domain.models.user import UserProfile
from crefin.domain.repositories.user_repository import UserProfileRepository
from crefin.infrastructure.db.models import UserProfileModel
from crefin.infrastructure.mappers.user_mapper import UserProfileMapper


class SQLAlchemyUserProfileRepository(UserProfileRepository):
    """Read-only profile lookups."""

    def __init__(self, session: Session):
        self.session = session
        self.mapper = UserProfileMapper()

    def get_by_id(self, user_id: str) -> Optional[UserProfile]:
        model = self.session.get(UserProfileModel, user_id)
        return self.mapper.model_to_domain(model) if model else None
