"""
User profile mapper.
"""

from crefin.domain.models.user import UserProfile
from crefin.infrastructure.db.models import UserProfileModel


class UserProfileMapper:
    """Maps UserProfileModel rows to read-only UserProfile values."""

    def model_to_domain(self, model: UserProfileModel) -> UserProfile:
        return UserProfile(
            user_id=model.id,
            email=model.email,
            full_name=model.full_name,
            phone=model.phone
        )
