"""
User profile domain model.
Owners are provisioned by the authentication service; this module only
carries the read-only profile shown on invoices.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class UserProfile:
    """Read-only view of an invoice owner."""

    user_id: str
    email: str
    full_name: Optional[str] = None
    phone: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.full_name or self.email

    def to_dict(self) -> dict:
        return {
            "id": self.user_id,
            "name": self.full_name,
            "email": self.email,
            "phone": self.phone,
        }
