"""
Client domain model.
Represents a customer billed by the freelancer who owns the record.
"""

from dataclasses import dataclass
from typing import Optional

from crefin.domain.models.base import AggregateRoot, Email, ValidationError


@dataclass(kw_only=True)
class Client(AggregateRoot):
    """
    Client aggregate root.
    Each client belongs to exactly one owner and is only visible to them.
    """

    owner_id: str
    name: str

    # Contact information
    email: Optional[str] = None
    phone: Optional[str] = None
    company: Optional[str] = None
    address: Optional[str] = None

    notes: Optional[str] = None

    def __post_init__(self):
        """Initialize client after creation."""
        super().__post_init__()
        self.validate()

    def validate(self) -> None:
        """Validate client state."""
        if not self.owner_id:
            raise ValidationError("Owner ID is required", "owner_id")

        if not self.name or not self.name.strip():
            raise ValidationError("Client name is required", "name")

        if len(self.name) > 255:
            raise ValidationError("Client name too long (max 255 characters)", "name")

        if self.email:
            Email(self.email)

        if self.phone and len(self.phone) > 50:
            raise ValidationError("Phone too long (max 50 characters)", "phone")

        if self.company and len(self.company) > 255:
            raise ValidationError("Company too long (max 255 characters)", "company")

        if self.notes and len(self.notes) > 2000:
            raise ValidationError("Notes too long (max 2000 characters)", "notes")

    def is_owned_by(self, owner_id: str) -> bool:
        return self.owner_id == owner_id

    def update_info(
        self,
        name: Optional[str] = None,
        email: Optional[str] = None,
        phone: Optional[str] = None,
        company: Optional[str] = None,
        address: Optional[str] = None,
        notes: Optional[str] = None
    ) -> None:
        """Update client information. ``None`` leaves a field unchanged."""
        if name is not None:
            self.name = name
        if email is not None:
            self.email = email or None
        if phone is not None:
            self.phone = phone or None
        if company is not None:
            self.company = company or None
        if address is not None:
            self.address = address or None
        if notes is not None:
            self.notes = notes or None

        self.validate()
        self.increment_version()

    @classmethod
    def create(
        cls,
        owner_id: str,
        name: str,
        email: Optional[str] = None,
        phone: Optional[str] = None,
        company: Optional[str] = None,
        address: Optional[str] = None,
        notes: Optional[str] = None
    ) -> 'Client':
        """Factory method to create a new client."""
        return cls(
            owner_id=owner_id,
            name=name.strip() if name else name,
            email=email or None,
            phone=phone or None,
            company=company or None,
            address=address or None,
            notes=notes or None
        )
