"""
Client DTOs for the application layer.
Data Transfer Objects for client-related operations.
"""

from typing import Optional, List
from pydantic import Field, field_validator

from .base_dto import (
    BaseDTO, ResponseDTO, CreateRequestDTO, UpdateRequestDTO, ListRequestDTO
)
from crefin.domain.models.client import Client


def _strip_or_none(v):
    if isinstance(v, str):
        v = v.strip()
        return v or None
    return v


class CreateClientRequestDTO(CreateRequestDTO):
    """DTO for creating a new client."""

    name: str = Field(min_length=1, max_length=255, description="Client name")
    email: Optional[str] = Field(default=None, max_length=255, description="Contact email")
    phone: Optional[str] = Field(default=None, max_length=50, description="Phone number")
    company: Optional[str] = Field(default=None, max_length=255, description="Company name")
    address: Optional[str] = Field(default=None, max_length=500, description="Postal address")
    notes: Optional[str] = Field(default=None, max_length=2000, description="Notes")

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError('Client name cannot be blank')
        return v

    @field_validator('email', 'phone', 'company', 'address', 'notes', mode='before')
    @classmethod
    def blank_to_none(cls, v):
        return _strip_or_none(v)


class UpdateClientRequestDTO(UpdateRequestDTO):
    """DTO for updating client information. Omitted fields are left unchanged."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    email: Optional[str] = Field(default=None, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=50)
    company: Optional[str] = Field(default=None, max_length=255)
    address: Optional[str] = Field(default=None, max_length=500)
    notes: Optional[str] = Field(default=None, max_length=2000)

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError('Client name cannot be blank')
        return v.strip() if v else v


class ListClientsRequestDTO(ListRequestDTO):
    """DTO for listing clients."""

    search: Optional[str] = Field(default=None, max_length=255, description="Match name, email or company")


class ClientSummaryDTO(BaseDTO):
    """Compact client view embedded in invoice responses."""

    id: int
    name: str
    email: Optional[str] = None
    company: Optional[str] = None

    @classmethod
    def from_domain(cls, client: Client) -> "ClientSummaryDTO":
        return cls(id=client.id, name=client.name, email=client.email, company=client.company)


class ClientResponseDTO(ResponseDTO):
    """DTO for client responses."""

    owner_id: str
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    company: Optional[str] = None
    address: Optional[str] = None
    notes: Optional[str] = None

    @classmethod
    def from_domain(cls, client: Client) -> "ClientResponseDTO":
        """Create DTO from domain entity."""
        return cls(
            id=client.id,
            owner_id=client.owner_id,
            name=client.name,
            email=client.email,
            phone=client.phone,
            company=client.company,
            address=client.address,
            notes=client.notes,
            created_at=client.created_at,
            updated_at=client.updated_at
        )


class ClientListResponseDTO(BaseDTO):
    """DTO for a page of clients."""

    clients: List[ClientResponseDTO]
    total: int
    limit: int
    offset: int
