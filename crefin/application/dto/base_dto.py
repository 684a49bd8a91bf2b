"""
Base DTOs for the application layer.
Provides common patterns for request/response data transfer objects.
"""

from typing import Any, Dict, Optional
from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict

from crefin.domain.models.base import utcnow


class BaseDTO(BaseModel):
    """Base DTO with common configuration."""

    model_config = ConfigDict(
        # Allow population by field name or alias
        populate_by_name=True,
        # Convert enum values to their values
        use_enum_values=True,
        # Validate assignment
        validate_assignment=True,
        # Reject unknown fields
        extra="forbid",
    )


class RequestDTO(BaseDTO):
    """Base class for request DTOs."""
    pass


class ResponseDTO(BaseDTO):
    """Base class for response DTOs."""

    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CreateRequestDTO(RequestDTO):
    """Base class for creation request DTOs."""
    pass


class UpdateRequestDTO(RequestDTO):
    """Base class for partial update request DTOs."""

    def has_changes(self) -> bool:
        return bool(self.model_dump(exclude_unset=True))


class ListRequestDTO(RequestDTO):
    """Base class for list request DTOs with offset pagination."""

    limit: int = Field(default=50, ge=1, le=100, description="Maximum items to return")
    offset: int = Field(default=0, ge=0, description="Items to skip")


class HealthCheckResponseDTO(BaseDTO):
    """Health check response DTO."""

    status: str = Field(description="Service status")
    timestamp: datetime = Field(default_factory=utcnow, description="Check timestamp")
    environment: Optional[str] = Field(default=None, description="Deployment environment")
    version: Optional[str] = Field(default=None, description="Application version")
    dependencies: Optional[Dict[str, str]] = Field(default=None, description="Dependency statuses")

