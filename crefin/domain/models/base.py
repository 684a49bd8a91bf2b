"""
Base entity and value objects for the domain layer.
This module contains the foundational classes for all domain entities.
"""

from datetime import date, datetime, timezone
from typing import Optional, Any, Dict
from abc import ABC, abstractmethod
from dataclasses import dataclass, field


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


@dataclass
class BaseEntity(ABC):
    """
    Base class for all domain entities.
    Provides common attributes and behavior for all entities.
    """

    id: Optional[int] = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def __post_init__(self):
        """Initialize entity after creation."""
        if self.created_at is None:
            self.created_at = utcnow()
        if self.updated_at is None:
            self.updated_at = utcnow()

    def __eq__(self, other: Any) -> bool:
        """Entities are equal if they have the same ID and are of the same type."""
        if not isinstance(other, self.__class__):
            return False
        if self.id is None or other.id is None:
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        """Hash based on entity ID."""
        if self.id is None:
            return hash(id(self))
        return hash((self.__class__.__name__, self.id))

    def mark_as_updated(self) -> None:
        """Update the updated_at timestamp."""
        self.updated_at = utcnow()

    @property
    def is_new(self) -> bool:
        """Check if entity is new (not persisted)."""
        return self.id is None

    def validate(self) -> None:
        """
        Validate the entity's state.
        Should be overridden by subclasses to implement specific validation rules.
        Raises ValidationError if the entity is in an invalid state.
        """
        pass

    def to_dict(self) -> Dict[str, Any]:
        """Convert entity to dictionary representation."""
        data = {}
        for key, value in self.__dict__.items():
            if key.startswith('_'):
                continue
            if isinstance(value, (datetime, date)):
                data[key] = value.isoformat()
            elif isinstance(value, BaseEntity):
                data[key] = value.to_dict()
            elif isinstance(value, list):
                data[key] = [
                    item.to_dict() if hasattr(item, "to_dict") else item
                    for item in value
                ]
            else:
                data[key] = value
        return data


@dataclass
class AggregateRoot(BaseEntity):
    """
    Base class for aggregate roots.
    Aggregate roots are the entry points to aggregates.
    """

    version: int = field(default=1)

    def increment_version(self) -> None:
        """Increment the aggregate version and touch updated_at."""
        self.version += 1
        self.mark_as_updated()


class DomainException(Exception):
    """Base exception for domain errors."""

    def __init__(self, message: str, code: Optional[str] = None):
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(self.message)


class ValidationError(DomainException):
    """Exception raised when entity validation fails."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, "VALIDATION_ERROR")
        self.field = field


class EntityNotFoundError(DomainException):
    """
    Exception raised when an entity is not found.

    Also raised when the entity exists but belongs to another owner, so
    callers cannot probe for foreign ids.
    """

    def __init__(self, entity_type: str, entity_id: Any):
        message = f"{entity_type} with id {entity_id} not found"
        super().__init__(message, "ENTITY_NOT_FOUND")
        self.entity_type = entity_type
        self.entity_id = entity_id


class ConflictError(DomainException):
    """Exception raised when a write loses against concurrent or prior state."""

    def __init__(self, message: str):
        super().__init__(message, "CONFLICT")


class DuplicateEntityError(ConflictError):
    """Exception raised when a write collides with a unique key."""

    def __init__(self, entity_type: str, field: str, value: Any = None):
        message = f"{entity_type} with {field}='{value}' already exists"
        super().__init__(message)
        self.code = "DUPLICATE_ENTITY"
        self.entity_type = entity_type
        self.field = field
        self.value = value


class PreconditionFailedError(DomainException):
    """Exception raised when the entity's current state forbids the operation."""

    def __init__(self, message: str):
        super().__init__(message, "PRECONDITION_FAILED")


class ExternalServiceDegraded(DomainException):
    """Exception raised when an optional external collaborator is unavailable."""

    def __init__(self, service: str, reason: str):
        super().__init__(f"{service} unavailable: {reason}", "EXTERNAL_SERVICE_DEGRADED")
        self.service = service
        self.reason = reason


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for value objects.
    Value objects are immutable and are compared by their values.
    """

    def __post_init__(self):
        """Validate value object after creation."""
        self.validate()

    @abstractmethod
    def validate(self) -> None:
        """Validate the value object's state."""
        pass


@dataclass(frozen=True)
class Email(ValueObject):
    """Email value object with validation."""

    value: str

    def validate(self) -> None:
        """Validate email format."""
        if not self.value:
            raise ValidationError("Email cannot be empty", "email")

        if '@' not in self.value or '.' not in self.value.split('@')[1]:
            raise ValidationError(f"Invalid email format: {self.value}", "email")

        if len(self.value) > 255:
            raise ValidationError("Email too long (max 255 characters)", "email")

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class InvoiceNumber(ValueObject):
    """
    Invoice number value object.

    Rendered as ``<prefix>-<year>-<sequence>`` with the sequence padded to
    three digits, e.g. ``INV-2025-001``. Sequences above 999 widen naturally.
    """

    prefix: str
    year: int
    sequence: int

    def validate(self) -> None:
        """Validate invoice number parts."""
        if self.sequence <= 0:
            raise ValidationError("Invoice sequence must be positive", "invoice_number")

        if not self.prefix or len(self.prefix) > 10:
            raise ValidationError("Invoice prefix must be 1-10 characters", "invoice_number")

        if not 1000 <= self.year <= 9999:
            raise ValidationError(f"Invalid invoice year: {self.year}", "invoice_number")

    def __str__(self) -> str:
        return f"{self.prefix}-{self.year}-{self.sequence:03d}"
