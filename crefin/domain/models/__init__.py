"""
Domain models for the financial tracker.
This module exports all domain entities and value objects.
"""

# Base classes
from .base import (
    BaseEntity,
    AggregateRoot,
    DomainException,
    ValidationError,
    EntityNotFoundError,
    ConflictError,
    DuplicateEntityError,
    PreconditionFailedError,
    ExternalServiceDegraded,
    ValueObject,
    Email,
    InvoiceNumber
)

# Domain entities
from .user import UserProfile

from .client import Client

from .invoice import (
    Invoice,
    InvoiceStatus,
    InvoiceLineItem,
    ALLOWED_TRANSITIONS,
    DEFAULT_TERMS
)

from .income import IncomeRecord, IncomeSource

from .payment import (
    ClientPaymentStatistics,
    PaidInvoiceDates,
    PaymentPrediction
)

__all__ = [
    # Base classes
    "BaseEntity",
    "AggregateRoot",
    "DomainException",
    "ValidationError",
    "EntityNotFoundError",
    "ConflictError",
    "DuplicateEntityError",
    "PreconditionFailedError",
    "ExternalServiceDegraded",
    "ValueObject",
    "Email",
    "InvoiceNumber",

    # User
    "UserProfile",

    # Client
    "Client",

    # Invoice
    "Invoice",
    "InvoiceStatus",
    "InvoiceLineItem",
    "ALLOWED_TRANSITIONS",
    "DEFAULT_TERMS",

    # Income
    "IncomeRecord",
    "IncomeSource",

    # Payment behaviour
    "ClientPaymentStatistics",
    "PaidInvoiceDates",
    "PaymentPrediction",
]
