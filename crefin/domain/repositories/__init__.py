"""
Repository interfaces for the domain layer.
This module exports all repository interfaces (ports) for dependency injection.
"""

from .client_repository import ClientRepository
from .invoice_repository import InvoiceRepository, InvoiceFilter, InvoiceSummary
from .income_repository import IncomeRepository
from .user_repository import UserProfileRepository
from .invoice_sequence_repository import InvoiceSequenceRepository
from .unit_of_work import UnitOfWork

__all__ = [
    "ClientRepository",
    "InvoiceRepository",
    "InvoiceFilter",
    "InvoiceSummary",
    "IncomeRepository",
    "UserProfileRepository",
    "InvoiceSequenceRepository",
    "UnitOfWork",
]
