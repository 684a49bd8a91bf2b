"""
Application layer use cases.
Business logic for the financial tracker.
"""

from .base_use_case import (
    BaseUseCase,
    QueryUseCase,
    CommandUseCase,
    CreateUseCase,
    UpdateUseCase,
    DeleteUseCase,
    GetByIdUseCase,
    ListUseCase,
)
from .ownership import OwnershipGuard
from .payment_prediction import InvoicePredictionEnricher
from .client_use_cases import (
    UpdateClientCommand,
    CreateClientUseCase,
    ListClientsUseCase,
    GetClientByIdUseCase,
    UpdateClientUseCase,
    DeleteClientUseCase,
)
from .invoice_use_cases import (
    UpdateInvoiceCommand,
    MarkInvoicePaidCommand,
    CreateInvoiceUseCase,
    ListInvoicesUseCase,
    GetInvoiceByIdUseCase,
    UpdateInvoiceUseCase,
    MarkInvoicePaidUseCase,
    DeleteInvoiceUseCase,
)
from .income_use_cases import ListIncomeUseCase

__all__ = [
    # Base Use Cases
    "BaseUseCase",
    "QueryUseCase",
    "CommandUseCase",
    "CreateUseCase",
    "UpdateUseCase",
    "DeleteUseCase",
    "GetByIdUseCase",
    "ListUseCase",
    "OwnershipGuard",
    "InvoicePredictionEnricher",

    # Client Use Cases
    "UpdateClientCommand",
    "CreateClientUseCase",
    "ListClientsUseCase",
    "GetClientByIdUseCase",
    "UpdateClientUseCase",
    "DeleteClientUseCase",

    # Invoice Use Cases
    "UpdateInvoiceCommand",
    "MarkInvoicePaidCommand",
    "CreateInvoiceUseCase",
    "ListInvoicesUseCase",
    "GetInvoiceByIdUseCase",
    "UpdateInvoiceUseCase",
    "MarkInvoicePaidUseCase",
    "DeleteInvoiceUseCase",

    # Income Use Cases
    "ListIncomeUseCase",
]
