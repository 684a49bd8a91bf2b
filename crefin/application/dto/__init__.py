"""
Application layer DTOs.
Data Transfer Objects for API requests and responses.
"""

from .base_dto import *
from .client_dto import *
from .invoice_dto import *
from .income_dto import *

__all__ = [
    # Base DTOs
    "BaseDTO",
    "RequestDTO",
    "ResponseDTO",
    "CreateRequestDTO",
    "UpdateRequestDTO",
    "ListRequestDTO",
    "HealthCheckResponseDTO",

    # Client DTOs
    "CreateClientRequestDTO",
    "UpdateClientRequestDTO",
    "ListClientsRequestDTO",
    "ClientSummaryDTO",
    "ClientResponseDTO",
    "ClientListResponseDTO",

    # Invoice DTOs
    "LineItemDTO",
    "CreateInvoiceRequestDTO",
    "UpdateInvoiceRequestDTO",
    "ListInvoicesRequestDTO",
    "MarkInvoicePaidRequestDTO",
    "UserSummaryDTO",
    "IncomeSummaryDTO",
    "InvoiceResponseDTO",
    "InvoiceDetailsResponseDTO",
    "InvoiceSummaryDTO",
    "InvoiceListResponseDTO",
    "MarkInvoicePaidResponseDTO",

    # Income DTOs
    "IncomeRecordResponseDTO",
    "IncomeListResponseDTO",
]
