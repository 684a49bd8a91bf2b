"""
Infrastructure mappers module.
Contains mappers for converting between domain entities and database models.
"""

from .user_mapper import UserProfileMapper
from .client_mapper import ClientMapper
from .invoice_mapper import InvoiceMapper
from .income_mapper import IncomeRecordMapper

__all__ = [
    "UserProfileMapper",
    "ClientMapper",
    "InvoiceMapper",
    "IncomeRecordMapper",
]
