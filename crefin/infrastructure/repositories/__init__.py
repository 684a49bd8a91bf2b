"""
Infrastructure repositories module.
Contains SQLAlchemy implementations of domain repositories.
"""

from .user_repository import SQLAlchemyUserProfileRepository
from .client_repository import SQLAlchemyClientRepository
from .invoice_repository import SQLAlchemyInvoiceRepository
from .income_repository import SQLAlchemyIncomeRepository
from .invoice_sequence_repository import SQLAlchemyInvoiceSequenceRepository
from .unit_of_work import SQLAlchemyUnitOfWork

__all__ = [
    "SQLAlchemyUserProfileRepository",
    "SQLAlchemyClientRepository",
    "SQLAlchemyInvoiceRepository",
    "SQLAlchemyIncomeRepository",
    "SQLAlchemyInvoiceSequenceRepository",
    "SQLAlchemyUnitOfWork",
]
