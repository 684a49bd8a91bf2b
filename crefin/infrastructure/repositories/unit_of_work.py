"""
SQLAlchemy unit of work.
Binds every repository to one session so their writes commit or roll back together.
"""

import logging
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from crefin.domain.models.base import DuplicateEntityError
from crefin.domain.repositories.unit_of_work import UnitOfWork
from crefin.infrastructure.db.database import is_unique_violation

from .client_repository import SQLAlchemyClientRepository
from .invoice_repository import SQLAlchemyInvoiceRepository
from .income_repository import SQLAlchemyIncomeRepository
from .user_repository import SQLAlchemyUserProfileRepository
from .invoice_sequence_repository import SQLAlchemyInvoiceSequenceRepository

logger = logging.getLogger(__name__)


class SQLAlchemyUnitOfWork(UnitOfWork):
    """Unit of work over a single SQLAlchemy session."""

    def __init__(self, session: Session):
        self.session = session
        self.clients = SQLAlchemyClientRepository(session)
        self.invoices = SQLAlchemyInvoiceRepository(session)
        self.income = SQLAlchemyIncomeRepository(session)
        self.users = SQLAlchemyUserProfileRepository(session)
        self.sequences = SQLAlchemyInvoiceSequenceRepository(session)

    def commit(self) -> None:
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            if not is_unique_violation(exc):
                raise
            raise DuplicateEntityError("Record", "unique key", str(exc.orig)) from exc

    def rollback(self) -> None:
        self.session.rollback()
        logger.debug("Transaction rolled back")
