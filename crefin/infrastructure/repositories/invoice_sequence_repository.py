"""
Invoice sequence repository implementation using SQLAlchemy.

Counters live in ``invoice_sequences``, one row per owner and year. The row
is read with ``SELECT ... FOR UPDATE`` so concurrent allocations for the same
owner and year serialize on it; the increment only becomes visible when the
invoice transaction commits, and a rollback returns the value.
"""

import logging
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from crefin.domain.models.base import DuplicateEntityError
from crefin.domain.repositories.invoice_sequence_repository import InvoiceSequenceRepository
from crefin.infrastructure.db.database import is_unique_violation
from crefin.infrastructure.db.models import InvoiceSequenceModel

logger = logging.getLogger(__name__)

SEQUENCE_CONSTRAINT = "unique_invoice_sequence_per_owner_year"


class SQLAlchemyInvoiceSequenceRepository(InvoiceSequenceRepository):
    """Locked-counter allocation of invoice sequence values."""

    def __init__(self, session: Session):
        self.session = session

    def _locked_counter(self, owner_id: str, year: int):
        return self.session.execute(
            select(InvoiceSequenceModel)
            .where(
                InvoiceSequenceModel.owner_id == owner_id,
                InvoiceSequenceModel.year == year
            )
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

    def next_value(self, owner_id: str, year: int) -> int:
        counter = self._locked_counter(owner_id, year)

        if counter is None:
            # First invoice of the year; a concurrent first insert trips the unique constraint
            counter = InvoiceSequenceModel(owner_id=owner_id, year=year, current_value=1)
            self.session.add(counter)
            try:
                self.session.flush()
            except IntegrityError as exc:
                if not is_unique_violation(exc, SEQUENCE_CONSTRAINT, "invoice_sequences.owner_id"):
                    raise
                logger.debug("Invoice sequence race for owner %s year %s", owner_id, year)
                raise DuplicateEntityError("InvoiceSequence", "owner_id/year", f"{owner_id}/{year}") from exc
            return 1

        counter.current_value += 1
        self.session.flush()
        return counter.current_value
