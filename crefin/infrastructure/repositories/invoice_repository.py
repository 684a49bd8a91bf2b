"""
Invoice repository implementation using SQLAlchemy.
"""

from datetime import date
from typing import List, Optional
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, Query, selectinload

from crefin.domain.models.base import DuplicateEntityError
from crefin.domain.models.invoice import Invoice, InvoiceStatus, PAYABLE_STATUSES
from crefin.domain.models.payment import PaidInvoiceDates
from crefin.domain.repositories.invoice_repository import (
    InvoiceRepository as InvoiceRepositoryInterface,
    InvoiceFilter,
    InvoiceSummary,
)
from crefin.infrastructure.db.database import is_unique_violation
from crefin.infrastructure.db.models import InvoiceModel, InvoiceLineItemModel
from crefin.infrastructure.mappers.invoice_mapper import InvoiceMapper


INVOICE_NUMBER_CONSTRAINT = "unique_invoice_number_per_owner"


class SQLAlchemyInvoiceRepository(InvoiceRepositoryInterface):
    """SQLAlchemy implementation of invoice repository."""

    def __init__(self, session: Session):
        self.session = session
        self.mapper = InvoiceMapper()
        self.model = InvoiceModel

    def get_base_query(self) -> Query:
        """Invoice query with line items eagerly loaded."""
        return self.session.query(InvoiceModel).options(selectinload(InvoiceModel.line_items))

    def add(self, invoice: Invoice) -> Invoice:
        model = self.mapper.domain_to_model(invoice)
        self.session.add(model)

        try:
            self.session.flush()
        except IntegrityError as exc:
            if not is_unique_violation(exc, INVOICE_NUMBER_CONSTRAINT, "invoices.invoice_number"):
                raise
            raise DuplicateEntityError("Invoice", "invoice_number", invoice.invoice_number) from exc

        invoice.id = model.id
        return invoice

    def get_by_id(self, invoice_id: int) -> Optional[Invoice]:
        model = self.get_base_query().filter(InvoiceModel.id == invoice_id).first()
        return self.mapper.model_to_domain(model) if model else None

    def get_owned(self, owner_id: str, invoice_id: int) -> Optional[Invoice]:
        model = self.get_base_query().filter(
            InvoiceModel.id == invoice_id,
            InvoiceModel.owner_id == owner_id
        ).first()
        return self.mapper.model_to_domain(model) if model else None

    def _filtered_query(self, owner_id: str, filters: InvoiceFilter) -> Query:
        query = self.get_base_query().filter(InvoiceModel.owner_id == owner_id)

        if filters.status:
            query = query.filter(InvoiceModel.status == InvoiceStatus(filters.status))
        if filters.client_id:
            query = query.filter(InvoiceModel.client_id == filters.client_id)
        if filters.start_date:
            query = query.filter(InvoiceModel.issue_date >= filters.start_date)
        if filters.end_date:
            query = query.filter(InvoiceModel.issue_date <= filters.end_date)

        return query

    def list_by_owner(
        self,
        owner_id: str,
        filters: InvoiceFilter,
        limit: int = 50,
        offset: int = 0
    ) -> List[Invoice]:
        models = (
            self._filtered_query(owner_id, filters)
            .order_by(InvoiceModel.created_at.desc(), InvoiceModel.id.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )
        return [self.mapper.model_to_domain(model) for model in models]

    def count_by_owner(self, owner_id: str, filters: InvoiceFilter) -> int:
        return self._filtered_query(owner_id, filters).with_entities(
            func.count(InvoiceModel.id)
        ).scalar()

    def summarize_by_owner(self, owner_id: str) -> InvoiceSummary:
        rows = (
            self.session.query(
                InvoiceModel.status,
                func.count(InvoiceModel.id),
                func.coalesce(func.sum(InvoiceModel.amount), 0)
            )
            .filter(InvoiceModel.owner_id == owner_id)
            .group_by(InvoiceModel.status)
            .all()
        )
        counts = {InvoiceStatus(status): (count, float(total)) for status, count, total in rows}

        def count_of(status: InvoiceStatus) -> int:
            return counts.get(status, (0, 0.0))[0]

        def amount_of(status: InvoiceStatus) -> float:
            return counts.get(status, (0, 0.0))[1]

        return InvoiceSummary(
            total_draft=count_of(InvoiceStatus.DRAFT),
            total_sent=count_of(InvoiceStatus.SENT),
            total_paid=count_of(InvoiceStatus.PAID),
            total_overdue=count_of(InvoiceStatus.OVERDUE),
            amount_pending=amount_of(InvoiceStatus.SENT),
            amount_overdue=amount_of(InvoiceStatus.OVERDUE),
            amount_paid=amount_of(InvoiceStatus.PAID)
        )

    def get_paid_dates_for_client(self, owner_id: str, client_id: int) -> List[PaidInvoiceDates]:
        rows = (
            self.session.query(InvoiceModel.issue_date, InvoiceModel.paid_date)
            .filter(
                InvoiceModel.owner_id == owner_id,
                InvoiceModel.client_id == client_id,
                InvoiceModel.status == InvoiceStatus.PAID
            )
            .order_by(InvoiceModel.paid_date.asc(), InvoiceModel.id.asc())
            .all()
        )
        return [PaidInvoiceDates(issue_date=issue, paid_date=paid) for issue, paid in rows]

    def mark_paid_if_unpaid(
        self,
        owner_id: str,
        invoice_id: int,
        paid_date: date,
        income_record_id: int
    ) -> bool:
        updated = (
            self.session.query(InvoiceModel)
            .filter(
                InvoiceModel.id == invoice_id,
                InvoiceModel.owner_id == owner_id,
                InvoiceModel.status.in_(list(PAYABLE_STATUSES))
            )
            .update(
                {
                    InvoiceModel.status: InvoiceStatus.PAID,
                    InvoiceModel.paid_date: paid_date,
                    InvoiceModel.income_record_id: income_record_id,
                    InvoiceModel.version: InvoiceModel.version + 1,
                    InvoiceModel.updated_at: func.now(),
                },
                synchronize_session=False
            )
        )
        return updated == 1

    def update_prediction(
        self,
        invoice_id: int,
        predicted_payment_days: float,
        predicted_payment_date: date,
        confidence: float
    ) -> None:
        self.session.query(InvoiceModel).filter(InvoiceModel.id == invoice_id).update(
            {
                InvoiceModel.predicted_payment_days: predicted_payment_days,
                InvoiceModel.predicted_payment_date: predicted_payment_date,
                InvoiceModel.prediction_confidence: confidence,
            },
            synchronize_session=False
        )

    def _unpaid_row(self, owner_id: str, invoice_id: int):
        return (
            InvoiceModel.id == invoice_id,
            InvoiceModel.owner_id == owner_id,
            InvoiceModel.status != InvoiceStatus.PAID,
        )

    def update_unpaid(self, owner_id: str, invoice: Invoice, expected_version: int) -> bool:
        updated = (
            self.session.query(InvoiceModel)
            .filter(*self._unpaid_row(owner_id, invoice.id), InvoiceModel.version == expected_version)
            .update(
                {**self.mapper.editable_values(invoice), "updated_at": func.now()},
                synchronize_session=False
            )
        )
        if updated != 1:
            return False

        # The row is now locked by this transaction; reload it before replacing line items
        model = self.get_base_query().filter(InvoiceModel.id == invoice.id).populate_existing().one()
        model.line_items = self.mapper.line_items_to_models(invoice.line_items)
        self.session.flush()
        return True

    def delete_unpaid(self, owner_id: str, invoice_id: int) -> bool:
        unpaid = select(InvoiceModel.id).where(*self._unpaid_row(owner_id, invoice_id))
        self.session.query(InvoiceLineItemModel).filter(
            InvoiceLineItemModel.invoice_id.in_(unpaid)
        ).delete(synchronize_session="fetch")

        deleted = (
            self.session.query(InvoiceModel)
            .filter(*self._unpaid_row(owner_id, invoice_id))
            .delete(synchronize_session="fetch")
        )
        return deleted == 1
