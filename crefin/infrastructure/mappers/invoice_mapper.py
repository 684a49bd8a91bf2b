"""
Invoice mapper for converting between domain entities and database models.
"""

from decimal import Decimal
from typing import Any, Dict, List, Optional

from crefin.domain.models.invoice import Invoice, InvoiceLineItem, InvoiceStatus
from crefin.infrastructure.db.models import InvoiceModel, InvoiceLineItemModel


def _to_decimal(value: Optional[float], places: str = "0.01") -> Optional[Decimal]:
    if value is None:
        return None
    return Decimal(str(value)).quantize(Decimal(places))


def _to_float(value) -> Optional[float]:
    return float(value) if value is not None else None


class InvoiceMapper:
    """Maps between Invoice domain entity and InvoiceModel database model."""

    def domain_to_model(self, invoice: Invoice) -> InvoiceModel:
        """Convert Invoice domain entity to a new InvoiceModel."""
        return InvoiceModel(
            id=invoice.id,
            owner_id=invoice.owner_id,
            client_id=invoice.client_id,
            invoice_number=invoice.invoice_number,
            issue_date=invoice.issue_date,
            paid_date=invoice.paid_date,
            income_record_id=invoice.income_record_id,
            predicted_payment_days=invoice.predicted_payment_days,
            predicted_payment_date=invoice.predicted_payment_date,
            prediction_confidence=invoice.prediction_confidence,
            line_items=self.line_items_to_models(invoice.line_items),
            **self.editable_values(invoice)
        )

    def editable_values(self, invoice: Invoice) -> Dict[str, Any]:
        """
        Column values an edit may change.
        Payment fields are left out; only the guarded mark-paid update writes them.
        """
        return {
            "status": invoice.status,
            "amount": _to_decimal(invoice.amount),
            "description": invoice.description,
            "due_date": invoice.due_date,
            "notes": invoice.notes,
            "terms": invoice.terms,
            "version": invoice.version,
        }

    def model_to_domain(self, model: InvoiceModel) -> Invoice:
        """Convert InvoiceModel to Invoice domain entity."""
        return Invoice(
            id=model.id,
            owner_id=model.owner_id,
            client_id=model.client_id,
            invoice_number=model.invoice_number,
            amount=_to_float(model.amount),
            description=model.description,
            issue_date=model.issue_date,
            due_date=model.due_date,
            line_items=[self._line_item_model_to_domain(item) for item in model.line_items],
            status=InvoiceStatus(model.status) if model.status else InvoiceStatus.DRAFT,
            paid_date=model.paid_date,
            income_record_id=model.income_record_id,
            predicted_payment_days=model.predicted_payment_days,
            predicted_payment_date=model.predicted_payment_date,
            prediction_confidence=model.prediction_confidence,
            notes=model.notes,
            terms=model.terms,
            version=model.version or 1,
            created_at=model.created_at,
            updated_at=model.updated_at
        )

    def line_items_to_models(self, items: List[InvoiceLineItem]) -> List[InvoiceLineItemModel]:
        return [
            InvoiceLineItemModel(
                description=item.description,
                quantity=_to_decimal(item.quantity, "0.001"),
                rate=_to_decimal(item.rate),
                amount=_to_decimal(item.amount),
                position=position
            )
            for position, item in enumerate(items)
        ]

    def _line_item_model_to_domain(self, model: InvoiceLineItemModel) -> InvoiceLineItem:
        return InvoiceLineItem(
            description=model.description,
            quantity=_to_float(model.quantity),
            rate=_to_float(model.rate),
            amount=_to_float(model.amount)
        )
