"""
Invoice domain model.
Represents invoices billed to a client and their status lifecycle.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Optional, List, Dict, FrozenSet
from enum import Enum

from crefin.domain.models.base import (
    AggregateRoot,
    ValidationError,
    PreconditionFailedError,
    ConflictError,
)

# Rounding slack allowed when comparing monetary sums
AMOUNT_TOLERANCE = 0.01

DEFAULT_TERMS = "Payment due within 30 days"


class InvoiceStatus(str, Enum):
    """Invoice status."""
    DRAFT = "draft"
    SENT = "sent"
    PAID = "paid"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"


# PAID is only reachable through mark_as_paid, never through a plain status change
ALLOWED_TRANSITIONS: Dict[InvoiceStatus, FrozenSet[InvoiceStatus]] = {
    InvoiceStatus.DRAFT: frozenset({InvoiceStatus.SENT, InvoiceStatus.CANCELLED}),
    InvoiceStatus.SENT: frozenset({InvoiceStatus.OVERDUE, InvoiceStatus.CANCELLED}),
    InvoiceStatus.OVERDUE: frozenset({InvoiceStatus.SENT, InvoiceStatus.CANCELLED}),
    InvoiceStatus.PAID: frozenset(),
    InvoiceStatus.CANCELLED: frozenset(),
}

PAYABLE_STATUSES = frozenset({InvoiceStatus.DRAFT, InvoiceStatus.SENT, InvoiceStatus.OVERDUE})


@dataclass
class InvoiceLineItem:
    """Individual line item in an invoice."""

    description: str
    quantity: float
    rate: float
    amount: float

    def validate(self) -> None:
        """Validate line item."""
        if not self.description or not self.description.strip():
            raise ValidationError("Line item description is required", "items")

        if self.quantity <= 0:
            raise ValidationError("Line item quantity must be positive", "items")

        if self.rate <= 0:
            raise ValidationError("Line item rate must be positive", "items")

        if abs(self.amount - (self.quantity * self.rate)) > AMOUNT_TOLERANCE:
            raise ValidationError(
                f"Line item '{self.description}' amount must equal quantity * rate",
                "items"
            )

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "description": self.description,
            "quantity": self.quantity,
            "rate": self.rate,
            "amount": self.amount,
        }


@dataclass(kw_only=True)
class Invoice(AggregateRoot):
    """
    Invoice aggregate root.

    Amount, description, line items and due date are frozen once the
    invoice is paid. ``income_record_id`` is set exactly when the invoice
    is paid.
    """

    owner_id: str
    client_id: int
    invoice_number: str
    amount: float
    description: str
    issue_date: date
    due_date: date

    line_items: List[InvoiceLineItem] = field(default_factory=list)
    status: InvoiceStatus = InvoiceStatus.DRAFT
    paid_date: Optional[date] = None
    income_record_id: Optional[int] = None

    # Payment-time prediction, filled in best-effort after creation
    predicted_payment_days: Optional[float] = None
    predicted_payment_date: Optional[date] = None
    prediction_confidence: Optional[float] = None

    notes: Optional[str] = None
    terms: str = DEFAULT_TERMS

    def __post_init__(self):
        """Initialize invoice after creation."""
        super().__post_init__()
        if isinstance(self.status, str):
            self.status = InvoiceStatus(self.status)
        self.validate()

    def validate(self) -> None:
        """Validate invoice state."""
        if not self.owner_id:
            raise ValidationError("Owner ID is required", "owner_id")

        if not self.client_id:
            raise ValidationError("Client ID is required", "client_id")

        if not self.invoice_number:
            raise ValidationError("Invoice number is required", "invoice_number")

        if not self.description or not self.description.strip():
            raise ValidationError("Description is required", "description")

        if self.amount is None or self.amount <= 0:
            raise ValidationError("Amount must be positive", "amount")

        if self.due_date < self.issue_date:
            raise ValidationError("Due date cannot be before issue date", "due_date")

        self._validate_line_items()

        if (self.status == InvoiceStatus.PAID) != (self.income_record_id is not None):
            raise ValidationError(
                "Paid invoices must reference exactly one income record",
                "income_record_id"
            )

    def _validate_line_items(self) -> None:
        if not self.line_items:
            return

        for item in self.line_items:
            item.validate()

        if abs(self.line_items_total - self.amount) > AMOUNT_TOLERANCE:
            raise ValidationError(
                f"Amount {self.amount:.2f} does not match line items total {self.line_items_total:.2f}",
                "amount"
            )

    @property
    def line_items_total(self) -> float:
        return sum(item.amount for item in self.line_items)

    @property
    def is_paid(self) -> bool:
        return self.status == InvoiceStatus.PAID

    @property
    def is_cancelled(self) -> bool:
        return self.status == InvoiceStatus.CANCELLED

    @property
    def has_prediction(self) -> bool:
        return self.predicted_payment_days is not None

    def is_owned_by(self, owner_id: str) -> bool:
        return self.owner_id == owner_id

    def ensure_modifiable(self) -> None:
        """Raise if the invoice can no longer be edited or deleted."""
        if self.is_paid:
            raise PreconditionFailedError("cannot modify paid invoice")

    def can_transition_to(self, new_status: InvoiceStatus) -> bool:
        return new_status in ALLOWED_TRANSITIONS[self.status]

    def change_status(self, new_status: InvoiceStatus) -> None:
        """Move the invoice along the status graph."""
        new_status = InvoiceStatus(new_status)
        if new_status == self.status:
            return

        if new_status == InvoiceStatus.PAID:
            raise PreconditionFailedError("use mark-paid to record a payment")

        if not self.can_transition_to(new_status):
            raise PreconditionFailedError(
                f"Cannot change invoice status from {self.status.value} to {new_status.value}"
            )

        self.status = new_status
        self.increment_version()

    def update_details(
        self,
        amount: Optional[float] = None,
        description: Optional[str] = None,
        line_items: Optional[List[InvoiceLineItem]] = None,
        due_date: Optional[date] = None,
        notes: Optional[str] = None,
        terms: Optional[str] = None
    ) -> None:
        """Apply a partial edit. Invariants are re-checked on the merged result."""
        self.ensure_modifiable()

        if amount is not None:
            self.amount = amount
        if description is not None:
            self.description = description
        if line_items is not None:
            self.line_items = list(line_items)
        if due_date is not None:
            self.due_date = due_date
        if notes is not None:
            self.notes = notes
        if terms is not None:
            self.terms = terms

        self.validate()
        self.increment_version()

    def ensure_payable(self) -> None:
        """Raise unless the invoice may be marked paid."""
        if self.is_paid:
            raise ConflictError(f"Invoice {self.invoice_number} is already paid")
        if self.status not in PAYABLE_STATUSES:
            raise PreconditionFailedError(
                f"Cannot mark a {self.status.value} invoice as paid"
            )

    def mark_as_paid(self, paid_date: date, income_record_id: int) -> None:
        """Record the payment and link the income record it produced."""
        self.ensure_payable()

        if paid_date < self.issue_date:
            raise ValidationError("Paid date cannot be before issue date", "paid_date")

        self.status = InvoiceStatus.PAID
        self.paid_date = paid_date
        self.income_record_id = income_record_id
        self.increment_version()

    def attach_prediction(
        self,
        predicted_payment_days: float,
        predicted_payment_date: date,
        confidence: float
    ) -> None:
        self.predicted_payment_days = predicted_payment_days
        self.predicted_payment_date = predicted_payment_date
        self.prediction_confidence = confidence
        self.mark_as_updated()

    @classmethod
    def create(
        cls,
        owner_id: str,
        client_id: int,
        invoice_number: str,
        amount: float,
        description: str,
        issue_date: date,
        due_date: date,
        line_items: Optional[List[InvoiceLineItem]] = None,
        notes: Optional[str] = None,
        terms: Optional[str] = None
    ) -> 'Invoice':
        """Factory method to create a new draft invoice."""
        return cls(
            owner_id=owner_id,
            client_id=client_id,
            invoice_number=invoice_number,
            amount=amount,
            description=description,
            issue_date=issue_date,
            due_date=due_date,
            line_items=list(line_items or []),
            notes=notes,
            terms=terms or DEFAULT_TERMS,
            status=InvoiceStatus.DRAFT
        )
