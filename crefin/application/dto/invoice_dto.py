"""
Invoice DTOs for the application layer.
Data Transfer Objects for invoice-related operations.
"""

from typing import Optional, List, Dict
from datetime import date
from pydantic import Field, field_validator, model_validator

from .base_dto import (
    BaseDTO, RequestDTO, ResponseDTO, CreateRequestDTO, UpdateRequestDTO, ListRequestDTO
)
from .client_dto import ClientSummaryDTO
from crefin.domain.models.invoice import Invoice, InvoiceLineItem, InvoiceStatus
from crefin.domain.models.income import IncomeRecord
from crefin.domain.models.user import UserProfile
from crefin.domain.repositories.invoice_repository import InvoiceFilter, InvoiceSummary


# Line items

class LineItemDTO(BaseDTO):
    """DTO for an invoice line item."""

    description: str = Field(min_length=1, description="Line item description")
    quantity: float = Field(gt=0, description="Quantity")
    rate: float = Field(gt=0, description="Unit rate")
    amount: float = Field(gt=0, description="quantity * rate")

    def to_domain(self) -> InvoiceLineItem:
        return InvoiceLineItem(
            description=self.description,
            quantity=self.quantity,
            rate=self.rate,
            amount=self.amount
        )

    @classmethod
    def from_domain(cls, item: InvoiceLineItem) -> "LineItemDTO":
        return cls(
            description=item.description,
            quantity=item.quantity,
            rate=item.rate,
            amount=item.amount
        )


# Request DTOs

class CreateInvoiceRequestDTO(CreateRequestDTO):
    """DTO for creating a new invoice."""

    client_id: int = Field(gt=0, description="Client being billed")
    amount: float = Field(gt=0, description="Invoice total")
    description: str = Field(min_length=1, description="What is being billed")
    items: Optional[List[LineItemDTO]] = Field(default=None, description="Optional line items")
    due_date: date = Field(description="Payment due date")
    notes: Optional[str] = Field(default=None, max_length=2000)
    terms: Optional[str] = Field(default=None, max_length=2000)

    def line_items(self) -> List[InvoiceLineItem]:
        return [item.to_domain() for item in self.items or []]


class UpdateInvoiceRequestDTO(UpdateRequestDTO):
    """DTO for updating an invoice. Omitted fields are left unchanged."""

    amount: Optional[float] = Field(default=None, gt=0)
    description: Optional[str] = Field(default=None, min_length=1)
    items: Optional[List[LineItemDTO]] = None
    due_date: Optional[date] = None
    notes: Optional[str] = Field(default=None, max_length=2000)
    terms: Optional[str] = Field(default=None, max_length=2000)
    status: Optional[InvoiceStatus] = None

    def line_items(self) -> Optional[List[InvoiceLineItem]]:
        if self.items is None:
            return None
        return [item.to_domain() for item in self.items]

    def has_detail_changes(self) -> bool:
        fields = {"amount", "description", "items", "due_date", "notes", "terms"}
        return bool(fields & self.model_fields_set)


class ListInvoicesRequestDTO(ListRequestDTO):
    """DTO for listing invoices with filters."""

    status: Optional[InvoiceStatus] = None
    client_id: Optional[int] = Field(default=None, gt=0)
    start_date: Optional[date] = Field(default=None, description="Issued on or after")
    end_date: Optional[date] = Field(default=None, description="Issued on or before")

    @model_validator(mode='after')
    def validate_date_range(self) -> "ListInvoicesRequestDTO":
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError('end_date must not be before start_date')
        return self

    def to_filter(self) -> InvoiceFilter:
        return InvoiceFilter(
            status=InvoiceStatus(self.status) if self.status else None,
            client_id=self.client_id,
            start_date=self.start_date,
            end_date=self.end_date
        )


class MarkInvoicePaidRequestDTO(RequestDTO):
    """DTO for recording an invoice payment."""

    paid_date: date = Field(description="Date the payment was received")
    notes: Optional[str] = Field(default=None, max_length=2000)

    @field_validator('notes', mode='before')
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


# Response DTOs

class UserSummaryDTO(BaseDTO):
    """Owner profile embedded in invoice details."""

    id: str
    name: Optional[str] = None
    email: str
    phone: Optional[str] = None

    @classmethod
    def from_domain(cls, profile: UserProfile) -> "UserSummaryDTO":
        return cls(**profile.to_dict())


class IncomeSummaryDTO(BaseDTO):
    """Income record linked to a paid invoice."""

    id: int
    amount: float
    logged_at: date

    @classmethod
    def from_domain(cls, record: IncomeRecord) -> "IncomeSummaryDTO":
        return cls(id=record.id, amount=record.amount, logged_at=record.logged_at)


class InvoiceResponseDTO(ResponseDTO):
    """DTO for invoice responses."""

    owner_id: str
    client_id: int
    invoice_number: str
    amount: float
    description: str
    items: List[LineItemDTO] = Field(default_factory=list)
    status: InvoiceStatus
    issue_date: date
    due_date: date
    paid_date: Optional[date] = None
    income_record_id: Optional[int] = None
    predicted_payment_days: Optional[float] = None
    predicted_payment_date: Optional[date] = None
    prediction_confidence: Optional[float] = None
    notes: Optional[str] = None
    terms: Optional[str] = None
    client: Optional[ClientSummaryDTO] = None

    @classmethod
    def from_domain(cls, invoice: Invoice, client: Optional[ClientSummaryDTO] = None) -> "InvoiceResponseDTO":
        """Create DTO from domain entity."""
        return cls(**cls._invoice_fields(invoice), client=client)

    @staticmethod
    def _invoice_fields(invoice: Invoice) -> Dict:
        return dict(
            id=invoice.id,
            owner_id=invoice.owner_id,
            client_id=invoice.client_id,
            invoice_number=invoice.invoice_number,
            amount=invoice.amount,
            description=invoice.description,
            items=[LineItemDTO.from_domain(item) for item in invoice.line_items],
            status=invoice.status,
            issue_date=invoice.issue_date,
            due_date=invoice.due_date,
            paid_date=invoice.paid_date,
            income_record_id=invoice.income_record_id,
            predicted_payment_days=invoice.predicted_payment_days,
            predicted_payment_date=invoice.predicted_payment_date,
            prediction_confidence=invoice.prediction_confidence,
            notes=invoice.notes,
            terms=invoice.terms,
            created_at=invoice.created_at,
            updated_at=invoice.updated_at
        )


class InvoiceDetailsResponseDTO(InvoiceResponseDTO):
    """Fully joined invoice view used by the HTTP, PDF and email layers."""

    user: Optional[UserSummaryDTO] = None
    income: Optional[IncomeSummaryDTO] = None

    @classmethod
    def from_parts(
        cls,
        invoice: Invoice,
        client: Optional[ClientSummaryDTO],
        user: Optional[UserProfile],
        income: Optional[IncomeRecord]
    ) -> "InvoiceDetailsResponseDTO":
        return cls(
            **cls._invoice_fields(invoice),
            client=client,
            user=UserSummaryDTO.from_domain(user) if user else None,
            income=IncomeSummaryDTO.from_domain(income) if income else None
        )


class InvoiceSummaryDTO(BaseDTO):
    """Per-status totals across all of the owner's invoices."""

    total_draft: int = 0
    total_sent: int = 0
    total_paid: int = 0
    total_overdue: int = 0
    amount_pending: float = 0.0
    amount_overdue: float = 0.0
    amount_paid: float = 0.0

    @classmethod
    def from_domain(cls, summary: InvoiceSummary) -> "InvoiceSummaryDTO":
        return cls(
            total_draft=summary.total_draft,
            total_sent=summary.total_sent,
            total_paid=summary.total_paid,
            total_overdue=summary.total_overdue,
            amount_pending=summary.amount_pending,
            amount_overdue=summary.amount_overdue,
            amount_paid=summary.amount_paid
        )


class InvoiceListResponseDTO(BaseDTO):
    """DTO for a filtered page of invoices."""

    invoices: List[InvoiceResponseDTO]
    total: int
    limit: int
    offset: int
    summary: InvoiceSummaryDTO


class MarkInvoicePaidResponseDTO(BaseDTO):
    """Paid invoice together with the income record the payment produced."""

    invoice: InvoiceResponseDTO
    income: IncomeSummaryDTO
