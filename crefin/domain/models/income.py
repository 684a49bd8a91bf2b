"""
Income record domain model.
An income record is one entry in the owner's income ledger; paying an
invoice produces exactly one.
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional

from crefin.domain.models.base import AggregateRoot, ValidationError


class IncomeSource(str, Enum):
    """Where an income record came from."""
    MANUAL = "manual"
    INVOICE = "invoice"


@dataclass(kw_only=True)
class IncomeRecord(AggregateRoot):
    """Income ledger entry."""

    owner_id: str
    amount: float
    logged_at: date
    client_id: Optional[int] = None
    client_name: Optional[str] = None
    project_name: Optional[str] = None
    source: IncomeSource = IncomeSource.MANUAL
    notes: Optional[str] = None

    def __post_init__(self):
        super().__post_init__()
        if isinstance(self.source, str):
            self.source = IncomeSource(self.source)
        self.validate()

    def validate(self) -> None:
        if not self.owner_id:
            raise ValidationError("Owner ID is required", "owner_id")

        if self.amount is None or self.amount <= 0:
            raise ValidationError("Income amount must be positive", "amount")

        if self.logged_at is None:
            raise ValidationError("Logged date is required", "logged_at")

    @classmethod
    def for_invoice_payment(
        cls,
        owner_id: str,
        invoice_number: str,
        amount: float,
        paid_date: date,
        client_id: int,
        client_name: Optional[str],
        project_name: Optional[str],
        notes: Optional[str] = None
    ) -> 'IncomeRecord':
        """Build the ledger entry produced by paying an invoice."""
        return cls(
            owner_id=owner_id,
            amount=amount,
            logged_at=paid_date,
            client_id=client_id,
            client_name=client_name,
            project_name=project_name,
            source=IncomeSource.INVOICE,
            notes=notes or f"Payment for invoice {invoice_number}"
        )
