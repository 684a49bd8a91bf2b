"""Invoice repository interface.
Defines the contract for invoice data persistence operations.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional
from datetime import date

from crefin.domain.models.invoice import Invoice, InvoiceStatus
from crefin.domain.models.payment import PaidInvoiceDates


@dataclass(frozen=True)
class InvoiceFilter:
    """Filters accepted when listing an owner's invoices."""

    status: Optional[InvoiceStatus] = None
    client_id: Optional[int] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None


@dataclass(frozen=True)
class InvoiceSummary:
    """Per-status counts and amounts across all of an owner's invoices."""

    total_draft: int = 0
    total_sent: int = 0
    total_paid: int = 0
    total_overdue: int = 0
    amount_pending: float = 0.0
    amount_overdue: float = 0.0
    amount_paid: float = 0.0


class InvoiceRepository(ABC):
    """
    Repository interface for Invoice aggregate.
    Defines all operations needed for invoice data persistence.
    """

    @abstractmethod
    def add(self, invoice: Invoice) -> Invoice:
        """
        Insert a new invoice and assign its id.
        A clash on the owner's invoice number raises DuplicateEntityError.
        """
        pass

    @abstractmethod
    def get_by_id(self, invoice_id: int) -> Optional[Invoice]:
        pass

    @abstractmethod
    def get_owned(self, owner_id: str, invoice_id: int) -> Optional[Invoice]:
        """Find an invoice by ID only if it belongs to ``owner_id``."""
        pass

    @abstractmethod
    def list_by_owner(
        self,
        owner_id: str,
        filters: InvoiceFilter,
        limit: int = 50,
        offset: int = 0
    ) -> List[Invoice]:
        """List invoices newest first."""
        pass

    @abstractmethod
    def count_by_owner(self, owner_id: str, filters: InvoiceFilter) -> int:
        pass

    @abstractmethod
    def summarize_by_owner(self, owner_id: str) -> InvoiceSummary:
        pass

    @abstractmethod
    def get_paid_dates_for_client(self, owner_id: str, client_id: int) -> List[PaidInvoiceDates]:
        """
        Issue and paid dates of the client's paid invoices, ordered by paid
        date ascending so the most recent payments come last.
        """
        pass

    @abstractmethod
    def mark_paid_if_unpaid(
        self,
        owner_id: str,
        invoice_id: int,
        paid_date: date,
        income_record_id: int
    ) -> bool:
        """
        Conditionally flip an invoice to paid.

        Returns False when no row matched, i.e. the invoice is already paid
        cancelled or vanished. Losing callers of a concurrent mark-paid get False.
        """
        pass

    @abstractmethod
    def update_prediction(
        self,
        invoice_id: int,
        predicted_payment_days: float,
        predicted_payment_date: date,
        confidence: float
    ) -> None:
        pass

    @abstractmethod
    def update_unpaid(self, owner_id: str, invoice: Invoice, expected_version: int) -> bool:
        """
        Write an edited invoice back while the stored row is still unpaid and
        still at ``expected_version``.

        Only details and status are written; payment fields belong to
        ``mark_paid_if_unpaid``. Returns False and writes nothing when the row
        was paid, edited or removed since it was read.
        """
        pass

    @abstractmethod
    def delete_unpaid(self, owner_id: str, invoice_id: int) -> bool:
        """Delete an invoice and its line items unless it is paid. False when no row matched."""
        pass
