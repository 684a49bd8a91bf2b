"""
Invoice use cases for the application layer.
Implements the invoice lifecycle: numbering, listing, editing, payment and deletion.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable, Dict, List, Optional

from crefin.config import get_settings
from crefin.application.use_cases.base_use_case import (
    BaseUseCase, UpdateUseCase, DeleteUseCase, GetByIdUseCase, ListUseCase, CommandUseCase
)
from crefin.application.use_cases.ownership import OwnershipGuard
from crefin.application.use_cases.payment_prediction import InvoicePredictionEnricher
from crefin.application.dto.client_dto import ClientSummaryDTO
from crefin.application.dto.invoice_dto import (
    CreateInvoiceRequestDTO, UpdateInvoiceRequestDTO, ListInvoicesRequestDTO,
    MarkInvoicePaidRequestDTO, InvoiceResponseDTO, InvoiceDetailsResponseDTO,
    InvoiceListResponseDTO, InvoiceSummaryDTO, MarkInvoicePaidResponseDTO, IncomeSummaryDTO
)
from crefin.domain.models.base import ConflictError, DuplicateEntityError, PreconditionFailedError
from crefin.domain.models.client import Client
from crefin.domain.models.income import IncomeRecord
from crefin.domain.models.invoice import Invoice
from crefin.domain.repositories.unit_of_work import UnitOfWork
from crefin.domain.services.numbering_service import NumberingService
from crefin.domain.services.payment_predictor import PaymentPredictor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UpdateInvoiceCommand:
    invoice_id: int
    changes: UpdateInvoiceRequestDTO


@dataclass(frozen=True)
class MarkInvoicePaidCommand:
    invoice_id: int
    payment: MarkInvoicePaidRequestDTO


def _client_summary(client: Optional[Client]) -> Optional[ClientSummaryDTO]:
    return ClientSummaryDTO.from_domain(client) if client else None


def _changed_concurrently(invoice: Invoice) -> PreconditionFailedError:
    return PreconditionFailedError(
        f"cannot modify invoice {invoice.invoice_number}: it was paid or changed since it was read"
    )


class CreateInvoiceUseCase(BaseUseCase[CreateInvoiceRequestDTO, InvoiceResponseDTO]):
    """
    Use case for creating a new invoice.

    The invoice number is allocated from the owner's counter for the issue
    year inside the same transaction that inserts the invoice. When a
    concurrent creation wins a unique key the whole attempt is rolled back
    and retried. After the commit a payment prediction is attached
    best-effort.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        predictor: Optional[PaymentPredictor] = None,
        numbering_service: Optional[NumberingService] = None,
        today: Optional[Callable[[], date]] = None,
        max_attempts: Optional[int] = None
    ):
        super().__init__(uow, today)
        settings = get_settings()
        self.numbering_service = numbering_service or NumberingService(settings.invoice_number_prefix)
        self.max_attempts = max_attempts or settings.invoice_number_max_attempts
        self.enricher = InvoicePredictionEnricher(uow, predictor)

    async def _execute_business_logic(self, owner_id: str, request: CreateInvoiceRequestDTO) -> InvoiceResponseDTO:
        client = OwnershipGuard(self.uow).require_owned_client(owner_id, request.client_id)
        issue_date = self.today()

        invoice = self._insert_numbered_invoice(owner_id, request, issue_date)
        logger.info(f"Invoice {invoice.invoice_number} created for owner {owner_id}, client {client.id}")

        invoice = await self.enricher.enrich(invoice)
        return InvoiceResponseDTO.from_domain(invoice, _client_summary(client))

    def _insert_numbered_invoice(self, owner_id: str, request: CreateInvoiceRequestDTO, issue_date: date) -> Invoice:
        year = issue_date.year

        for attempt in range(1, self.max_attempts + 1):
            try:
                with self.uow:
                    sequence = self.uow.sequences.next_value(owner_id, year)
                    invoice = Invoice.create(
                        owner_id=owner_id,
                        client_id=request.client_id,
                        invoice_number=self.numbering_service.format_invoice_number(year, sequence),
                        amount=request.amount,
                        description=request.description,
                        issue_date=issue_date,
                        due_date=request.due_date,
                        line_items=request.line_items(),
                        notes=request.notes,
                        terms=request.terms
                    )
                    self.uow.invoices.add(invoice)
                    self.uow.commit()
                    return invoice
            except DuplicateEntityError:
                logger.warning(
                    f"Invoice number collision for owner {owner_id} in {year} "
                    f"(attempt {attempt}/{self.max_attempts})"
                )

        raise ConflictError(f"Could not allocate an invoice number after {self.max_attempts} attempts")


class ListInvoicesUseCase(ListUseCase[ListInvoicesRequestDTO, InvoiceListResponseDTO]):
    """Use case for listing invoices with filters and an owner-wide summary."""

    async def _execute_business_logic(self, owner_id: str, request: ListInvoicesRequestDTO) -> InvoiceListResponseDTO:
        filters = request.to_filter()
        invoices = self.uow.invoices.list_by_owner(
            owner_id, filters, limit=request.limit, offset=request.offset
        )
        total = self.uow.invoices.count_by_owner(owner_id, filters)
        summary = self.uow.invoices.summarize_by_owner(owner_id)

        clients = self._clients_by_id(owner_id, invoices)

        return InvoiceListResponseDTO(
            invoices=[
                InvoiceResponseDTO.from_domain(invoice, _client_summary(clients.get(invoice.client_id)))
                for invoice in invoices
            ],
            total=total,
            limit=request.limit,
            offset=request.offset,
            summary=InvoiceSummaryDTO.from_domain(summary)
        )

    def _clients_by_id(self, owner_id: str, invoices: List[Invoice]) -> Dict[int, Client]:
        client_ids = [invoice.client_id for invoice in invoices]
        return {client.id: client for client in self.uow.clients.get_many_owned(owner_id, client_ids)}


class GetInvoiceByIdUseCase(GetByIdUseCase[int, InvoiceDetailsResponseDTO]):
    """Use case returning the fully joined invoice view."""

    async def _execute_business_logic(self, owner_id: str, invoice_id: int) -> InvoiceDetailsResponseDTO:
        invoice = OwnershipGuard(self.uow).require_owned_invoice(owner_id, invoice_id)

        client = self.uow.clients.get_owned(owner_id, invoice.client_id)
        user = self.uow.users.get_by_id(owner_id)
        income = self.uow.income.get_by_id(invoice.income_record_id) if invoice.income_record_id else None

        return InvoiceDetailsResponseDTO.from_parts(invoice, _client_summary(client), user, income)


class UpdateInvoiceUseCase(UpdateUseCase[UpdateInvoiceCommand, InvoiceResponseDTO]):
    """
    Use case for editing an invoice.
    Paid invoices are immutable; status changes follow the invoice status graph.
    """

    async def _execute_command_logic(self, owner_id: str, request: UpdateInvoiceCommand) -> InvoiceResponseDTO:
        invoice = OwnershipGuard(self.uow).require_owned_invoice(owner_id, request.invoice_id)
        invoice.ensure_modifiable()
        read_version = invoice.version

        changes = request.changes
        if changes.has_detail_changes():
            invoice.update_details(
                amount=changes.amount,
                description=changes.description,
                line_items=changes.line_items(),
                due_date=changes.due_date,
                notes=changes.notes,
                terms=changes.terms
            )

        if changes.status is not None:
            invoice.change_status(changes.status)

        if not self.uow.invoices.update_unpaid(owner_id, invoice, read_version):
            raise _changed_concurrently(invoice)
        self.uow.commit()

        logger.info(f"Invoice {invoice.invoice_number} updated by owner {owner_id}")
        client = self.uow.clients.get_owned(owner_id, invoice.client_id)
        return InvoiceResponseDTO.from_domain(invoice, _client_summary(client))


class MarkInvoicePaidUseCase(CommandUseCase[MarkInvoicePaidCommand, MarkInvoicePaidResponseDTO]):
    """
    Use case for recording an invoice payment.

    The income record insert and the guarded status update share one
    transaction: either both are committed or neither is. Of two concurrent
    callers only one sees its conditional update match; the other gets a
    ConflictError and its income record is rolled back.
    """

    async def _execute_command_logic(self, owner_id: str, request: MarkInvoicePaidCommand) -> MarkInvoicePaidResponseDTO:
        invoice = OwnershipGuard(self.uow).require_owned_invoice(owner_id, request.invoice_id)
        invoice.ensure_payable()

        client = self.uow.clients.get_owned(owner_id, invoice.client_id)
        paid_date = request.payment.paid_date

        income = IncomeRecord.for_invoice_payment(
            owner_id=owner_id,
            invoice_number=invoice.invoice_number,
            amount=invoice.amount,
            paid_date=paid_date,
            client_id=invoice.client_id,
            client_name=client.name if client else None,
            project_name=invoice.description,
            notes=request.payment.notes
        )
        self.uow.income.add(income)

        invoice.mark_as_paid(paid_date, income.id)

        if not self.uow.invoices.mark_paid_if_unpaid(owner_id, invoice.id, paid_date, income.id):
            raise ConflictError(f"Invoice {invoice.invoice_number} is already paid")

        self.uow.commit()

        logger.info(
            f"Invoice {invoice.invoice_number} marked paid on {paid_date.isoformat()}, "
            f"income record {income.id}"
        )
        return MarkInvoicePaidResponseDTO(
            invoice=InvoiceResponseDTO.from_domain(invoice, _client_summary(client)),
            income=IncomeSummaryDTO.from_domain(income)
        )


class DeleteInvoiceUseCase(DeleteUseCase[int, None]):
    """Use case for deleting an unpaid invoice. Its number is never reused."""

    async def _execute_command_logic(self, owner_id: str, invoice_id: int) -> None:
        invoice = OwnershipGuard(self.uow).require_owned_invoice(owner_id, invoice_id)
        invoice.ensure_modifiable()

        if not self.uow.invoices.delete_unpaid(owner_id, invoice.id):
            raise _changed_concurrently(invoice)
        self.uow.commit()

        logger.info(f"Invoice {invoice.invoice_number} deleted by owner {owner_id}")
