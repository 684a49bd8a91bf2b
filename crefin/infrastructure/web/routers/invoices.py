"""
Invoice router.
Handles the invoice lifecycle: creation, listing, editing, payment and deletion.
"""

from datetime import date
from typing import Annotated, Optional
from fastapi import APIRouter, Depends, status, Query, Response

from crefin.config import settings
from crefin.infrastructure.auth import get_current_user_id
from crefin.infrastructure.ml import get_payment_predictor
from crefin.infrastructure.web.dependencies import get_uow
from crefin.application.use_cases.invoice_use_cases import (
    CreateInvoiceUseCase,
    ListInvoicesUseCase,
    GetInvoiceByIdUseCase,
    UpdateInvoiceUseCase,
    UpdateInvoiceCommand,
    MarkInvoicePaidUseCase,
    MarkInvoicePaidCommand,
    DeleteInvoiceUseCase
)
from crefin.application.dto.invoice_dto import (
    CreateInvoiceRequestDTO,
    UpdateInvoiceRequestDTO,
    ListInvoicesRequestDTO,
    MarkInvoicePaidRequestDTO,
    InvoiceResponseDTO,
    InvoiceDetailsResponseDTO,
    InvoiceListResponseDTO,
    MarkInvoicePaidResponseDTO
)
from crefin.domain.models.invoice import InvoiceStatus
from crefin.domain.repositories.unit_of_work import UnitOfWork
from crefin.domain.services.payment_predictor import PaymentPredictor


router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED, response_model=InvoiceResponseDTO)
async def create_invoice(
    request: CreateInvoiceRequestDTO,
    user_id: Annotated[str, Depends(get_current_user_id)],
    uow: Annotated[UnitOfWork, Depends(get_uow)],
    predictor: Annotated[PaymentPredictor, Depends(get_payment_predictor)]
):
    """
    Create a draft invoice.

    The invoice number is assigned by the server as ``INV-<year>-<seq>``.
    When the client has payment history the response carries a predicted
    payment date; the prediction service being down never fails the request.
    """
    return await CreateInvoiceUseCase(uow, predictor).execute(user_id, request)


@router.get("", response_model=InvoiceListResponseDTO)
async def list_invoices(
    user_id: Annotated[str, Depends(get_current_user_id)],
    uow: Annotated[UnitOfWork, Depends(get_uow)],
    status: Optional[InvoiceStatus] = Query(None, description="Filter by status"),
    client_id: Optional[int] = Query(None, description="Filter by client"),
    start_date: Optional[date] = Query(None, description="Issued on or after"),
    end_date: Optional[date] = Query(None, description="Issued on or before"),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    offset: int = Query(0, ge=0)
):
    """
    List invoices, newest first, with per-status totals across all of the
    caller's invoices.
    """
    request = ListInvoicesRequestDTO(
        status=status,
        client_id=client_id,
        start_date=start_date,
        end_date=end_date,
        limit=limit,
        offset=offset
    )
    return await ListInvoicesUseCase(uow).execute(user_id, request)


@router.get("/{invoice_id}", response_model=InvoiceDetailsResponseDTO)
async def get_invoice(
    invoice_id: int,
    user_id: Annotated[str, Depends(get_current_user_id)],
    uow: Annotated[UnitOfWork, Depends(get_uow)]
):
    """Get an invoice with its client, owner profile and income record."""
    return await GetInvoiceByIdUseCase(uow).execute(user_id, invoice_id)


@router.put("/{invoice_id}", response_model=InvoiceResponseDTO)
async def update_invoice(
    invoice_id: int,
    request: UpdateInvoiceRequestDTO,
    user_id: Annotated[str, Depends(get_current_user_id)],
    uow: Annotated[UnitOfWork, Depends(get_uow)]
):
    """
    Update invoice details or status.

    Paid invoices cannot be modified (412). Use the mark-paid endpoint to
    record a payment.
    """
    command = UpdateInvoiceCommand(invoice_id=invoice_id, changes=request)
    return await UpdateInvoiceUseCase(uow).execute(user_id, command)


@router.post("/{invoice_id}/mark-paid", response_model=MarkInvoicePaidResponseDTO)
async def mark_invoice_paid(
    invoice_id: int,
    request: MarkInvoicePaidRequestDTO,
    user_id: Annotated[str, Depends(get_current_user_id)],
    uow: Annotated[UnitOfWork, Depends(get_uow)]
):
    """
    Record the payment of an invoice.

    Creates the matching income record in the same transaction. Paying an
    invoice twice returns 409.
    """
    command = MarkInvoicePaidCommand(invoice_id=invoice_id, payment=request)
    return await MarkInvoicePaidUseCase(uow).execute(user_id, command)


@router.delete("/{invoice_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_invoice(
    invoice_id: int,
    user_id: Annotated[str, Depends(get_current_user_id)],
    uow: Annotated[UnitOfWork, Depends(get_uow)]
):
    await DeleteInvoiceUseCase(uow).execute(user_id, invoice_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
