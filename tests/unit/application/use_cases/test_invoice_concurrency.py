"""
Interleaving tests for invoice writes.

Two sessions on a file-backed SQLite database stand in for two requests.
The second request commits between the first one's read and its write.
"""

import pytest
from datetime import date
from sqlalchemy import create_engine, func
from sqlalchemy.orm import sessionmaker

from crefin.application.dto.client_dto import CreateClientRequestDTO
from crefin.application.dto.invoice_dto import (
    CreateInvoiceRequestDTO, UpdateInvoiceRequestDTO, LineItemDTO
)
from crefin.application.use_cases.client_use_cases import CreateClientUseCase
from crefin.application.use_cases.invoice_use_cases import (
    CreateInvoiceUseCase,
    UpdateInvoiceUseCase,
    UpdateInvoiceCommand,
    DeleteInvoiceUseCase,
)
from crefin.domain.models.base import PreconditionFailedError
from crefin.domain.models.income import IncomeRecord
from crefin.domain.models.invoice import InvoiceStatus
from crefin.infrastructure.db.database import Base
from crefin.infrastructure.db.models import UserProfileModel, IncomeRecordModel
from crefin.infrastructure.repositories.unit_of_work import SQLAlchemyUnitOfWork

ISSUE_DAY = date(2025, 1, 10)
PAID_DAY = date(2025, 2, 1)


@pytest.fixture
def file_session_factory(tmp_path, owner_id):
    engine = create_engine(f"sqlite:///{tmp_path / 'crefin.db'}")
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    with factory() as session:
        session.add(UserProfileModel(id=owner_id, email="olivia@example.com", full_name="Olivia Owner"))
        session.commit()

    yield factory
    engine.dispose()


@pytest.fixture
def uow(file_session_factory):
    with file_session_factory() as session:
        yield SQLAlchemyUnitOfWork(session)


async def create_invoice_with_items(uow, owner_id):
    client = await CreateClientUseCase(uow).execute(owner_id, CreateClientRequestDTO(name="Acme"))
    request = CreateInvoiceRequestDTO(
        client_id=client.id,
        amount=1000.0,
        description="Website redesign",
        due_date=date(2025, 2, 9),
        items=[
            LineItemDTO(description="Design", quantity=8, rate=75.0, amount=600.0),
            LineItemDTO(description="Development", quantity=4, rate=100.0, amount=400.0),
        ]
    )
    return await CreateInvoiceUseCase(uow, today=lambda: ISSUE_DAY).execute(owner_id, request)


def pay_elsewhere(session_factory, owner_id, invoice_id):
    """Mark the invoice paid from another session and commit."""
    with session_factory() as session:
        other = SQLAlchemyUnitOfWork(session)
        income = other.income.add(IncomeRecord(owner_id=owner_id, amount=1000.0, logged_at=PAID_DAY))
        assert other.invoices.mark_paid_if_unpaid(owner_id, invoice_id, PAID_DAY, income.id)
        other.commit()
        return income.id


def edit_elsewhere(session_factory, owner_id, invoice_id):
    """Change the invoice notes from another session and commit."""
    with session_factory() as session:
        other = SQLAlchemyUnitOfWork(session)
        invoice = other.invoices.get_owned(owner_id, invoice_id)
        read_version = invoice.version
        invoice.update_details(notes="Edited elsewhere")
        assert other.invoices.update_unpaid(owner_id, invoice, read_version)
        other.commit()


def run_after_read(monkeypatch, uow, action):
    """Run ``action`` right after the use case has loaded the invoice."""
    results = []
    read = uow.invoices.get_owned

    def get_owned(owner_id, invoice_id):
        invoice = read(owner_id, invoice_id)
        results.append(action(owner_id, invoice_id))
        return invoice

    monkeypatch.setattr(uow.invoices, "get_owned", get_owned)
    return results


def stored_state(session_factory, owner_id, invoice_id):
    with session_factory() as session:
        fresh = SQLAlchemyUnitOfWork(session)
        invoice = fresh.invoices.get_owned(owner_id, invoice_id)
        income_rows = session.query(func.count(IncomeRecordModel.id)).scalar()
        return invoice, income_rows


class TestPaymentDuringEdit:
    """Test cases for an edit racing a payment."""

    @pytest.mark.asyncio
    async def test_update_does_not_undo_payment(self, uow, owner_id, file_session_factory, monkeypatch):
        """Test an edit based on a pre-payment read is refused and the payment stands."""
        invoice = await create_invoice_with_items(uow, owner_id)
        paid = run_after_read(
            monkeypatch, uow, lambda owner, invoice_id: pay_elsewhere(file_session_factory, owner, invoice_id)
        )

        with pytest.raises(PreconditionFailedError, match="paid or changed"):
            await UpdateInvoiceUseCase(uow).execute(
                owner_id,
                UpdateInvoiceCommand(invoice_id=invoice.id, changes=UpdateInvoiceRequestDTO(notes="Late edit"))
            )

        stored, income_rows = stored_state(file_session_factory, owner_id, invoice.id)
        assert stored.status == InvoiceStatus.PAID
        assert stored.income_record_id == paid[0]
        assert stored.paid_date == PAID_DAY
        assert stored.notes is None
        assert income_rows == 1

    @pytest.mark.asyncio
    async def test_status_change_does_not_undo_payment(self, uow, owner_id, file_session_factory, monkeypatch):
        invoice = await create_invoice_with_items(uow, owner_id)
        run_after_read(
            monkeypatch, uow, lambda owner, invoice_id: pay_elsewhere(file_session_factory, owner, invoice_id)
        )

        with pytest.raises(PreconditionFailedError):
            await UpdateInvoiceUseCase(uow).execute(
                owner_id,
                UpdateInvoiceCommand(invoice_id=invoice.id, changes=UpdateInvoiceRequestDTO(status="cancelled"))
            )

        stored, _ = stored_state(file_session_factory, owner_id, invoice.id)
        assert stored.status == InvoiceStatus.PAID

    @pytest.mark.asyncio
    async def test_stale_edit_is_refused(self, uow, owner_id, file_session_factory, monkeypatch):
        """Test the later of two edits from the same version loses."""
        invoice = await create_invoice_with_items(uow, owner_id)
        run_after_read(
            monkeypatch, uow, lambda owner, invoice_id: edit_elsewhere(file_session_factory, owner, invoice_id)
        )

        with pytest.raises(PreconditionFailedError):
            await UpdateInvoiceUseCase(uow).execute(
                owner_id,
                UpdateInvoiceCommand(invoice_id=invoice.id, changes=UpdateInvoiceRequestDTO(notes="Late edit"))
            )

        stored, _ = stored_state(file_session_factory, owner_id, invoice.id)
        assert stored.notes == "Edited elsewhere"
        assert stored.status == InvoiceStatus.DRAFT


class TestPaymentDuringDelete:
    """Test cases for a delete racing a payment."""

    @pytest.mark.asyncio
    async def test_delete_does_not_remove_paid_invoice(self, uow, owner_id, file_session_factory, monkeypatch):
        """Test a delete based on a pre-payment read leaves the paid invoice and its items."""
        invoice = await create_invoice_with_items(uow, owner_id)
        paid = run_after_read(
            monkeypatch, uow, lambda owner, invoice_id: pay_elsewhere(file_session_factory, owner, invoice_id)
        )

        with pytest.raises(PreconditionFailedError, match="paid or changed"):
            await DeleteInvoiceUseCase(uow).execute(owner_id, invoice.id)

        stored, income_rows = stored_state(file_session_factory, owner_id, invoice.id)
        assert stored is not None
        assert stored.status == InvoiceStatus.PAID
        assert stored.income_record_id == paid[0]
        assert [item.description for item in stored.line_items] == ["Design", "Development"]
        assert income_rows == 1

    @pytest.mark.asyncio
    async def test_unpaid_invoice_is_deleted_with_items(self, uow, owner_id, file_session_factory):
        invoice = await create_invoice_with_items(uow, owner_id)

        await DeleteInvoiceUseCase(uow).execute(owner_id, invoice.id)

        stored, _ = stored_state(file_session_factory, owner_id, invoice.id)
        assert stored is None
