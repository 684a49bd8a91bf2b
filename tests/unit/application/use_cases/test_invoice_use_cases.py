"""
Unit tests for invoice use cases, run against an in-memory database.
"""

import pytest
from datetime import date, timedelta
from typing import List, Optional

from crefin.application.dto.client_dto import CreateClientRequestDTO
from crefin.application.dto.invoice_dto import (
    CreateInvoiceRequestDTO,
    UpdateInvoiceRequestDTO,
    ListInvoicesRequestDTO,
    MarkInvoicePaidRequestDTO,
    LineItemDTO,
)
from crefin.application.use_cases.client_use_cases import CreateClientUseCase
from crefin.application.use_cases.income_use_cases import ListIncomeUseCase
from crefin.application.use_cases.invoice_use_cases import (
    CreateInvoiceUseCase,
    ListInvoicesUseCase,
    GetInvoiceByIdUseCase,
    UpdateInvoiceUseCase,
    UpdateInvoiceCommand,
    MarkInvoicePaidUseCase,
    MarkInvoicePaidCommand,
    DeleteInvoiceUseCase,
)
from crefin.domain.models.base import (
    ConflictError,
    DuplicateEntityError,
    EntityNotFoundError,
    PreconditionFailedError,
    ValidationError,
)
from crefin.domain.models.payment import ClientPaymentStatistics, PaymentPrediction
from crefin.domain.services.payment_predictor import PaymentPredictor

ISSUE_DAY = date(2025, 1, 10)


class FakePredictor(PaymentPredictor):
    """Records calls and returns a canned prediction."""

    def __init__(self, prediction: Optional[PaymentPrediction] = None, error: Optional[Exception] = None):
        self.prediction = prediction
        self.error = error
        self.calls: List[ClientPaymentStatistics] = []

    async def predict_payment_time(self, stats, amount, issue_date):
        self.calls.append(stats)
        if self.error:
            raise self.error
        return self.prediction

    async def check_health(self) -> bool:
        return True


class TimingOutPredictor(FakePredictor):
    """Behaves like the HTTP gateway when every call times out."""

    async def predict_payment_time(self, stats, amount, issue_date):
        self.calls.append(stats)
        return None


PREDICTION = PaymentPrediction(
    predicted_payment_days=24.0,
    confidence_score=0.77,
    predicted_payment_date=date(2025, 2, 3),
)


def fixed_day(day: date):
    return lambda: day


async def create_client(uow, owner_id, name="Acme"):
    return await CreateClientUseCase(uow).execute(owner_id, CreateClientRequestDTO(name=name))


def invoice_request(client_id, amount=1000.0, due_in_days=30, issue_day=ISSUE_DAY, **fields):
    return CreateInvoiceRequestDTO(
        client_id=client_id,
        amount=amount,
        description=fields.pop("description", "Website redesign"),
        due_date=issue_day + timedelta(days=due_in_days),
        **fields
    )


async def create_invoice(uow, owner_id, client_id, day=ISSUE_DAY, predictor=None, **fields):
    use_case = CreateInvoiceUseCase(uow, predictor, today=fixed_day(day))
    return await use_case.execute(owner_id, invoice_request(client_id, issue_day=day, **fields))


async def mark_paid(uow, owner_id, invoice_id, paid_date, notes=None):
    command = MarkInvoicePaidCommand(
        invoice_id=invoice_id,
        payment=MarkInvoicePaidRequestDTO(paid_date=paid_date, notes=notes)
    )
    return await MarkInvoicePaidUseCase(uow).execute(owner_id, command)


class TestInvoiceNumbering:
    """Test cases for invoice number allocation."""

    @pytest.mark.asyncio
    async def test_sequential_numbers(self, uow, owner_id):
        """Test numbers are gap-free and zero-padded within one owner and year."""
        client = await create_client(uow, owner_id)

        numbers = [
            (await create_invoice(uow, owner_id, client.id)).invoice_number
            for _ in range(3)
        ]

        assert numbers == ["INV-2025-001", "INV-2025-002", "INV-2025-003"]

    @pytest.mark.asyncio
    async def test_numbers_restart_per_owner_and_year(self, uow, owner_id, other_owner_id):
        client = await create_client(uow, owner_id)
        other_client = await create_client(uow, other_owner_id, name="Initech")

        await create_invoice(uow, owner_id, client.id)
        await create_invoice(uow, owner_id, client.id)

        other = await create_invoice(uow, other_owner_id, other_client.id)
        next_year = await create_invoice(uow, owner_id, client.id, day=date(2026, 1, 2))

        assert other.invoice_number == "INV-2025-001"
        assert next_year.invoice_number == "INV-2026-001"

    @pytest.mark.asyncio
    async def test_deleted_numbers_are_not_reused(self, uow, owner_id):
        client = await create_client(uow, owner_id)
        await create_invoice(uow, owner_id, client.id)
        second = await create_invoice(uow, owner_id, client.id)

        await DeleteInvoiceUseCase(uow).execute(owner_id, second.id)
        third = await create_invoice(uow, owner_id, client.id)

        assert third.invoice_number == "INV-2025-003"

    @pytest.mark.asyncio
    async def test_collision_is_retried(self, uow, owner_id, monkeypatch):
        """Test a lost allocation race rolls back and retries the whole insert."""
        client = await create_client(uow, owner_id)
        real_next_value = uow.sequences.next_value
        attempts = []

        def racing_next_value(owner, year):
            attempts.append(year)
            if len(attempts) == 1:
                raise DuplicateEntityError("InvoiceSequence", "owner_id/year", f"{owner}/{year}")
            return real_next_value(owner, year)

        monkeypatch.setattr(uow.sequences, "next_value", racing_next_value)

        invoice = await create_invoice(uow, owner_id, client.id)

        assert len(attempts) == 2
        assert invoice.invoice_number == "INV-2025-001"

    @pytest.mark.asyncio
    async def test_collision_retries_are_bounded(self, uow, owner_id, monkeypatch):
        client = await create_client(uow, owner_id)

        def always_collides(owner, year):
            raise DuplicateEntityError("InvoiceSequence", "owner_id/year", f"{owner}/{year}")

        monkeypatch.setattr(uow.sequences, "next_value", always_collides)

        with pytest.raises(ConflictError, match="after 3 attempts"):
            await create_invoice(uow, owner_id, client.id)

        listing = await ListInvoicesUseCase(uow).execute(owner_id, ListInvoicesRequestDTO())
        assert listing.total == 0


class TestCreateInvoiceUseCase:
    """Test cases for invoice creation."""

    @pytest.mark.asyncio
    async def test_create_draft_invoice(self, uow, owner_id):
        client = await create_client(uow, owner_id)

        invoice = await create_invoice(uow, owner_id, client.id, notes="Thanks!")

        assert invoice.status == "draft"
        assert invoice.issue_date == ISSUE_DAY
        assert invoice.due_date == ISSUE_DAY + timedelta(days=30)
        assert invoice.terms == "Payment due within 30 days"
        assert invoice.notes == "Thanks!"
        assert invoice.client.name == "Acme"

    @pytest.mark.asyncio
    async def test_create_with_line_items(self, uow, owner_id):
        client = await create_client(uow, owner_id)
        items = [
            LineItemDTO(description="Design", quantity=8, rate=75.0, amount=600.0),
            LineItemDTO(description="Development", quantity=4, rate=100.0, amount=400.0),
        ]

        invoice = await create_invoice(uow, owner_id, client.id, items=items)

        stored = uow.invoices.get_by_id(invoice.id)
        assert [item.description for item in stored.line_items] == ["Design", "Development"]
        assert stored.line_items_total == pytest.approx(1000.0)

    @pytest.mark.asyncio
    async def test_line_items_must_match_amount(self, uow, owner_id):
        client = await create_client(uow, owner_id)
        items = [LineItemDTO(description="Design", quantity=8, rate=75.0, amount=600.0)]

        with pytest.raises(ValidationError):
            await create_invoice(uow, owner_id, client.id, items=items)

    @pytest.mark.asyncio
    async def test_due_date_before_issue_date(self, uow, owner_id):
        client = await create_client(uow, owner_id)

        with pytest.raises(ValidationError):
            await create_invoice(uow, owner_id, client.id, due_in_days=-1)

    @pytest.mark.asyncio
    async def test_foreign_client(self, uow, owner_id, other_owner_id):
        """Test billing another owner's client is indistinguishable from a missing client."""
        foreign = await create_client(uow, other_owner_id, name="Initech")

        with pytest.raises(EntityNotFoundError):
            await create_invoice(uow, owner_id, foreign.id)


class TestPaymentPredictionEnrichment:
    """Test cases for best-effort prediction on creation."""

    async def client_with_history(self, uow, owner_id):
        client = await create_client(uow, owner_id)
        first = await create_invoice(uow, owner_id, client.id)
        await mark_paid(uow, owner_id, first.id, ISSUE_DAY + timedelta(days=26))
        return client

    @pytest.mark.asyncio
    async def test_prediction_is_attached_and_stored(self, uow, owner_id):
        client = await self.client_with_history(uow, owner_id)
        predictor = FakePredictor(PREDICTION)

        invoice = await create_invoice(uow, owner_id, client.id, predictor=predictor)

        assert invoice.predicted_payment_days == 24.0
        assert invoice.predicted_payment_date == date(2025, 2, 3)
        assert invoice.prediction_confidence == 0.77

        stats = predictor.calls[0]
        assert stats.total_invoices == 1
        assert stats.avg_payment_days == 26

        stored = uow.invoices.get_by_id(invoice.id)
        assert stored.predicted_payment_date == date(2025, 2, 3)

    @pytest.mark.asyncio
    async def test_no_history_skips_predictor(self, uow, owner_id):
        client = await create_client(uow, owner_id)
        predictor = FakePredictor(PREDICTION)

        invoice = await create_invoice(uow, owner_id, client.id, predictor=predictor)

        assert predictor.calls == []
        assert invoice.predicted_payment_date is None

    @pytest.mark.asyncio
    async def test_timeout_still_creates_invoice(self, uow, owner_id):
        """Test an unavailable predictor never blocks creation."""
        client = await self.client_with_history(uow, owner_id)
        predictor = TimingOutPredictor()

        invoice = await create_invoice(uow, owner_id, client.id, predictor=predictor)

        assert len(predictor.calls) == 1
        assert invoice.id is not None
        assert invoice.predicted_payment_date is None
        assert uow.invoices.get_by_id(invoice.id).predicted_payment_days is None

    @pytest.mark.asyncio
    async def test_predictor_crash_is_absorbed(self, uow, owner_id):
        client = await self.client_with_history(uow, owner_id)
        predictor = FakePredictor(error=RuntimeError("model not loaded"))

        invoice = await create_invoice(uow, owner_id, client.id, predictor=predictor)

        assert invoice.invoice_number == "INV-2025-002"
        assert invoice.predicted_payment_date is None


class TestListInvoicesUseCase:
    """Test cases for invoice listing."""

    @pytest.mark.asyncio
    async def test_filters_and_summary(self, uow, owner_id, other_owner_id):
        acme = await create_client(uow, owner_id)
        globex = await create_client(uow, owner_id, name="Globex")
        foreign = await create_client(uow, other_owner_id, name="Initech")

        draft = await create_invoice(uow, owner_id, acme.id, amount=100.0)
        sent = await create_invoice(uow, owner_id, globex.id, amount=200.0)
        paid = await create_invoice(uow, owner_id, acme.id, amount=300.0)
        await create_invoice(uow, other_owner_id, foreign.id, amount=999.0)

        await UpdateInvoiceUseCase(uow).execute(
            owner_id,
            UpdateInvoiceCommand(invoice_id=sent.id, changes=UpdateInvoiceRequestDTO(status="sent"))
        )
        await mark_paid(uow, owner_id, paid.id, ISSUE_DAY + timedelta(days=5))

        listing = await ListInvoicesUseCase(uow).execute(owner_id, ListInvoicesRequestDTO())

        assert listing.total == 3
        assert listing.summary.total_draft == 1
        assert listing.summary.total_sent == 1
        assert listing.summary.total_paid == 1
        assert listing.summary.amount_pending == pytest.approx(200.0)
        assert listing.summary.amount_paid == pytest.approx(300.0)
        assert {invoice.client.name for invoice in listing.invoices} == {"Acme", "Globex"}

        by_client = await ListInvoicesUseCase(uow).execute(
            owner_id, ListInvoicesRequestDTO(client_id=acme.id)
        )
        assert {invoice.id for invoice in by_client.invoices} == {draft.id, paid.id}
        assert by_client.summary.total_sent == 1

        drafts = await ListInvoicesUseCase(uow).execute(owner_id, ListInvoicesRequestDTO(status="draft"))
        assert [invoice.id for invoice in drafts.invoices] == [draft.id]

    @pytest.mark.asyncio
    async def test_date_range(self, uow, owner_id):
        client = await create_client(uow, owner_id)
        january = await create_invoice(uow, owner_id, client.id, day=date(2025, 1, 15))
        await create_invoice(uow, owner_id, client.id, day=date(2025, 3, 15))

        listing = await ListInvoicesUseCase(uow).execute(
            owner_id,
            ListInvoicesRequestDTO(start_date=date(2025, 1, 1), end_date=date(2025, 1, 31))
        )

        assert [invoice.id for invoice in listing.invoices] == [january.id]


class TestGetInvoiceByIdUseCase:
    """Test cases for the joined invoice view."""

    @pytest.mark.asyncio
    async def test_details_include_owner_client_and_income(self, uow, owner_id):
        client = await create_client(uow, owner_id)
        invoice = await create_invoice(uow, owner_id, client.id)
        await mark_paid(uow, owner_id, invoice.id, date(2025, 2, 1))

        details = await GetInvoiceByIdUseCase(uow).execute(owner_id, invoice.id)

        assert details.client.name == "Acme"
        assert details.user.name == "Olivia Owner"
        assert details.user.email == "olivia@example.com"
        assert details.income.amount == pytest.approx(1000.0)
        assert details.income.logged_at == date(2025, 2, 1)

    @pytest.mark.asyncio
    async def test_foreign_invoice_is_not_found(self, uow, owner_id, other_owner_id):
        client = await create_client(uow, other_owner_id, name="Initech")
        invoice = await create_invoice(uow, other_owner_id, client.id)

        with pytest.raises(EntityNotFoundError):
            await GetInvoiceByIdUseCase(uow).execute(owner_id, invoice.id)


class TestUpdateInvoiceUseCase:
    """Test cases for invoice updates."""

    @pytest.mark.asyncio
    async def test_update_details(self, uow, owner_id):
        client = await create_client(uow, owner_id)
        invoice = await create_invoice(uow, owner_id, client.id)

        updated = await UpdateInvoiceUseCase(uow).execute(
            owner_id,
            UpdateInvoiceCommand(
                invoice_id=invoice.id,
                changes=UpdateInvoiceRequestDTO(amount=1200.0, notes="Revised scope")
            )
        )

        assert updated.amount == pytest.approx(1200.0)
        assert updated.notes == "Revised scope"
        assert updated.description == "Website redesign"

    @pytest.mark.asyncio
    async def test_update_replaces_line_items(self, uow, owner_id):
        client = await create_client(uow, owner_id)
        items = [
            LineItemDTO(description="Design", quantity=8, rate=75.0, amount=600.0),
            LineItemDTO(description="Development", quantity=4, rate=100.0, amount=400.0),
        ]
        invoice = await create_invoice(uow, owner_id, client.id, items=items)
        version = uow.invoices.get_by_id(invoice.id).version

        await UpdateInvoiceUseCase(uow).execute(
            owner_id,
            UpdateInvoiceCommand(
                invoice_id=invoice.id,
                changes=UpdateInvoiceRequestDTO(
                    amount=300.0,
                    items=[LineItemDTO(description="Audit", quantity=3, rate=100.0, amount=300.0)]
                )
            )
        )

        stored = uow.invoices.get_by_id(invoice.id)
        assert [item.description for item in stored.line_items] == ["Audit"]
        assert stored.amount == pytest.approx(300.0)
        assert stored.version == version + 1

    @pytest.mark.asyncio
    async def test_illegal_transition(self, uow, owner_id):
        client = await create_client(uow, owner_id)
        invoice = await create_invoice(uow, owner_id, client.id)

        with pytest.raises(PreconditionFailedError):
            await UpdateInvoiceUseCase(uow).execute(
                owner_id,
                UpdateInvoiceCommand(invoice_id=invoice.id, changes=UpdateInvoiceRequestDTO(status="overdue"))
            )

    @pytest.mark.asyncio
    async def test_paid_status_requires_mark_paid(self, uow, owner_id):
        client = await create_client(uow, owner_id)
        invoice = await create_invoice(uow, owner_id, client.id)

        with pytest.raises(PreconditionFailedError):
            await UpdateInvoiceUseCase(uow).execute(
                owner_id,
                UpdateInvoiceCommand(invoice_id=invoice.id, changes=UpdateInvoiceRequestDTO(status="paid"))
            )

        assert uow.invoices.get_by_id(invoice.id).status == "draft"

    @pytest.mark.asyncio
    async def test_paid_invoice_cannot_be_updated(self, uow, owner_id):
        client = await create_client(uow, owner_id)
        invoice = await create_invoice(uow, owner_id, client.id)
        await mark_paid(uow, owner_id, invoice.id, date(2025, 2, 1))

        with pytest.raises(PreconditionFailedError, match="cannot modify paid invoice"):
            await UpdateInvoiceUseCase(uow).execute(
                owner_id,
                UpdateInvoiceCommand(invoice_id=invoice.id, changes=UpdateInvoiceRequestDTO(amount=1.0))
            )


class TestMarkInvoicePaidUseCase:
    """Test cases for recording payments."""

    @pytest.mark.asyncio
    async def test_mark_paid_creates_matching_income(self, uow, owner_id):
        """Test the paid invoice and its income record agree on amount and date."""
        client = await create_client(uow, owner_id)
        invoice = await create_invoice(uow, owner_id, client.id)

        result = await mark_paid(uow, owner_id, invoice.id, date(2025, 2, 1))

        assert result.invoice.status == "paid"
        assert result.invoice.paid_date == date(2025, 2, 1)
        assert result.invoice.income_record_id == result.income.id

        income = uow.income.get_by_id(result.income.id)
        assert income.amount == pytest.approx(1000.0)
        assert income.logged_at == date(2025, 2, 1)
        assert income.client_name == "Acme"
        assert income.source == "invoice"
        assert income.notes == "Payment for invoice INV-2025-001"

        stored = uow.invoices.get_by_id(invoice.id)
        assert stored.is_paid
        assert stored.income_record_id == income.id

    @pytest.mark.asyncio
    async def test_second_payment_conflicts(self, uow, owner_id):
        client = await create_client(uow, owner_id)
        invoice = await create_invoice(uow, owner_id, client.id)
        await mark_paid(uow, owner_id, invoice.id, date(2025, 2, 1))

        with pytest.raises(ConflictError):
            await mark_paid(uow, owner_id, invoice.id, date(2025, 2, 2))

        ledger = await ListIncomeUseCase(uow).execute(owner_id, None)
        assert ledger.total == 1

    @pytest.mark.asyncio
    async def test_lost_race_rolls_back_income(self, uow, owner_id, monkeypatch):
        """Test a failed guarded update leaves no orphaned income record."""
        client = await create_client(uow, owner_id)
        invoice = await create_invoice(uow, owner_id, client.id)

        monkeypatch.setattr(uow.invoices, "mark_paid_if_unpaid", lambda *args: False)

        with pytest.raises(ConflictError):
            await mark_paid(uow, owner_id, invoice.id, date(2025, 2, 1))

        ledger = await ListIncomeUseCase(uow).execute(owner_id, None)
        assert ledger.total == 0
        assert uow.invoices.get_by_id(invoice.id).status == "draft"

    @pytest.mark.asyncio
    async def test_failure_after_income_insert_rolls_back(self, uow, owner_id, monkeypatch):
        client = await create_client(uow, owner_id)
        invoice = await create_invoice(uow, owner_id, client.id)

        def crash(*args):
            raise RuntimeError("connection lost")

        monkeypatch.setattr(uow.invoices, "mark_paid_if_unpaid", crash)

        with pytest.raises(RuntimeError):
            await mark_paid(uow, owner_id, invoice.id, date(2025, 2, 1))

        assert (await ListIncomeUseCase(uow).execute(owner_id, None)).total == 0
        assert not uow.invoices.get_by_id(invoice.id).is_paid

    @pytest.mark.asyncio
    async def test_cancelled_invoice_cannot_be_paid(self, uow, owner_id):
        client = await create_client(uow, owner_id)
        invoice = await create_invoice(uow, owner_id, client.id)
        await UpdateInvoiceUseCase(uow).execute(
            owner_id,
            UpdateInvoiceCommand(invoice_id=invoice.id, changes=UpdateInvoiceRequestDTO(status="cancelled"))
        )

        with pytest.raises(PreconditionFailedError):
            await mark_paid(uow, owner_id, invoice.id, date(2025, 2, 1))

    @pytest.mark.asyncio
    @pytest.mark.asyncio
    async def test_foreign_invoice(self, uow, owner_id, other_owner_id):
        client = await create_client(uow, other_owner_id, name="Initech")
        invoice = await create_invoice(uow, other_owner_id, client.id)

        with pytest.raises(EntityNotFoundError):
            await mark_paid(uow, owner_id, invoice.id, date(2025, 2, 1))


class TestInvoiceLifecycleScenario:
    """End-to-end lifecycle through the use cases."""

    @pytest.mark.asyncio
    async def test_acme_invoice_lifecycle(self, uow, owner_id):
        today = date.today()
        client = await create_client(uow, owner_id, name="Acme")

        invoice = await create_invoice(uow, owner_id, client.id, day=today, amount=1000.0, due_in_days=30)
        assert invoice.status == "draft"
        assert invoice.invoice_number == f"INV-{today.year}-001"

        result = await mark_paid(uow, owner_id, invoice.id, today)
        assert result.invoice.status == "paid"
        assert result.income.amount == pytest.approx(1000.0)
        assert uow.income.get_by_id(result.income.id).client_name == "Acme"

        with pytest.raises(PreconditionFailedError):
            await DeleteInvoiceUseCase(uow).execute(owner_id, invoice.id)
