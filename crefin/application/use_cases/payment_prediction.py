"""
Payment-time prediction enrichment.

Runs after an invoice has been committed. Builds the client's payment
statistics, asks the predictor for an estimate and stores it on the
invoice. Failures never reach the caller: an invoice without a
prediction is always valid.
"""

import logging
from typing import Optional

from crefin.domain.models.invoice import Invoice
from crefin.domain.models.payment import ClientPaymentStatistics
from crefin.domain.repositories.unit_of_work import UnitOfWork
from crefin.domain.services.payment_predictor import PaymentPredictor
from crefin.domain.services.payment_statistics import compute_stats

logger = logging.getLogger(__name__)


class InvoicePredictionEnricher:
    """Attaches a best-effort payment prediction to a freshly created invoice."""

    def __init__(self, uow: UnitOfWork, predictor: Optional[PaymentPredictor]):
        self.uow = uow
        self.predictor = predictor

    def client_statistics(self, owner_id: str, client_id: int) -> ClientPaymentStatistics:
        history = self.uow.invoices.get_paid_dates_for_client(owner_id, client_id)
        return compute_stats(history)

    async def enrich(self, invoice: Invoice) -> Invoice:
        if self.predictor is None:
            return invoice

        try:
            stats = self.client_statistics(invoice.owner_id, invoice.client_id)
            if not stats.has_history:
                logger.debug(f"No payment history for client {invoice.client_id}, skipping prediction")
                return invoice

            prediction = await self.predictor.predict_payment_time(stats, invoice.amount, invoice.issue_date)
            if prediction is None:
                return invoice

            with self.uow:
                self.uow.invoices.update_prediction(
                    invoice.id,
                    prediction.predicted_payment_days,
                    prediction.predicted_payment_date,
                    prediction.confidence_score
                )
                self.uow.commit()

            invoice.attach_prediction(
                prediction.predicted_payment_days,
                prediction.predicted_payment_date,
                prediction.confidence_score
            )
            logger.info(
                f"Invoice {invoice.invoice_number} predicted to be paid in "
                f"{prediction.predicted_payment_days:.1f} days"
            )
        except Exception:
            logger.exception(f"Payment prediction enrichment failed for invoice {invoice.id}")

        return invoice
