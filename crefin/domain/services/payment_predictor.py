"""Payment predictor interface.
Abstract port for the external payment-time prediction service.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Optional

from crefin.domain.models.payment import ClientPaymentStatistics, PaymentPrediction


class PaymentPredictor(ABC):
    """
    Predicts how many days a client will take to pay an invoice.

    Implementations are best-effort: every failure (timeout, connection
    error, bad status, malformed payload) is logged and reported as
    ``None``. They never raise.
    """

    @abstractmethod
    async def predict_payment_time(
        self,
        stats: ClientPaymentStatistics,
        amount: float,
        issue_date: date
    ) -> Optional[PaymentPrediction]:
        pass

    @abstractmethod
    async def check_health(self) -> bool:
        """True when the prediction service reports itself healthy."""
        pass
