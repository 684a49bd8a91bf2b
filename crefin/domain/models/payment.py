"""
Payment behaviour value objects.
Client payment statistics and the payment-time prediction derived from them.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Optional


@dataclass(frozen=True)
class PaidInvoiceDates:
    """Issue and paid dates of one historical invoice."""

    issue_date: date
    paid_date: Optional[date]


@dataclass(frozen=True)
class ClientPaymentStatistics:
    """Summary of how quickly a client has paid past invoices."""

    avg_payment_days: float = 0.0
    payment_std_dev: float = 0.0
    late_payment_rate: float = 0.0
    total_invoices: int = 0
    payment_trend: float = 0.0

    @classmethod
    def empty(cls) -> 'ClientPaymentStatistics':
        return cls()

    @property
    def has_history(self) -> bool:
        return self.total_invoices > 0


@dataclass(frozen=True)
class PaymentPrediction:
    """Predictor output for a single invoice."""

    predicted_payment_days: float
    confidence_score: float
    predicted_payment_date: date
    feature_importance: Dict[str, float] = field(default_factory=dict)
