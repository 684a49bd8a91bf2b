"""
Payment statistics calculator.
Summarizes a client's payment history into the features the payment-time
predictor consumes. Pure functions, no I/O.
"""

import math
import statistics
from datetime import date, datetime
from typing import Iterable, List, Union

from crefin.domain.models.payment import ClientPaymentStatistics, PaidInvoiceDates

# An invoice paid more than this many days after issue counts as late
LATE_PAYMENT_THRESHOLD_DAYS = 30

# Number of most recent payments compared against the overall mean
TREND_WINDOW = 5

_SECONDS_PER_DAY = 86400


def payment_days(issue_date: Union[date, datetime], paid_date: Union[date, datetime]) -> int:
    """Whole days between issue and payment, rounded down."""
    if isinstance(issue_date, datetime) or isinstance(paid_date, datetime):
        start = _as_datetime(issue_date)
        end = _as_datetime(paid_date)
        return math.floor((end - start).total_seconds() / _SECONDS_PER_DAY)
    return (paid_date - issue_date).days


def _as_datetime(value: Union[date, datetime]) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime(value.year, value.month, value.day)


def compute_stats(paid_invoices: Iterable[PaidInvoiceDates]) -> ClientPaymentStatistics:
    """
    Compute payment statistics for one client.

    Entries without a paid date are ignored. Input order is preserved, so
    callers should pass invoices ordered by paid date; the trend compares the
    overall mean against the mean of the last ``TREND_WINDOW`` entries.
    A positive trend means the client has been paying faster lately.

    Returns all-zero statistics when no entry has a paid date.
    """
    days: List[int] = [
        payment_days(invoice.issue_date, invoice.paid_date)
        for invoice in paid_invoices
        if invoice.paid_date is not None
    ]

    if not days:
        return ClientPaymentStatistics.empty()

    avg = statistics.fmean(days)
    late_count = sum(1 for d in days if d > LATE_PAYMENT_THRESHOLD_DAYS)
    recent = days[-min(TREND_WINDOW, len(days)):]

    return ClientPaymentStatistics(
        avg_payment_days=avg,
        payment_std_dev=statistics.pstdev(days),
        late_payment_rate=late_count / len(days),
        total_invoices=len(days),
        payment_trend=avg - statistics.fmean(recent),
    )
