"""
Domain services for the financial tracker.
This module exports domain services and service ports.
"""

from .numbering_service import NumberingService
from .payment_predictor import PaymentPredictor
from .payment_statistics import compute_stats, payment_days

__all__ = [
    "NumberingService",
    "PaymentPredictor",
    "compute_stats",
    "payment_days",
]
