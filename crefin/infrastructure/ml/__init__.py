"""
Machine-learning service integrations.
"""

from .payment_predictor import HttpPaymentPredictor, get_payment_predictor

__all__ = [
    "HttpPaymentPredictor",
    "get_payment_predictor",
]
