"""
HTTP gateway to the ML payment-time prediction service.

The service is optional: invoices are created whether or not it answers,
so every failure here is logged and turned into ``None``.
"""

import asyncio
import logging
from functools import lru_cache
from datetime import date
from typing import Any, Dict, Optional

import requests

from crefin.config import get_settings
from crefin.domain.models.base import ExternalServiceDegraded
from crefin.domain.models.payment import ClientPaymentStatistics, PaymentPrediction
from crefin.domain.services.payment_predictor import PaymentPredictor

logger = logging.getLogger(__name__)

PREDICT_PATH = "/api/ml/predict/payment-time"
HEALTH_PATH = "/health"

SERVICE_NAME = "payment predictor"


class HttpPaymentPredictor(PaymentPredictor):
    """Calls the prediction service over HTTP with a single, time-boxed attempt."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
        session: Optional[requests.Session] = None
    ):
        settings = get_settings()
        self.base_url = (base_url or settings.ml_api_url).rstrip("/")
        self.timeout_seconds = timeout_seconds if timeout_seconds is not None else settings.ml_api_timeout_seconds
        self.session = session or requests.Session()

    @staticmethod
    def build_payload(stats: ClientPaymentStatistics, amount: float, issue_date: date) -> Dict[str, Any]:
        return {
            "client_avg_payment_days": stats.avg_payment_days,
            "client_late_payment_rate": stats.late_payment_rate,
            "client_payment_std": stats.payment_std_dev,
            "client_total_invoices": stats.total_invoices,
            "client_payment_trend": stats.payment_trend,
            "amount": float(amount),
            "issue_date": issue_date.isoformat(),
        }

    @staticmethod
    def parse_prediction(body: Any) -> PaymentPrediction:
        """Validate a prediction response body. Raises ExternalServiceDegraded when malformed."""
        if not isinstance(body, dict):
            raise ExternalServiceDegraded(SERVICE_NAME, "response is not a JSON object")

        try:
            days = float(body["predicted_payment_days"])
            confidence = float(body["confidence_score"])
            predicted_date = date.fromisoformat(str(body["predicted_payment_date"])[:10])
        except (KeyError, TypeError, ValueError) as exc:
            raise ExternalServiceDegraded(SERVICE_NAME, f"malformed prediction: {exc!r}") from exc

        importance = body.get("feature_importance") or {}
        if not isinstance(importance, dict):
            importance = {}

        return PaymentPrediction(
            predicted_payment_days=days,
            confidence_score=confidence,
            predicted_payment_date=predicted_date,
            feature_importance={str(k): float(v) for k, v in importance.items() if isinstance(v, (int, float))}
        )

    def _post_prediction(self, payload: Dict[str, Any]) -> PaymentPrediction:
        try:
            response = self.session.post(
                f"{self.base_url}{PREDICT_PATH}",
                json=payload,
                timeout=self.timeout_seconds
            )
        except requests.Timeout as exc:
            raise ExternalServiceDegraded(SERVICE_NAME, f"timed out after {self.timeout_seconds}s") from exc
        except requests.RequestException as exc:
            raise ExternalServiceDegraded(SERVICE_NAME, str(exc)) from exc

        if not response.ok:
            raise ExternalServiceDegraded(SERVICE_NAME, f"HTTP {response.status_code}")

        try:
            body = response.json()
        except ValueError as exc:
            raise ExternalServiceDegraded(SERVICE_NAME, "response body is not JSON") from exc

        return self.parse_prediction(body)

    async def predict_payment_time(
        self,
        stats: ClientPaymentStatistics,
        amount: float,
        issue_date: date
    ) -> Optional[PaymentPrediction]:
        payload = self.build_payload(stats, amount, issue_date)
        try:
            prediction = await asyncio.to_thread(self._post_prediction, payload)
        except ExternalServiceDegraded as exc:
            logger.warning(
                f"Payment prediction failed: {exc.reason}",
                extra={"ml_api_url": self.base_url, "client_total_invoices": stats.total_invoices}
            )
            return None

        logger.info(
            f"Payment prediction received: {prediction.predicted_payment_days:.1f} days "
            f"(confidence {prediction.confidence_score:.2f})"
        )
        return prediction

    def _get_health(self) -> bool:
        try:
            response = self.session.get(f"{self.base_url}{HEALTH_PATH}", timeout=self.timeout_seconds)
            return response.ok and response.json().get("status") == "healthy"
        except (requests.RequestException, ValueError, AttributeError) as exc:
            logger.warning(f"Payment predictor health check failed: {exc}")
            return False

    async def check_health(self) -> bool:
        return await asyncio.to_thread(self._get_health)


@lru_cache()
def get_payment_predictor() -> PaymentPredictor:
    """FastAPI dependency returning the process-wide predictor."""
    return HttpPaymentPredictor()
