"""
Unit tests for the invoice numbering service.
"""

import pytest
from crefin.domain.models.base import ValidationError
from crefin.domain.services.numbering_service import NumberingService


class TestNumberingService:
    """Test cases for NumberingService."""

    def test_format_pads_to_three_digits(self):
        service = NumberingService()

        assert service.format_invoice_number(2025, 1) == "INV-2025-001"
        assert service.format_invoice_number(2025, 42) == "INV-2025-042"

    def test_format_widens_past_999(self):
        service = NumberingService()

        assert service.format_invoice_number(2025, 1000) == "INV-2025-1000"

    def test_custom_prefix(self):
        service = NumberingService("FAC")

        assert service.format_invoice_number(2026, 7) == "FAC-2026-007"

    def test_invalid_prefix(self):
        with pytest.raises(ValidationError):
            NumberingService("inv")

    def test_sequence_must_be_positive(self):
        with pytest.raises(ValidationError):
            NumberingService().format_invoice_number(2025, 0)

