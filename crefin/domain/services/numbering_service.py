"""Numbering service for invoice numbers.
Formats allocated sequence values.
"""

from crefin.domain.models.base import InvoiceNumber, ValidationError


class NumberingService:
    """
    Domain service that turns per-owner, per-year sequence values into
    invoice numbers. Allocation itself lives in the sequence repository.
    """

    def __init__(self, prefix: str = "INV"):
        if not prefix or not prefix.isalpha() or not prefix.isupper():
            raise ValidationError(f"Invalid invoice prefix: {prefix}", "prefix")
        self.prefix = prefix

    def format_invoice_number(self, year: int, sequence: int) -> str:
        """Render e.g. ``INV-2025-001``."""
        return str(InvoiceNumber(self.prefix, year, sequence))
