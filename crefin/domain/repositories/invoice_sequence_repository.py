"""Invoice sequence repository interface."""

from abc import ABC, abstractmethod


class InvoiceSequenceRepository(ABC):
    """
    Per-owner, per-year invoice counters.

    Implementations must serialize concurrent allocations for the same
    owner and year, and must never hand out the same value twice once the
    surrounding transaction commits.
    """

    @abstractmethod
    def next_value(self, owner_id: str, year: int) -> int:
        """
        Allocate the next sequence value for ``owner_id`` in ``year``.

        Must run inside the transaction that inserts the invoice. The first
        call for a new owner/year returns 1.
        """
        pass
