"""
Ownership guard.
Resolves an id to an entity only when the caller owns it. Foreign and
missing ids are indistinguishable to the caller.
"""

from crefin.domain.models.base import EntityNotFoundError
from crefin.domain.models.client import Client
from crefin.domain.models.invoice import Invoice
from crefin.domain.repositories.unit_of_work import UnitOfWork


class OwnershipGuard:
    """Owner-scoped lookups shared by client and invoice use cases."""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    def require_owned_client(self, owner_id: str, client_id: int) -> Client:
        client = self.uow.clients.get_owned(owner_id, client_id)
        if client is None:
            raise EntityNotFoundError("Client", client_id)
        return client

    def require_owned_invoice(self, owner_id: str, invoice_id: int) -> Invoice:
        invoice = self.uow.invoices.get_owned(owner_id, invoice_id)
        if invoice is None:
            raise EntityNotFoundError("Invoice", invoice_id)
        return invoice
