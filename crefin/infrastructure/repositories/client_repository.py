"""
Client repository implementation using SQLAlchemy.
"""

from typing import Optional, List
from sqlalchemy.orm import Session, Query
from sqlalchemy import func, or_

from crefin.domain.models.client import Client
from crefin.domain.repositories.client_repository import ClientRepository as ClientRepositoryInterface
from crefin.domain.models.base import EntityNotFoundError
from crefin.infrastructure.db.models import ClientModel, InvoiceModel
from crefin.infrastructure.mappers.client_mapper import ClientMapper


class SQLAlchemyClientRepository(ClientRepositoryInterface):
    """SQLAlchemy implementation of client repository."""

    def __init__(self, session: Session):
        self.session = session
        self.mapper = ClientMapper()
        self.model = ClientModel

    def save(self, client: Client) -> Client:
        """Save a client entity."""
        if client.is_new:
            model = self.mapper.domain_to_model(client)
            self.session.add(model)
        else:
            model = self.session.get(ClientModel, client.id)
            if not model:
                raise EntityNotFoundError("Client", client.id)
            self.mapper.update_model(model, client)

        self.session.flush()
        if client.is_new:
            client.id = model.id
        return client

    def get_by_id(self, client_id: int) -> Optional[Client]:
        """Get client by ID."""
        model = self.session.get(ClientModel, client_id)
        if not model:
            return None
        return self.mapper.model_to_domain(model)

    def get_owned(self, owner_id: str, client_id: int) -> Optional[Client]:
        """Get client by ID if it belongs to the owner."""
        model = self.session.query(ClientModel).filter_by(
            id=client_id,
            owner_id=owner_id
        ).first()

        if not model:
            return None

        return self.mapper.model_to_domain(model)

    def get_many_owned(self, owner_id: str, client_ids: List[int]) -> List[Client]:
        if not client_ids:
            return []
        models = self.session.query(ClientModel).filter(
            ClientModel.owner_id == owner_id,
            ClientModel.id.in_(set(client_ids))
        ).all()
        return [self.mapper.model_to_domain(model) for model in models]

    def _owner_query(self, owner_id: str, search: Optional[str]) -> Query:
        query = self.session.query(ClientModel).filter(ClientModel.owner_id == owner_id)
        if search:
            pattern = f"%{search.strip().lower()}%"
            query = query.filter(or_(
                func.lower(ClientModel.name).like(pattern),
                func.lower(ClientModel.email).like(pattern),
                func.lower(ClientModel.company).like(pattern)
            ))
        return query

    def list_by_owner(
        self,
        owner_id: str,
        search: Optional[str] = None,
        limit: int = 50,
        offset: int = 0
    ) -> List[Client]:
        """List an owner's clients, newest first."""
        models = (
            self._owner_query(owner_id, search)
            .order_by(ClientModel.created_at.desc(), ClientModel.id.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )
        return [self.mapper.model_to_domain(model) for model in models]

    def count_by_owner(self, owner_id: str, search: Optional[str] = None) -> int:
        """Get client count for owner."""
        return self._owner_query(owner_id, search).with_entities(func.count(ClientModel.id)).scalar()

    def has_invoices(self, client_id: int) -> bool:
        return self.session.query(
            self.session.query(InvoiceModel.id).filter_by(client_id=client_id).exists()
        ).scalar()

    def delete(self, client_id: int) -> bool:
        """Delete client by ID."""
        model = self.session.get(ClientModel, client_id)
        if not model:
            return False

        self.session.delete(model)
        self.session.flush()
        return True
