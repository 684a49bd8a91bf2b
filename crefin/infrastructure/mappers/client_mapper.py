"""
Client mapper for converting between domain entities and database models.
"""

from crefin.domain.models.client import Client
from crefin.infrastructure.db.models import ClientModel


class ClientMapper:
    """Maps between Client domain entity and ClientModel database model."""

    def domain_to_model(self, client: Client) -> ClientModel:
        """Convert Client domain entity to a new ClientModel."""
        model = ClientModel(id=client.id, owner_id=client.owner_id)
        self.update_model(model, client)
        return model

    def update_model(self, model: ClientModel, client: Client) -> None:
        """Copy mutable client fields onto an existing model."""
        model.name = client.name
        model.email = client.email
        model.phone = client.phone
        model.company = client.company
        model.address = client.address
        model.notes = client.notes
        model.version = client.version

    def model_to_domain(self, model: ClientModel) -> Client:
        """Convert ClientModel to Client domain entity."""
        return Client(
            id=model.id,
            owner_id=model.owner_id,
            name=model.name,
            email=model.email,
            phone=model.phone,
            company=model.company,
            address=model.address,
            notes=model.notes,
            version=model.version or 1,
            created_at=model.created_at,
            updated_at=model.updated_at
        )
