"""
Client use cases for the application layer.
Implements the owner-scoped client registry.
"""

import logging
from dataclasses import dataclass

from crefin.application.use_cases.base_use_case import (
    CreateUseCase, UpdateUseCase, DeleteUseCase, GetByIdUseCase, ListUseCase
)
from crefin.application.use_cases.ownership import OwnershipGuard
from crefin.application.dto.client_dto import (
    CreateClientRequestDTO, UpdateClientRequestDTO, ListClientsRequestDTO,
    ClientResponseDTO, ClientListResponseDTO
)
from crefin.domain.models.base import PreconditionFailedError
from crefin.domain.models.client import Client
from crefin.domain.repositories.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UpdateClientCommand:
    client_id: int
    changes: UpdateClientRequestDTO


class CreateClientUseCase(CreateUseCase[CreateClientRequestDTO, ClientResponseDTO]):
    """Use case for creating a new client."""

    async def _execute_command_logic(self, owner_id: str, request: CreateClientRequestDTO) -> ClientResponseDTO:
        client = Client.create(
            owner_id=owner_id,
            name=request.name,
            email=request.email,
            phone=request.phone,
            company=request.company,
            address=request.address,
            notes=request.notes
        )

        saved_client = self.uow.clients.save(client)
        self.uow.commit()

        logger.info(f"Client {saved_client.id} created for owner {owner_id}")
        return ClientResponseDTO.from_domain(saved_client)


class ListClientsUseCase(ListUseCase[ListClientsRequestDTO, ClientListResponseDTO]):
    """Use case for listing and searching an owner's clients."""

    async def _execute_business_logic(self, owner_id: str, request: ListClientsRequestDTO) -> ClientListResponseDTO:
        clients = self.uow.clients.list_by_owner(
            owner_id,
            search=request.search,
            limit=request.limit,
            offset=request.offset
        )
        total = self.uow.clients.count_by_owner(owner_id, search=request.search)

        return ClientListResponseDTO(
            clients=[ClientResponseDTO.from_domain(client) for client in clients],
            total=total,
            limit=request.limit,
            offset=request.offset
        )


class GetClientByIdUseCase(GetByIdUseCase[int, ClientResponseDTO]):
    """Use case for fetching one owned client."""

    async def _execute_business_logic(self, owner_id: str, client_id: int) -> ClientResponseDTO:
        client = OwnershipGuard(self.uow).require_owned_client(owner_id, client_id)
        return ClientResponseDTO.from_domain(client)


class UpdateClientUseCase(UpdateUseCase[UpdateClientCommand, ClientResponseDTO]):
    """Use case for updating client information."""

    async def _execute_command_logic(self, owner_id: str, request: UpdateClientCommand) -> ClientResponseDTO:
        client = OwnershipGuard(self.uow).require_owned_client(owner_id, request.client_id)

        changes = request.changes
        client.update_info(
            name=changes.name,
            email=changes.email,
            phone=changes.phone,
            company=changes.company,
            address=changes.address,
            notes=changes.notes
        )

        saved_client = self.uow.clients.save(client)
        self.uow.commit()

        logger.info(f"Client {client.id} updated by owner {owner_id}")
        return ClientResponseDTO.from_domain(saved_client)


class DeleteClientUseCase(DeleteUseCase[int, None]):
    """
    Use case for deleting a client.
    Clients that are referenced by any invoice cannot be deleted.
    """

    async def _execute_command_logic(self, owner_id: str, client_id: int) -> None:
        client = OwnershipGuard(self.uow).require_owned_client(owner_id, client_id)

        if self.uow.clients.has_invoices(client.id):
            raise PreconditionFailedError("cannot delete a client that has invoices")

        self.uow.clients.delete(client.id)
        self.uow.commit()

        logger.info(f"Client {client_id} deleted by owner {owner_id}")
