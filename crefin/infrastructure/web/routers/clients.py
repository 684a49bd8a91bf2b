"""
Client management router.
Handles CRUD operations for client resources.
"""

from typing import Annotated, Optional
from fastapi import APIRouter, Depends, status, Query, Response

from crefin.config import settings
from crefin.infrastructure.auth import get_current_user_id
from crefin.infrastructure.web.dependencies import get_uow
from crefin.application.use_cases.client_use_cases import (
    CreateClientUseCase,
    UpdateClientUseCase,
    UpdateClientCommand,
    GetClientByIdUseCase,
    ListClientsUseCase,
    DeleteClientUseCase
)
from crefin.application.dto.client_dto import (
    CreateClientRequestDTO,
    UpdateClientRequestDTO,
    ListClientsRequestDTO,
    ClientResponseDTO,
    ClientListResponseDTO
)
from crefin.domain.repositories.unit_of_work import UnitOfWork


router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED, response_model=ClientResponseDTO)
async def create_client(
    request: CreateClientRequestDTO,
    user_id: Annotated[str, Depends(get_current_user_id)],
    uow: Annotated[UnitOfWork, Depends(get_uow)]
):
    """
    Create a new client.

    - **name**: Client name (required)
    - **email**, **phone**, **company**, **address**: Contact information
    - **notes**: Additional notes
    """
    return await CreateClientUseCase(uow).execute(user_id, request)


@router.get("", response_model=ClientListResponseDTO)
async def list_clients(
    user_id: Annotated[str, Depends(get_current_user_id)],
    uow: Annotated[UnitOfWork, Depends(get_uow)],
    search: Optional[str] = Query(None, description="Search by name, email or company"),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    offset: int = Query(0, ge=0)
):
    """List the caller's clients, newest first."""
    request = ListClientsRequestDTO(search=search, limit=limit, offset=offset)
    return await ListClientsUseCase(uow).execute(user_id, request)


@router.get("/{client_id}", response_model=ClientResponseDTO)
async def get_client(
    client_id: int,
    user_id: Annotated[str, Depends(get_current_user_id)],
    uow: Annotated[UnitOfWork, Depends(get_uow)]
):
    return await GetClientByIdUseCase(uow).execute(user_id, client_id)


@router.put("/{client_id}", response_model=ClientResponseDTO)
async def update_client(
    client_id: int,
    request: UpdateClientRequestDTO,
    user_id: Annotated[str, Depends(get_current_user_id)],
    uow: Annotated[UnitOfWork, Depends(get_uow)]
):
    """Update client information. Omitted fields are left unchanged."""
    command = UpdateClientCommand(client_id=client_id, changes=request)
    return await UpdateClientUseCase(uow).execute(user_id, command)


@router.delete("/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_client(
    client_id: int,
    user_id: Annotated[str, Depends(get_current_user_id)],
    uow: Annotated[UnitOfWork, Depends(get_uow)]
):
    """
    Delete a client.

    Clients that still have invoices cannot be deleted (412).
    """
    await DeleteClientUseCase(uow).execute(user_id, client_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
