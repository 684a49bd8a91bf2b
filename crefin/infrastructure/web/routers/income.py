"""
Income ledger router.
"""

from typing import Annotated
from fastapi import APIRouter, Depends

from crefin.infrastructure.auth import get_current_user_id
from crefin.infrastructure.web.dependencies import get_uow
from crefin.application.use_cases.income_use_cases import ListIncomeUseCase
from crefin.application.dto.income_dto import IncomeListResponseDTO
from crefin.domain.repositories.unit_of_work import UnitOfWork


router = APIRouter()


@router.get("", response_model=IncomeListResponseDTO)
async def list_income(
    user_id: Annotated[str, Depends(get_current_user_id)],
    uow: Annotated[UnitOfWork, Depends(get_uow)]
):
    """List the caller's income records, including those produced by paid invoices."""
    return await ListIncomeUseCase(uow).execute(user_id, None)
