"""
Income ledger use cases.
"""

from crefin.application.use_cases.base_use_case import ListUseCase
from crefin.application.dto.income_dto import IncomeRecordResponseDTO, IncomeListResponseDTO


class ListIncomeUseCase(ListUseCase[None, IncomeListResponseDTO]):
    """Use case returning the owner's income ledger, newest first."""

    async def _execute_business_logic(self, owner_id: str, request: None) -> IncomeListResponseDTO:
        records = self.uow.income.list_by_owner(owner_id)
        return IncomeListResponseDTO(
            income=[IncomeRecordResponseDTO.from_domain(record) for record in records],
            total=len(records),
            total_amount=round(sum(record.amount for record in records), 2)
        )
