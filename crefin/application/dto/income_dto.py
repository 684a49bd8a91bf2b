"""
Income ledger DTOs.
"""

from typing import Optional, List
from datetime import date

from .base_dto import BaseDTO, ResponseDTO
from crefin.domain.models.income import IncomeRecord, IncomeSource


class IncomeRecordResponseDTO(ResponseDTO):
    """DTO for income ledger entries."""

    owner_id: str
    amount: float
    logged_at: date
    client_id: Optional[int] = None
    client_name: Optional[str] = None
    project_name: Optional[str] = None
    source: IncomeSource
    notes: Optional[str] = None

    @classmethod
    def from_domain(cls, record: IncomeRecord) -> "IncomeRecordResponseDTO":
        return cls(
            id=record.id,
            owner_id=record.owner_id,
            amount=record.amount,
            logged_at=record.logged_at,
            client_id=record.client_id,
            client_name=record.client_name,
            project_name=record.project_name,
            source=record.source,
            notes=record.notes,
            created_at=record.created_at,
            updated_at=record.updated_at
        )


class IncomeListResponseDTO(BaseDTO):
    income: List[IncomeRecordResponseDTO]
    total: int
    total_amount: float
