"""
Income record mapper for converting between domain entities and database models.
"""

from decimal import Decimal

from crefin.domain.models.income import IncomeRecord, IncomeSource
from crefin.infrastructure.db.models import IncomeRecordModel


class IncomeRecordMapper:
    """Maps between IncomeRecord domain entity and IncomeRecordModel."""

    def domain_to_model(self, record: IncomeRecord) -> IncomeRecordModel:
        return IncomeRecordModel(
            id=record.id,
            owner_id=record.owner_id,
            amount=Decimal(str(record.amount)).quantize(Decimal("0.01")),
            client_id=record.client_id,
            client_name=record.client_name,
            project_name=record.project_name,
            source=record.source,
            notes=record.notes,
            logged_at=record.logged_at,
            version=record.version
        )

    def model_to_domain(self, model: IncomeRecordModel) -> IncomeRecord:
        return IncomeRecord(
            id=model.id,
            owner_id=model.owner_id,
            amount=float(model.amount),
            logged_at=model.logged_at,
            client_id=model.client_id,
            client_name=model.client_name,
            project_name=model.project_name,
            source=IncomeSource(model.source) if model.source else IncomeSource.MANUAL,
            notes=model.notes,
            version=model.version or 1,
            created_at=model.created_at,
            updated_at=model.updated_at
        )
