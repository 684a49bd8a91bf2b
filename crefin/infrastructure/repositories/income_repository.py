"""
Income ledger repository implementation using SQLAlchemy.
"""

from typing import List, Optional
from sqlalchemy.orm import Session

from crefin.domain.models.income import IncomeRecord
from crefin.domain.repositories.income_repository import IncomeRepository
from crefin.infrastructure.db.models import IncomeRecordModel
from crefin.infrastructure.mappers.income_mapper import IncomeRecordMapper


class SQLAlchemyIncomeRepository(IncomeRepository):
    """SQLAlchemy implementation of the income ledger."""

    def __init__(self, session: Session):
        self.session = session
        self.mapper = IncomeRecordMapper()

    def add(self, record: IncomeRecord) -> IncomeRecord:
        model = self.mapper.domain_to_model(record)
        self.session.add(model)
        self.session.flush()
        record.id = model.id
        return record

    def get_by_id(self, record_id: int) -> Optional[IncomeRecord]:
        model = self.session.get(IncomeRecordModel, record_id)
        return self.mapper.model_to_domain(model) if model else None

    def list_by_owner(self, owner_id: str) -> List[IncomeRecord]:
        models = (
            self.session.query(IncomeRecordModel)
            .filter_by(owner_id=owner_id)
            .order_by(IncomeRecordModel.logged_at.desc(), IncomeRecordModel.id.desc())
            .all()
        )
        return [self.mapper.model_to_domain(model) for model in models]
