"""
Request-scoped dependencies shared by the routers.
"""

from typing import Annotated
from fastapi import Depends
from sqlalchemy.orm import Session

from crefin.infrastructure.db.database import get_db
from crefin.infrastructure.repositories.unit_of_work import SQLAlchemyUnitOfWork
from crefin.domain.repositories.unit_of_work import UnitOfWork


def get_uow(session: Annotated[Session, Depends(get_db)]) -> UnitOfWork:
    """Dependency to get a unit of work bound to the request's session."""
    return SQLAlchemyUnitOfWork(session)
