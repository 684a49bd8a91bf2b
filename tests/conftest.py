"""
Shared fixtures: an in-memory SQLite database with two provisioned owners.
"""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from crefin.infrastructure.db.database import Base
from crefin.infrastructure.db.models import UserProfileModel
from crefin.infrastructure.repositories.unit_of_work import SQLAlchemyUnitOfWork

OWNER_ID = "11111111-1111-1111-1111-111111111111"
OTHER_OWNER_ID = "22222222-2222-2222-2222-222222222222"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    with factory() as session:
        session.add_all([
            UserProfileModel(id=OWNER_ID, email="olivia@example.com", full_name="Olivia Owner", phone="555-0100"),
            UserProfileModel(id=OTHER_OWNER_ID, email="oscar@example.com", full_name="Oscar Other"),
        ])
        session.commit()

    return factory


@pytest.fixture
def session(session_factory):
    with session_factory() as session:
        yield session


@pytest.fixture
def uow(session):
    return SQLAlchemyUnitOfWork(session)


@pytest.fixture
def owner_id():
    return OWNER_ID


@pytest.fixture
def other_owner_id():
    return OTHER_OWNER_ID
