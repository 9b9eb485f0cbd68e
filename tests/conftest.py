from __future__ import annotations

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from charterdesk.database.db import init_db
from charterdesk.database.deal_store import InMemoryDealRepository, SqlDealRepository
from charterdesk.services.negotiation_desk import NegotiationDesk


@pytest.fixture
def repository():
    return InMemoryDealRepository()


@pytest.fixture
def desk(repository):
    return NegotiationDesk(repository)


@pytest.fixture
def sql_repository():
    engine = create_engine("sqlite:///:memory:")
    init_db(engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    with SqlDealRepository(db=TestingSessionLocal()) as repo:
        yield repo
