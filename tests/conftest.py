# tests/conftest.py
import pytest

from infra.db.base import Base, create_ledger_engine, create_session_factory
from infra.services import build_service_graph


@pytest.fixture
def session():
    # separate in-memory DB for tests
    engine = create_ledger_engine("sqlite:///:memory:")
    Base.metadata.create_all(bind=engine)
    db = create_session_factory(engine)()
    try:
        yield db
    finally:
        db.close()
        engine.dispose()


@pytest.fixture
def services(session):
    return build_service_graph(session, repair_on_start=False).as_dict()
