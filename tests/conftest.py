"""Shared fixtures: in-memory database, API client and record factories."""

from datetime import datetime
from unittest.mock import Mock
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from governance_api.events import EventProducer
from governance_api.main import create_app
from governance_api.models import (
    Base,
    AISystem,
    BiasTest,
    RemediationAction,
    get_db_engine,
    get_session_maker,
)


@pytest.fixture
def session_maker():
    """Create an in-memory SQLite database and return its session maker."""
    engine = get_db_engine(database_url="sqlite:///:memory:")
    Base.metadata.create_all(engine)
    yield get_session_maker(engine=engine)
    Base.metadata.drop_all(engine)


@pytest.fixture
def db_session(session_maker):
    """Create a database session for testing."""
    session = session_maker()
    yield session
    session.close()


@pytest.fixture
def event_producer():
    """Mock event producer recording emit() calls."""
    producer = Mock(spec=EventProducer)
    producer.emit.return_value = True
    return producer


@pytest.fixture
def client(session_maker, event_producer):
    """API client bound to the test database and mock event producer."""
    app = create_app(session_maker=session_maker, event_producer=event_producer)
    return TestClient(app)


@pytest.fixture
def make_system(db_session):
    """Factory creating an AI system and returning its id."""

    def _make(system_name=None, **fields):
        system = AISystem(
            system_id=uuid4(),
            system_name=system_name or f"System {uuid4().hex[:8]}",
            business_owner=fields.pop("business_owner", "Retail Lending"),
            technical_owner=fields.pop("technical_owner", "ML Platform Team"),
            **fields,
        )
        db_session.add(system)
        db_session.commit()
        return system.system_id

    return _make


@pytest.fixture
def make_bias_test(db_session, make_system):
    """Factory creating a bias test with one remediation action per given status.

    Returns:
        (test_id, [action_id, ...]) in the order of action_statuses
    """

    def _make(action_statuses=(), status="REMEDIATION_NEEDED", system_id=None):
        test = BiasTest(
            test_id=uuid4(),
            system_id=system_id or make_system(),
            test_name="Gender parity in approvals",
            status=status,
            test_date=datetime(2025, 1, 15),
        )
        actions = [
            RemediationAction(
                action_id=uuid4(),
                issue_description=f"Finding {i + 1}",
                priority="HIGH",
                status=action_status,
            )
            for i, action_status in enumerate(action_statuses)
        ]
        test.remediation_actions.extend(actions)
        db_session.add(test)
        db_session.commit()
        return test.test_id, [action.action_id for action in actions]

    return _make
