"""
Shared pytest fixtures for tracker tests.

Key patterns:

1. Database Isolation: Each test gets a fresh temporary SQLite database
2. Constructor Injection: Store, factory and controller are built from test instances
3. Fixed Clock: Record timestamps come from a controllable clock

Fixture Hierarchy:
    temp_db → record_store → controller
    clock → record_factory → controller
"""
import os
import tempfile
from datetime import datetime, timedelta, timezone

import pytest

from maternal_svc.core import config as config_module
from maternal_svc.core import dependencies as deps
from maternal_svc.repositories import Database, RecordStore
from maternal_svc.schemas.patient import Patient
from maternal_svc.services import DashboardController, RecordFactory, RecordIdGenerator, RecordViewBuilder


class FakeClock:
    """Clock returning a fixed time that tests can move forward."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def temp_db():
    """
    Create a temporary database for testing.

    This fixture creates a fresh SQLite database in a temp file,
    ensuring complete isolation between tests.
    """
    fd, db_path = tempfile.mkstemp(suffix='.db')
    os.close(fd)

    db = Database(db_path=db_path)
    yield db

    # Cleanup, including WAL side files
    for path in (db_path, db_path + "-wal", db_path + "-shm"):
        if os.path.exists(path):
            os.unlink(path)


@pytest.fixture
def record_store(temp_db):
    """Create a RecordStore with the test database."""
    return RecordStore(db=temp_db)


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc))


@pytest.fixture
def record_factory(clock):
    """RecordFactory stamping records from the fake clock."""
    return RecordFactory(id_generator=RecordIdGenerator(), clock=clock)


@pytest.fixture
def patient():
    return Patient(
        id="p-1",
        name="Jane Doe",
        due_date="2024-03-01",
        current_week=20,
        emergency_contacts=[
            {"name": "Dr. Amina Yusuf", "relationship": "Midwife", "phone": "+44 20 7946 0000"},
            {"name": "John Doe", "relationship": "Partner", "phone": "+44 7700 900123"},
        ],
    )


@pytest.fixture
def other_patient():
    return Patient(id="p-2", name="Mary Major")


@pytest.fixture
def patients(patient, other_patient):
    return {patient.id: patient, other_patient.id: other_patient}


@pytest.fixture
def controller(record_store, patients, record_factory):
    """Create a DashboardController with test dependencies."""
    return DashboardController(
        store=record_store,
        patients=patients,
        factory=record_factory,
        views=RecordViewBuilder(strict=True),
    )


@pytest.fixture
def isolated_settings(tmp_path, monkeypatch):
    """
    Point settings at a temp directory and drop cached settings and dependencies.
    """
    monkeypatch.setenv("MATERNAL_SVC_DB_DIR", str(tmp_path / "data"))
    monkeypatch.delenv("MATERNAL_SVC_ENVIRONMENT", raising=False)
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.delenv("LOG_FORMAT", raising=False)
    config_module.reset_settings()
    deps.reset_dependencies()
    yield tmp_path
    config_module.reset_settings()
    deps.reset_dependencies()
