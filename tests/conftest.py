"""
Test configuration and fixtures
"""
import os
from datetime import date, datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

# Set testing environment before the app reads its settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only"
os.environ["ALGORITHM"] = "HS256"

from main import app
from app.database import Base, get_db
from app.models import KnowledgeEntry, Task, User
from app.routers.reminders import get_reminder_scheduler
from app.services.scheduler import ReminderScheduler
from app.utils.auth import create_access_token
from app.utils.errors import TransportFailure

_ASSIGNEE = object()

TODAY = date(2026, 10, 19)
NOW = datetime(2026, 10, 19, 9, 0)


class Clock:
    """Settable stand-in for datetime.now"""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


class FakeTransport:
    """Records every send; addresses in `failing` raise TransportFailure"""

    def __init__(self, failing=(), is_configured=True):
        self.failing = set(failing)
        self.is_configured = is_configured
        self.sent = []
        self.attempts = []

    async def send(self, to, subject, html_body):
        self.attempts.append(to)
        if to in self.failing:
            raise TransportFailure(f"mailbox unavailable: {to}")
        self.sent.append({"to": to, "subject": subject, "html": html_body})
        return f"<msg-{len(self.sent)}@test>"


@pytest.fixture
def session_factory(tmp_path):
    """Fresh SQLite file per test so separate sessions see each other's commits"""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'test.db'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    yield factory
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def clock():
    return Clock(NOW)


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def scheduler(transport, session_factory, clock):
    return ReminderScheduler(
        transport,
        session_factory=session_factory,
        clock=clock,
        send_delay=0,
        production=True,
    )


@pytest.fixture
def client(session_factory, scheduler):
    """Test client with database and scheduler overrides"""
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_reminder_scheduler] = lambda: scheduler
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def test_user(db_session) -> User:
    user = User(email="tech@facilities-service.com", name="Field Technician", department="Service")
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def auth_headers(test_user) -> dict:
    token = create_access_token({"sub": test_user.email})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_task(db_session, test_user):
    def _make(due_date, status="pending", assigned_to=_ASSIGNEE, title="Monthly Generator Inspection", **fields):
        task = Task(
            title=title,
            due_date=due_date,
            status=status,
            priority=fields.pop("priority", "high"),
            assigned_to=test_user.id if assigned_to is _ASSIGNEE else assigned_to,
            created_by=test_user.id,
            completed_at=NOW if status == "completed" else None,
            **fields,
        )
        db_session.add(task)
        db_session.commit()
        db_session.refresh(task)
        return task
    return _make


@pytest.fixture
def make_entry(db_session):
    def _make(title, content, tags=None, category="General", equipment_type=None, difficulty_level="medium"):
        entry = KnowledgeEntry(
            category=category,
            title=title,
            content=content,
            tags=tags,
            equipment_type=equipment_type,
            difficulty_level=difficulty_level,
        )
        db_session.add(entry)
        db_session.commit()
        db_session.refresh(entry)
        return entry
    return _make


@pytest.fixture
def sample_knowledge(make_entry):
    """Knowledge base shipped with the demo seed"""
    return [
        make_entry(
            "Generator Oil Change Procedure",
            "Step-by-step procedure for changing generator oil: 1. Turn off generator and wait for cool down. "
            "2. Drain old oil completely. 3. Replace oil filter. 4. Add new oil as per manufacturer specifications. "
            "5. Check oil level and run test cycle.",
            tags="generator,oil,maintenance,safety",
            category="Generator Maintenance",
            equipment_type="Generator",
        ),
        make_entry(
            "Air Filter Selection Guide",
            "Proper air filter selection is crucial for HVAC efficiency. MERV ratings: 6-8 for residential, "
            "9-12 for commercial, 13-16 for hospitals. Replace every 1-3 months depending on usage and environment.",
            tags="hvac,filters,merv,airflow",
            category="HVAC Maintenance",
            equipment_type="HVAC",
            difficulty_level="easy",
        ),
        make_entry(
            "UPS Battery Maintenance",
            "Battery maintenance schedule: Monthly - voltage checks and visual inspection. Quarterly - load testing "
            "and temperature monitoring. Annually - full capacity test and replacement planning.",
            tags="ups,battery,electrical,power",
            category="Electrical Systems",
            equipment_type="UPS",
        ),
    ]

