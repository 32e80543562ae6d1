"""
Shared fixtures
===============

- An in-memory SQLite database (one shared connection via ``StaticPool``)
  with all tables created.
- A request repository and orchestrator on top of it; the notifier is a
  ``MagicMock`` so no mail endpoint is contacted.
- A valid draft keyed by python field names.
"""

# =========================
# Imports
# =========================
import os
import tempfile
from unittest.mock import MagicMock
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# keep config from creating db/, backups/ and uploads/ inside the checkout
_SCRATCH = tempfile.mkdtemp(prefix="trm-tests-")
for _name, _sub in (("TRM_DB_PATH", "db/tire_requests.db"),
                    ("TRM_BACKUP_DIR", "backups"), ("TRM_UPLOAD_DIR", "uploads")):
    os.environ.setdefault(_name, os.path.join(_SCRATCH, _sub))

from trm.models import Base
from trm.orchestrator import ActorContext, RequestOrchestrator
from trm.repository import RequestRepository
from trm.uploads import PhotoStore
from trm.validation import DatePolicy


# -------------------------
# Fixtures: Database
# -------------------------
@pytest.fixture
def engine():
    eng = create_engine("sqlite://", poolclass=StaticPool,
                        connect_args={"check_same_thread": False})
    Base.metadata.create_all(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def repo(session_factory):
    return RequestRepository(session_factory)


# -------------------------
# Fixtures: Orchestrator
# -------------------------
@pytest.fixture
def notifier():
    return MagicMock()


@pytest.fixture
def orchestrator(repo, notifier):
    return RequestOrchestrator(repo, notifier, date_policy=DatePolicy.ANY)


@pytest.fixture
def photo_store(tmp_path):
    return PhotoStore(upload_dir=str(tmp_path / "uploads"))


@pytest.fixture
def user():
    return ActorContext(role="user", user_id="u-1", email="driver@example.com")


@pytest.fixture
def actors():
    return {role: ActorContext(role=role)
            for role in ("manager", "tto", "engineer", "seller", "admin")}


# -------------------------
# Fixtures: Drafts
# -------------------------
@pytest.fixture
def valid_form():
    """A draft that passes validation (raw form strings)."""
    return {
        "vehicle_no": "AB-1234",
        "vehicle_type": "Truck",
        "vehicle_brand": "Volvo",
        "vehicle_model": "FH16",
        "user_section": "Transport",
        "replacement_date": "2026-10-01",
        "existing_make": "Michelin",
        "tire_size": "315/80R22.5",
        "no_of_tires": "4",
        "no_of_tubes": "0",
        "cost_center": "123456",
        "present_km": "45000",
        "previous_km": "40000",
        "wear_indicator": "Yes",
        "wear_pattern": "Center",
        "officer_service_no": "SN-778",
        "comments": "Front axle worn",
        "email": "driver@example.com",
    }


@pytest.fixture
def make_request(orchestrator, user, valid_form):
    """Create a stored request; keyword arguments override draft fields."""
    def _make(photo_refs=(), **overrides):
        form = {**valid_form, **overrides}
        return orchestrator.submit(user, form, list(photo_refs))
    return _make
