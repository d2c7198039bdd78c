"""
Shared pytest fixtures for the patient record store and its HTTP API.
"""
import pytest
from fastapi.testclient import TestClient

from main import StoreSession, app, get_session
from models import STATUS_APPOINTMENT_SCHEDULED, STATUS_DISCHARGED, STATUS_UNDER_TREATMENT
from seed import seed_data
from store import RecordStore


def make_fields(name, age, status=STATUS_UNDER_TREATMENT, diagnosis="General checkup",
                gender="Female", date="2025-01-01"):
    """Helper: a full set of patient fields (no id)."""
    return {
        "name": name,
        "age": age,
        "gender": gender,
        "diagnosis": diagnosis,
        "date": date,
        "status": status,
    }


@pytest.fixture
def store():
    """Empty store."""
    return RecordStore()


@pytest.fixture
def seeded_store():
    """
    Store with the three sample patients:
    P001 John Smith (45, Under Treatment), P002 Sarah Johnson (32, Discharged),
    P003 Michael Brown (28, Appointment Scheduled).
    """
    store = RecordStore()
    seed_data(store)
    return store


@pytest.fixture
def scenario_store():
    """
    Minimal dataset: A(45), B(32), C(28) added in that order.
    Yields (store, [A, B, C]).
    """
    store = RecordStore()
    a = store.add(make_fields("Alpha Patient", 45, STATUS_UNDER_TREATMENT))
    b = store.add(make_fields("Beta Patient", 32, STATUS_DISCHARGED))
    c = store.add(make_fields("Gamma Patient", 28, STATUS_APPOINTMENT_SCHEDULED))
    return store, [a, b, c]


@pytest.fixture
def client(seeded_store):
    """TestClient bound to a fresh seeded store for each test."""
    session = StoreSession(seeded_store)
    app.dependency_overrides[get_session] = lambda: session
    yield TestClient(app)
    app.dependency_overrides.pop(get_session, None)
