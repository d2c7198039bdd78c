# Backend main entry point - HTTP layer over the patient record store
import logging
import os
import threading
from contextlib import contextmanager
from dotenv import load_dotenv
load_dotenv()  # Load .env so DEMO_MODE / LOG_LEVEL work for local runs
from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
from typing import Dict, Iterator, List, Optional
from models import PATIENT_FIELDS, Patient
from reports import build_dashboard, build_patient_report
from seed import seed_data
from store import NOT_FOUND, RecordStore

logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO").upper())
logger = logging.getLogger(__name__)

SORTABLE_FIELDS = ("id",) + PATIENT_FIELDS


def _is_demo_mode() -> bool:
    """True only when DEMO_MODE env var is explicitly 'true' (case-insensitive)."""
    return os.environ.get("DEMO_MODE", "").lower() == "true"


def _should_seed() -> bool:
    return os.environ.get("SEED_SAMPLE_PATIENTS", "true").lower() != "false"


def new_session_store() -> RecordStore:
    """One store per application session, seeded with sample patients unless disabled"""
    store = RecordStore()
    if _should_seed():
        seed_data(store)
    return store


class StoreSession:
    """
    The current session store behind one lock. Handlers fetch the store only
    while holding the lock, so a reset can never hand a request a store that
    has already been replaced, and index capture and use inside a request
    never interleave with another request's mutation.
    """

    def __init__(self, store: RecordStore):
        self._store = store
        self._lock = threading.Lock()

    @contextmanager
    def acquire(self) -> Iterator[RecordStore]:
        with self._lock:
            yield self._store

    def replace(self, store: RecordStore) -> None:
        with self._lock:
            self._store = store


app = FastAPI(title="Patient Record Manager API")
app.state.session = StoreSession(new_session_store())

# Configure CORS - allow local dev and a deployed frontend
_allowed_origins = [
    "http://localhost:5173",
    "http://localhost:5174",
]
_frontend_url = os.environ.get("FRONTEND_URL", "")
if _frontend_url:
    _allowed_origins.append(_frontend_url)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_session(request: Request) -> StoreSession:
    return request.app.state.session


# Request/Response models
class PatientFields(BaseModel):
    name: str
    age: int
    gender: str
    diagnosis: str
    date: str  # YYYY-MM-DD
    status: str

class PatientUpdate(PatientFields):
    id: Optional[str] = None  # defaults to the id of the record at the index
    historyEntry: str = ""

class PatientResponse(PatientFields):
    id: str

class LookupResponse(BaseModel):
    patientId: str
    index: int

class StatisticsResponse(BaseModel):
    total: int
    active: int
    appointments: int
    discharged: int


@app.get("/")
def read_root():
    return {"message": "Patient Record Manager API"}

@app.get("/health")
def health_check():
    return {"status": "healthy"}


@app.get("/patients")
def list_patients(
    q: str = "",
    status: str = "",
    sortBy: Optional[str] = None,
    ascending: bool = True,
    session: StoreSession = Depends(get_session),
) -> List[Dict]:
    """
    Search patients by name/id/diagnosis with an optional status filter, then
    optionally sort. Each item carries "index" for follow-up edit/delete calls.
    """
    if sortBy is not None and sortBy not in SORTABLE_FIELDS:
        raise HTTPException(status_code=400, detail=f"sortBy must be one of {', '.join(SORTABLE_FIELDS)}")
    with session.acquire() as store:
        results = store.search(q, status)
        if sortBy:
            results = store.sort_by(results, sortBy, ascending)
    return results


@app.post("/patients", response_model=PatientResponse, status_code=201)
def create_patient(
    fields: PatientFields,
    session: StoreSession = Depends(get_session),
):
    """Add a patient; the store assigns the id"""
    with session.acquire() as store:
        patient = store.add(fields.model_dump())
    return PatientResponse(**patient.to_dict())


@app.put("/patients/{index}", response_model=PatientResponse)
def update_patient_endpoint(
    index: int,
    update: PatientUpdate,
    session: StoreSession = Depends(get_session),
):
    """Replace the patient at a positional index, recording an optional history note"""
    with session.acquire() as store:
        current = store.get(index)
        if current is None:
            raise HTTPException(status_code=404, detail="Patient not found")
        patient_id = update.id or current.id
        if patient_id != current.id:
            raise HTTPException(
                status_code=409,
                detail=f"Index {index} holds patient {current.id}, not {patient_id}",
            )
        replacement = Patient.from_fields(patient_id, update.model_dump())
        if not store.update(index, replacement, update.historyEntry):
            raise HTTPException(status_code=404, detail="Failed to update patient")
    return PatientResponse(**replacement.to_dict())


@app.delete("/patients/{index}")
def delete_patient_endpoint(
    index: int,
    session: StoreSession = Depends(get_session),
):
    """Delete the patient at a positional index. History is kept."""
    with session.acquire() as store:
        patient = store.get(index)
        if patient is None or not store.remove(index):
            raise HTTPException(status_code=404, detail="Patient not found")
    return {"status": "deleted", "patientId": patient.id}


@app.get("/patients/lookup/{patient_id}", response_model=LookupResponse)
def lookup_patient(
    patient_id: str,
    session: StoreSession = Depends(get_session),
):
    with session.acquire() as store:
        index = store.lookup(patient_id)
    if index == NOT_FOUND:
        raise HTTPException(status_code=404, detail="Patient not found")
    return LookupResponse(patientId=patient_id, index=index)


@app.get("/patients/{patient_id}/history")
def get_patient_history(
    patient_id: str,
    session: StoreSession = Depends(get_session),
) -> List[Dict]:
    """Full history for an id, deleted patients included. Unknown ids give []."""
    with session.acquire() as store:
        entries = store.history(patient_id)
    return [entry.to_dict() for entry in entries]


@app.get("/statistics", response_model=StatisticsResponse)
def get_statistics(
    session: StoreSession = Depends(get_session),
):
    with session.acquire() as store:
        return StatisticsResponse(**store.statistics())


@app.get("/dashboard")
def get_dashboard(
    limit: int = 5,
    session: StoreSession = Depends(get_session),
):
    """Dashboard: statistics and the last N lifecycle events."""
    with session.acquire() as store:
        return build_dashboard(store, limit)


@app.get("/reports/{patient_id}")
def get_patient_report(
    patient_id: str,
    session: StoreSession = Depends(get_session),
):
    """Patient report: current record plus full history"""
    with session.acquire() as store:
        report = build_patient_report(store, patient_id)
    if not report["found"]:
        raise HTTPException(status_code=404, detail="Patient not found")
    return report


@app.get("/demo/status")
def demo_status():
    """Returns whether demo mode is enabled. Only for frontend visibility gate."""
    return {"demoMode": _is_demo_mode()}


@app.post("/demo/reset")
def demo_reset(session: StoreSession = Depends(get_session)):
    """
    Reset to a fresh session store with the sample patients.
    Only available when DEMO_MODE=true. Ids restart at P001.
    """
    if not _is_demo_mode():
        raise HTTPException(status_code=404, detail="Demo reset not available")
    store = RecordStore()
    seed_data(store)
    session.replace(store)
    logger.info("Demo reset: store reseeded with %d patients", len(store))
    return {"status": "ok", "patients": len(store)}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
