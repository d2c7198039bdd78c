# Patient reports and dashboard - plain data for the reporting views
# Formatting, labels and status colours belong to the UI, never here
from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict

from store import NOT_FOUND, RecordStore


def build_patient_report(store: RecordStore, patient_id: str) -> Dict:
    """
    Report for one live patient: current record plus its full history.
    Returns found=false with a reason when the id is blank or not in the
    live collection (deleted patients have history but no report).
    """
    patient_id = (patient_id or "").strip()
    if not patient_id:
        return {"found": False, "reason": "missing_id", "patientId": patient_id}

    index = store.lookup(patient_id)
    if index == NOT_FOUND:
        return {"found": False, "reason": "not_found", "patientId": patient_id}

    patient = store.get(index)
    return {
        "found": True,
        "reason": None,
        "patientId": patient_id,
        "index": index,
        "patient": patient.to_dict(),
        "history": [entry.to_dict() for entry in store.history(patient_id)],
        "generatedAt": datetime.now(timezone.utc).isoformat(),
    }


def build_dashboard(store: RecordStore, limit: int = 5) -> Dict:
    """Statistics plus the most recent lifecycle events (most recent first)."""
    return {
        "statistics": store.statistics(),
        "recentEvents": [entry.to_dict() for entry in store.recent_history(limit)],
    }
