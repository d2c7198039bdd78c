# In-memory data models - patient records and their audit history
from typing import Any, Dict, Mapping, Optional
from dataclasses import dataclass, asdict, replace

# Informal status enumeration used by statistics and filters
STATUS_UNDER_TREATMENT = "Under Treatment"
STATUS_APPOINTMENT_SCHEDULED = "Appointment Scheduled"
STATUS_DISCHARGED = "Discharged"

ACTION_CREATED = "Created"
ACTION_UPDATED = "Updated"
ACTION_DELETED = "Deleted"

PATIENT_FIELDS = ("name", "age", "gender", "diagnosis", "date", "status")


@dataclass
class Patient:
    """One patient record in the live collection"""
    id: str
    name: str = ""
    age: int = 0
    gender: str = ""
    diagnosis: str = ""
    date: str = ""  # YYYY-MM-DD
    status: str = ""

    @classmethod
    def from_fields(cls, patient_id: str, data: Mapping[str, Any]) -> "Patient":
        """Build a patient from a field mapping. Missing fields get explicit defaults, unknown keys are dropped."""
        values = {name: data[name] for name in PATIENT_FIELDS if data.get(name) is not None}
        if "age" in values:
            values["age"] = int(values["age"])  # ValueError on non-numeric input
        return cls(id=patient_id, **values)

    def snapshot(self) -> "Patient":
        """Detached copy, so later edits to the live record don't leak into history"""
        return replace(self)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class HistoryEntry:
    """One lifecycle event for a patient id"""
    patient: Patient
    timestamp: str  # ISO 8601, UTC
    action: str  # "Created" | "Updated" | "Deleted"
    previousData: Optional[Patient] = None
    historyEntry: Optional[str] = None

    @property
    def patientId(self) -> str:
        return self.patient.id

    def to_dict(self) -> Dict[str, Any]:
        """Flat form: patient fields plus event metadata"""
        data = self.patient.to_dict()
        data["timestamp"] = self.timestamp
        data["action"] = self.action
        if self.action == ACTION_UPDATED:
            data["previousData"] = self.previousData.to_dict() if self.previousData else None
            data["historyEntry"] = self.historyEntry or ""
        return data

