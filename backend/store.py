# Record store - live patient collection, id allocation, history and query views
from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from history import HistoryLog
from models import (
    HistoryEntry,
    Patient,
    STATUS_APPOINTMENT_SCHEDULED,
    STATUS_DISCHARGED,
    STATUS_UNDER_TREATMENT,
)
from sorting import binary_search, locale_key, quick_sort

logger = logging.getLogger(__name__)

NOT_FOUND = -1


class RecordStore:
    """
    Owns the live patient collection and its history log.

    Update and remove address records by positional index. An index taken from
    search() or lookup() is only valid until the next remove, so callers must
    not let another mutation slip in between obtaining an index and using it.
    """

    def __init__(self):
        self._patients: List[Patient] = []
        self._history = HistoryLog()
        self._next_id = 1

    # --- identifier / history bookkeeping ---

    def allocate_id(self) -> str:
        """Next id in the P### sequence. Ids are never handed out twice."""
        patient_id = f"P{self._next_id:03d}"
        self._next_id += 1
        return patient_id

    def add(self, data: Mapping[str, Any]) -> Patient:
        """Create a patient from the given fields (any id in data is ignored)"""
        patient = Patient.from_fields(self.allocate_id(), data)
        self._patients.append(patient)
        self._history.record_created(patient)
        logger.info("Patient %s created", patient.id)
        return patient.snapshot()

    def update(self, index: int, new_patient: Patient, note: str = "") -> bool:
        """Replace the record at index. False (and no change) for a bad index or a different id."""
        if not self._in_range(index):
            logger.warning("Update rejected: index %s out of range", index)
            return False

        old_patient = self._patients[index].snapshot()
        if new_patient.id != old_patient.id:
            logger.warning(
                "Update rejected: index %s holds %s, replacement carries %s",
                index, old_patient.id, new_patient.id,
            )
            return False

        self._patients[index] = new_patient.snapshot()
        self._history.record_updated(new_patient, old_patient, note)
        logger.info("Patient %s updated", new_patient.id)
        return True

    def remove(self, index: int) -> bool:
        """Remove the record at index; later records shift down by one."""
        if not self._in_range(index):
            logger.warning("Delete rejected: index %s out of range", index)
            return False

        deleted = self._patients.pop(index)
        self._history.record_deleted(deleted)
        logger.info("Patient %s deleted", deleted.id)
        return True

    def history(self, patient_id: str) -> List[HistoryEntry]:
        return self._history.entries_for(patient_id)

    def recent_history(self, limit: int = 5) -> List[HistoryEntry]:
        return self._history.recent(limit)

    # --- query / sort views ---

    @property
    def patients(self) -> Tuple[Patient, ...]:
        return tuple(p.snapshot() for p in self._patients)

    def get(self, index: int) -> Optional[Patient]:
        if not self._in_range(index):
            return None
        return self._patients[index].snapshot()

    def _build_search_index(self) -> Dict[str, List[int]]:
        """Lowercased name and raw id -> positions sharing that key"""
        index: Dict[str, List[int]] = {}
        for position, patient in enumerate(self._patients):
            index.setdefault(patient.name.lower(), []).append(position)
            index.setdefault(patient.id, []).append(position)
        return index

    def search(self, query: str = "", status_filter: str = "") -> List[Dict[str, Any]]:
        """
        Case-insensitive substring search over name, id and diagnosis, with an
        optional exact status filter.

        Name/id hits come first, grouped by matching key in index order, then
        diagnosis-only hits in collection order. Each result carries "index",
        its position in the live collection at the time of the search.
        """
        if query:
            query_lower = query.lower()
            positions: List[int] = []
            seen = set()
            for key, key_positions in self._build_search_index().items():
                if query_lower in key:
                    for position in key_positions:
                        if position not in seen:
                            seen.add(position)
                            positions.append(position)
            for position, patient in enumerate(self._patients):
                if position not in seen and query_lower in patient.diagnosis.lower():
                    seen.add(position)
                    positions.append(position)
        else:
            positions = list(range(len(self._patients)))

        if status_filter:
            positions = [p for p in positions if self._patients[p].status == status_filter]

        results = []
        for position in positions:
            hit = self._patients[position].to_dict()
            hit["index"] = position
            results.append(hit)
        return results

    def sort_by(self, items: Sequence[Any], key: str, ascending: bool = True) -> List[Any]:
        return quick_sort(items, key, ascending)

    def lookup(self, patient_id: str) -> int:
        """Index of the patient with this id in the live collection, or NOT_FOUND"""
        by_id = sorted(self._patients, key=lambda p: locale_key(p.id))
        if binary_search(by_id, patient_id, "id") == NOT_FOUND:
            return NOT_FOUND
        for position, patient in enumerate(self._patients):
            if patient.id == patient_id:
                return position
        return NOT_FOUND

    def statistics(self) -> Dict[str, int]:
        """Dashboard counts, recomputed on every call"""
        statuses = [p.status for p in self._patients]
        return {
            "total": len(statuses),
            "active": statuses.count(STATUS_UNDER_TREATMENT),
            "appointments": statuses.count(STATUS_APPOINTMENT_SCHEDULED),
            "discharged": statuses.count(STATUS_DISCHARGED),
        }

    def _in_range(self, index: int) -> bool:
        return 0 <= index < len(self._patients)

    def __len__(self) -> int:
        return len(self._patients)
