# Patient history - append-only audit log keyed by patient id
from __future__ import annotations

from collections import defaultdict
from datetime import datetime, timezone
from typing import DefaultDict, List

from models import ACTION_CREATED, ACTION_DELETED, ACTION_UPDATED, HistoryEntry, Patient


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class HistoryLog:
    """
    Per-id sequence of lifecycle snapshots, oldest first.
    Entries are never removed, so a patient's provenance outlives its removal
    from the live collection.
    """

    def __init__(self):
        self._entries: DefaultDict[str, List[HistoryEntry]] = defaultdict(list)
        self._order: List[HistoryEntry] = []

    def _append(self, entry: HistoryEntry) -> HistoryEntry:
        self._entries[entry.patientId].append(entry)
        self._order.append(entry)
        return entry

    def record_created(self, patient: Patient) -> HistoryEntry:
        return self._append(HistoryEntry(
            patient=patient.snapshot(),
            timestamp=_now(),
            action=ACTION_CREATED,
        ))

    def record_updated(self, patient: Patient, previous: Patient, note: str = "") -> HistoryEntry:
        return self._append(HistoryEntry(
            patient=patient.snapshot(),
            timestamp=_now(),
            action=ACTION_UPDATED,
            previousData=previous.snapshot(),
            historyEntry=note,
        ))

    def record_deleted(self, patient: Patient) -> HistoryEntry:
        return self._append(HistoryEntry(
            patient=patient.snapshot(),
            timestamp=_now(),
            action=ACTION_DELETED,
        ))

    def entries_for(self, patient_id: str) -> List[HistoryEntry]:
        """History for an id, or [] if the id was never seen"""
        if patient_id not in self._entries:
            return []
        return list(self._entries[patient_id])

    def recent(self, limit: int = 5) -> List[HistoryEntry]:
        """Last N events across all patients (most recent first)."""
        if limit <= 0:
            return []
        return list(reversed(self._order[-limit:]))

    def __len__(self) -> int:
        return len(self._order)
