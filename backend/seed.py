# Seed data - sample patients loaded into an empty store
import logging

from models import STATUS_APPOINTMENT_SCHEDULED, STATUS_DISCHARGED, STATUS_UNDER_TREATMENT
from store import RecordStore

logger = logging.getLogger(__name__)

SAMPLE_PATIENTS = [
    {
        "name": "John Smith",
        "age": 45,
        "gender": "Male",
        "diagnosis": "Hypertension and diabetes management",
        "date": "2025-07-15",
        "status": STATUS_UNDER_TREATMENT,
    },
    {
        "name": "Sarah Johnson",
        "age": 32,
        "gender": "Female",
        "diagnosis": "Routine checkup and vaccination",
        "date": "2025-06-20",
        "status": STATUS_DISCHARGED,
    },
    {
        "name": "Michael Brown",
        "age": 28,
        "gender": "Male",
        "diagnosis": "Follow-up consultation for knee injury",
        "date": "2024-08-25",
        "status": STATUS_APPOINTMENT_SCHEDULED,
    },
]


def seed_data(store: RecordStore) -> int:
    """Add the sample patients if the store has none. Returns how many were added."""
    if len(store) > 0:
        logger.info("Seed skipped: store already holds %d patients", len(store))
        return 0

    added = [store.add(data) for data in SAMPLE_PATIENTS]

    logger.info("Seed data initialized:")
    for patient in added:
        logger.info("  - %s %s (%s)", patient.id, patient.name, patient.status)
    return len(added)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    seed_data(RecordStore())
