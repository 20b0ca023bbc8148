"""Entity collections mirrored between the remote API and the local store."""

from enum import Enum


class Collection(str, Enum):
    """Closed set of entity kinds held in the local store.

    Each member maps to one local table and one REST resource.
    """

    PATIENTS = "patients"
    MEDICAL_RECORDS = "medicalRecords"
    PRESCRIPTIONS = "prescriptions"

    @property
    def resource_path(self) -> str:
        """REST collection path, e.g. ``/medical-records``."""
        return _RESOURCE_PATHS[self]

    def item_path(self, record_id: str) -> str:
        """REST item path, e.g. ``/patients/abc123``."""
        return f"{self.resource_path}/{record_id}"


_RESOURCE_PATHS = {
    Collection.PATIENTS: "/patients",
    Collection.MEDICAL_RECORDS: "/medical-records",
    Collection.PRESCRIPTIONS: "/prescriptions",
}

# Name of the queue table; not an entity collection.
PENDING_SYNC = "pendingSync"
