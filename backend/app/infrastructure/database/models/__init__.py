from .entity_record import (
    COLLECTION_MODELS,
    EntityRecordColumns,
    MedicalRecordModel,
    PatientModel,
    PrescriptionModel,
)
from .pending_operation import PendingOperationModel

__all__ = [
    "COLLECTION_MODELS",
    "EntityRecordColumns",
    "MedicalRecordModel",
    "PatientModel",
    "PrescriptionModel",
    "PendingOperationModel",
]
