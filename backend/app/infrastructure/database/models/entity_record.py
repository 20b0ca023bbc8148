"""SQLAlchemy ORM models for cached entity records — one table per collection."""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Integer, JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from app.domain.entities import Collection
from app.infrastructure.database.base import Base


class EntityRecordColumns:
    """Columns shared by every entity table.

    ``seq`` preserves insertion order; ``id`` is the record key and is
    unique. The full record (including ``id``) lives in ``data``.
    """

    seq: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    data: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<{type(self).__name__}(id={self.id})>"


class PatientModel(EntityRecordColumns, Base):
    """ORM model — maps to the 'patients' table."""

    __tablename__ = "patients"


class MedicalRecordModel(EntityRecordColumns, Base):
    """ORM model — maps to the 'medical_records' table."""

    __tablename__ = "medical_records"


class PrescriptionModel(EntityRecordColumns, Base):
    """ORM model — maps to the 'prescriptions' table."""

    __tablename__ = "prescriptions"


COLLECTION_MODELS: dict[Collection, type[EntityRecordColumns]] = {
    Collection.PATIENTS: PatientModel,
    Collection.MEDICAL_RECORDS: MedicalRecordModel,
    Collection.PRESCRIPTIONS: PrescriptionModel,
}
