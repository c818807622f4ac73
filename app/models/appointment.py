from datetime import UTC, datetime
from enum import Enum

from sqlmodel import Field, SQLModel


class AppointmentStatus(str, Enum):
    pending = "pending"
    confirmed = "confirmed"
    cancelled = "cancelled"
    completed = "completed"


class AppointmentType(str, Enum):
    initial = "initial"
    followup = "followup"
    checkup = "checkup"


# Statuses that reserve nutritionist time
OCCUPYING_STATUSES = (AppointmentStatus.pending, AppointmentStatus.confirmed)


def _utc_naive_now() -> datetime:
    """Naive UTC for TIMESTAMP WITHOUT TIME ZONE columns."""
    return datetime.now(UTC).replace(tzinfo=None)


class Appointment(SQLModel, table=True):
    __tablename__ = "appointments"
    id: int | None = Field(default=None, primary_key=True)
    nutritionist_id: int = Field(foreign_key="users.id", index=True)
    patient_id: int = Field(foreign_key="users.id", index=True)
    date: datetime = Field(index=True)  # local wall-clock start
    duration_minutes: int
    status: AppointmentStatus = Field(default=AppointmentStatus.pending, index=True)
    type: AppointmentType
    notes: str | None = None
    created_at: datetime = Field(default_factory=_utc_naive_now)


class AppointmentCreate(SQLModel):
    nutritionist_id: int
    patient_id: int | None = None  # defaults to the caller
    date: datetime
    duration_minutes: int = Field(gt=0)
    type: AppointmentType
    notes: str | None = None


class AppointmentUpdate(SQLModel):
    status: AppointmentStatus | None = None
    notes: str | None = None
    date: datetime | None = None


class AppointmentPublic(SQLModel):
    id: int
    nutritionist_id: int
    patient_id: int
    date: datetime
    duration_minutes: int
    status: AppointmentStatus
    type: AppointmentType
    notes: str | None = None
    created_at: datetime
