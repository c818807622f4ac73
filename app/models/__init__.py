from app.models.user import User, UserCreate, UserPublic, UserRole
from app.models.refresh_token import RefreshToken
from app.models.availability import (
    AvailabilityWindow,
    AvailabilityWindowCreate,
    AvailabilityWindowPublic,
)
from app.models.appointment import (
    OCCUPYING_STATUSES,
    Appointment,
    AppointmentCreate,
    AppointmentPublic,
    AppointmentStatus,
    AppointmentType,
    AppointmentUpdate,
)

__all__ = [
    "User",
    "UserCreate",
    "UserPublic",
    "UserRole",
    "RefreshToken",
    "AvailabilityWindow",
    "AvailabilityWindowCreate",
    "AvailabilityWindowPublic",
    "OCCUPYING_STATUSES",
    "Appointment",
    "AppointmentCreate",
    "AppointmentPublic",
    "AppointmentStatus",
    "AppointmentType",
    "AppointmentUpdate",
]
