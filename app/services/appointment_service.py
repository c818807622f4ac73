import logging
from collections.abc import Iterable
from datetime import datetime, timedelta

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clock import to_wall_clock
from app.models.appointment import (
    OCCUPYING_STATUSES,
    Appointment,
    AppointmentCreate,
    AppointmentStatus,
    AppointmentUpdate,
)
from app.models.user import User, UserRole

logger = logging.getLogger(__name__)


class BookingConflictError(Exception):
    """The requested time overlaps another occupying appointment."""


def collides_with_booking(start: datetime, duration_minutes: int, existing: Iterable[Appointment]) -> bool:
    """Booking rule: an existing appointment starts inside the new one, or
    is still running when the new one starts."""
    end = start + timedelta(minutes=duration_minutes)
    for apt in existing:
        apt_end = apt.date + timedelta(minutes=apt.duration_minutes)
        if start <= apt.date < end or (apt.date <= start and apt_end > start):
            return True
    return False


async def _occupying_for_nutritionist(
    session: AsyncSession, nutritionist_id: int, exclude_id: int | None = None
) -> list[Appointment]:
    q = select(Appointment).where(
        Appointment.nutritionist_id == nutritionist_id,
        Appointment.status.in_(OCCUPYING_STATUSES),
    )
    if exclude_id is not None:
        q = q.where(Appointment.id != exclude_id)
    result = await session.execute(q)
    return list(result.scalars().all())


async def create_appointment(
    session: AsyncSession, patient_id: int, data: AppointmentCreate
) -> Appointment | None:
    """Book a pending appointment; None when the time is already taken."""
    start = to_wall_clock(data.date)
    existing = await _occupying_for_nutritionist(session, data.nutritionist_id)
    if collides_with_booking(start, data.duration_minutes, existing):
        logger.info(
            "Booking rejected: nutritionist %d already busy at %s", data.nutritionist_id, start
        )
        return None
    appointment = Appointment(
        nutritionist_id=data.nutritionist_id,
        patient_id=patient_id,
        date=start,
        duration_minutes=data.duration_minutes,
        type=data.type,
        notes=data.notes,
        status=AppointmentStatus.pending,
    )
    session.add(appointment)
    await session.flush()
    await session.refresh(appointment)
    logger.info(
        "Appointment %d booked: patient %d with nutritionist %d at %s",
        appointment.id, patient_id, data.nutritionist_id, start,
    )
    return appointment


async def get_appointment(session: AsyncSession, appointment_id: int) -> Appointment | None:
    result = await session.execute(select(Appointment).where(Appointment.id == appointment_id))
    return result.scalar_one_or_none()


def can_manage(user: User, appointment: Appointment) -> bool:
    return user.role == UserRole.admin or user.id in (
        appointment.patient_id,
        appointment.nutritionist_id,
    )


async def list_appointments_for_user(
    session: AsyncSession, user: User, status: AppointmentStatus | None = None
) -> list[Appointment]:
    if user.role == UserRole.nutritionist:
        q = select(Appointment).where(Appointment.nutritionist_id == user.id)
    else:
        q = select(Appointment).where(Appointment.patient_id == user.id)
    if status is not None:
        q = q.where(Appointment.status == status)
    result = await session.execute(q.order_by(Appointment.date))
    return list(result.scalars().all())


async def update_appointment(
    session: AsyncSession, appointment: Appointment, data: AppointmentUpdate
) -> Appointment:
    new_start = to_wall_clock(data.date) if data.date is not None else appointment.date
    new_status = data.status if data.status is not None else appointment.status
    reoccupies = appointment.status not in OCCUPYING_STATUSES and new_status in OCCUPYING_STATUSES
    if new_status in OCCUPYING_STATUSES and (data.date is not None or reoccupies):
        existing = await _occupying_for_nutritionist(
            session, appointment.nutritionist_id, exclude_id=appointment.id
        )
        if collides_with_booking(new_start, appointment.duration_minutes, existing):
            raise BookingConflictError(f"{new_start} is already booked")
    appointment.date = new_start
    appointment.status = new_status
    if "notes" in data.model_fields_set:
        appointment.notes = data.notes
    session.add(appointment)
    await session.flush()
    await session.refresh(appointment)
    return appointment


async def cancel_appointment(session: AsyncSession, appointment: Appointment) -> Appointment:
    """Soft cancel: the row stays, it just stops occupying time."""
    appointment.status = AppointmentStatus.cancelled
    session.add(appointment)
    await session.flush()
    await session.refresh(appointment)
    logger.info("Appointment %d cancelled", appointment.id)
    return appointment
