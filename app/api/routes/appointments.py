import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, get_session
from app.models.appointment import (
    Appointment,
    AppointmentCreate,
    AppointmentPublic,
    AppointmentStatus,
    AppointmentUpdate,
)
from app.models.user import User, UserRole
from app.services.appointment_service import (
    BookingConflictError,
    can_manage,
    cancel_appointment,
    create_appointment,
    get_appointment,
    list_appointments_for_user,
    update_appointment,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/appointments", tags=["appointments"])

_ALREADY_BOOKED = "Time slot is already booked"


def _to_public(a: Appointment) -> AppointmentPublic:
    return AppointmentPublic.model_validate(a, from_attributes=True)


async def _get_manageable(session: AsyncSession, appointment_id: int, user: User) -> Appointment:
    appointment = await get_appointment(session, appointment_id)
    if not appointment:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Appointment not found")
    if not can_manage(user, appointment):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to change this appointment",
        )
    return appointment


@router.get("", response_model=list[AppointmentPublic])
async def list_my_appointments(
    status_filter: AppointmentStatus | None = Query(None, alias="status"),
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> list[AppointmentPublic]:
    appointments = await list_appointments_for_user(session, current_user, status=status_filter)
    return [_to_public(a) for a in appointments]


@router.post("", response_model=AppointmentPublic, status_code=status.HTTP_201_CREATED)
async def book_appointment(
    body: AppointmentCreate,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> AppointmentPublic:
    patient_id = body.patient_id or current_user.id
    if patient_id != current_user.id and current_user.role == UserRole.patient:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Patients can only book for themselves",
        )
    appointment = await create_appointment(session, patient_id, body)
    if not appointment:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=_ALREADY_BOOKED)
    return _to_public(appointment)


@router.patch("/{appointment_id}", response_model=AppointmentPublic)
async def patch_appointment(
    appointment_id: int,
    body: AppointmentUpdate,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> AppointmentPublic:
    appointment = await _get_manageable(session, appointment_id, current_user)
    try:
        appointment = await update_appointment(session, appointment, body)
    except BookingConflictError as e:
        logger.info("Reschedule of appointment %d rejected: %s", appointment_id, e)
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=_ALREADY_BOOKED) from e
    return _to_public(appointment)


@router.delete("/{appointment_id}", response_model=AppointmentPublic)
async def cancel_my_appointment(
    appointment_id: int,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> AppointmentPublic:
    appointment = await _get_manageable(session, appointment_id, current_user)
    appointment = await cancel_appointment(session, appointment)
    return _to_public(appointment)
