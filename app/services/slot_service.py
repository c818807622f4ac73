"""Bookable slot computation.

The pure part (``generate_slot_times`` .. ``enumerate_available_slots``) works
on in-memory snapshots of availability windows and occupying appointments and
takes ``now`` as an argument, so the same inputs always produce the same,
identically ordered output. ``get_available_slots`` is the async wrapper that
loads those snapshots for one nutritionist.
"""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clock import to_minutes, to_time_string, to_wall_clock
from app.models.appointment import OCCUPYING_STATUSES, Appointment
from app.models.availability import AvailabilityWindow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Slot:
    date: date
    time: str  # HH:MM
    date_time: datetime


def generate_slot_times(start_time: str, end_time: str, duration_minutes: int) -> list[str]:
    """Start times of consecutive slots that end no later than end_time."""
    if duration_minutes <= 0:
        return []
    cursor = to_minutes(start_time)
    end = to_minutes(end_time)
    times: list[str] = []
    while cursor + duration_minutes <= end:
        times.append(to_time_string(cursor))
        cursor += duration_minutes
    return times


def day_of_week(d: date) -> int:
    """Weekday with 0 = Sunday .. 6 = Saturday."""
    return d.isoweekday() % 7


def windows_for_date(windows: Iterable[AvailabilityWindow], d: date) -> list[AvailabilityWindow]:
    dow = day_of_week(d)
    return [w for w in windows if w.day_of_week == dow]


def conflicts(
    candidate_start: datetime, candidate_duration_minutes: int, appointments: Iterable[Appointment]
) -> bool:
    """True if the candidate slot collides with any appointment.

    A slot collides when it starts inside an appointment, ends inside one
    (end inclusive), or fully contains one. Slots that only touch an
    appointment at either boundary are free.
    """
    candidate_start = to_wall_clock(candidate_start)
    slot_end = candidate_start + timedelta(minutes=candidate_duration_minutes)
    for apt in appointments:
        apt_start = to_wall_clock(apt.date)
        apt_end = apt_start + timedelta(minutes=apt.duration_minutes)
        if (
            (apt_start <= candidate_start < apt_end)
            or (apt_start < slot_end <= apt_end)
            or (candidate_start <= apt_start and slot_end >= apt_end)
        ):
            return True
    return False


def _as_date(value: date | datetime) -> date:
    return value.date() if isinstance(value, datetime) else value


def enumerate_available_slots(
    windows: Sequence[AvailabilityWindow],
    appointments: Sequence[Appointment],
    start_date: date | datetime,
    end_date: date | datetime,
    now: datetime,
) -> list[Slot]:
    """Free, non-past slots between start_date and end_date (both inclusive).

    Ordered by date, then by window order, then by time within a window.
    Overlapping windows on the same weekday can yield the same start twice.
    """
    if not windows:
        return []
    now = to_wall_clock(now)
    current = _as_date(start_date)
    last = _as_date(end_date)
    slots: list[Slot] = []
    while current <= last:
        for window in windows_for_date(windows, current):
            for slot_time in generate_slot_times(
                window.start_time, window.end_time, window.slot_duration_minutes
            ):
                slot_dt = datetime.combine(current, time.fromisoformat(slot_time))
                if slot_dt < now:
                    continue
                if conflicts(slot_dt, window.slot_duration_minutes, appointments):
                    continue
                slots.append(Slot(date=current, time=slot_time, date_time=slot_dt))
        current += timedelta(days=1)
    return slots


def local_now() -> datetime:
    """Current local wall-clock time, naive like every stored scheduling time."""
    return datetime.now().replace(microsecond=0)


async def get_windows(session: AsyncSession, nutritionist_id: int) -> list[AvailabilityWindow]:
    result = await session.execute(
        select(AvailabilityWindow)
        .where(AvailabilityWindow.nutritionist_id == nutritionist_id)
        .order_by(AvailabilityWindow.id)
    )
    return list(result.scalars().all())


async def get_occupying_appointments(
    session: AsyncSession, nutritionist_id: int, start_inclusive: datetime, end_exclusive: datetime
) -> list[Appointment]:
    result = await session.execute(
        select(Appointment).where(
            Appointment.nutritionist_id == nutritionist_id,
            Appointment.status.in_(OCCUPYING_STATUSES),
            Appointment.date >= start_inclusive,
            Appointment.date < end_exclusive,
        )
    )
    return list(result.scalars().all())


async def get_available_slots(
    session: AsyncSession,
    nutritionist_id: int,
    start_date: date,
    end_date: date,
    now: datetime | None = None,
) -> list[Slot]:
    """Load the nutritionist's windows and bookings, then enumerate free slots."""
    windows = await get_windows(session, nutritionist_id)
    if not windows:
        return []
    start = datetime.combine(_as_date(start_date), time.min)
    end = datetime.combine(_as_date(end_date), time.min) + timedelta(days=1)
    appointments = await get_occupying_appointments(session, nutritionist_id, start, end)
    slots = enumerate_available_slots(
        windows, appointments, start_date, end_date, now if now is not None else local_now()
    )
    logger.debug(
        "Nutritionist %d: %d free slot(s) between %s and %s (%d window(s), %d booking(s))",
        nutritionist_id, len(slots), start_date, end_date, len(windows), len(appointments),
    )
    return slots
