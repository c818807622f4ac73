import logging
from collections.abc import Sequence

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.models.availability import AvailabilityWindow, AvailabilityWindowCreate

logger = logging.getLogger(__name__)


async def list_windows(session: AsyncSession, nutritionist_id: int) -> list[AvailabilityWindow]:
    """Windows of one nutritionist, ordered by weekday then start time."""
    result = await session.execute(
        select(AvailabilityWindow)
        .where(AvailabilityWindow.nutritionist_id == nutritionist_id)
        .order_by(AvailabilityWindow.day_of_week, AvailabilityWindow.start_time)
    )
    return list(result.scalars().all())


async def replace_windows(
    session: AsyncSession, nutritionist_id: int, windows: Sequence[AvailabilityWindowCreate]
) -> list[AvailabilityWindow]:
    """Swap the nutritionist's whole weekly schedule for the given windows."""
    await session.execute(
        delete(AvailabilityWindow).where(AvailabilityWindow.nutritionist_id == nutritionist_id)
    )
    for w in windows:
        session.add(
            AvailabilityWindow(
                nutritionist_id=nutritionist_id,
                day_of_week=w.day_of_week,
                start_time=w.start_time,
                end_time=w.end_time,
                slot_duration_minutes=w.slot_duration_minutes or settings.default_slot_duration_minutes,
            )
        )
    await session.flush()
    logger.info("Nutritionist %d availability replaced with %d window(s)", nutritionist_id, len(windows))
    return await list_windows(session, nutritionist_id)


async def delete_window(session: AsyncSession, window_id: int, nutritionist_id: int) -> bool:
    result = await session.execute(
        select(AvailabilityWindow).where(
            AvailabilityWindow.id == window_id,
            AvailabilityWindow.nutritionist_id == nutritionist_id,
        )
    )
    window = result.scalar_one_or_none()
    if not window:
        return False
    await session.delete(window)
    await session.flush()
    return True
