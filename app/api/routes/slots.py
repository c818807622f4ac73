from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_session
from app.api.schemas.slots import SlotInfo
from app.core.config import settings
from app.services.slot_service import get_available_slots

router = APIRouter(prefix="/available-slots", tags=["slots"])


@router.get("", response_model=list[SlotInfo])
async def available_slots(
    nutritionist_id: int = Query(...),
    start_date: date = Query(...),
    end_date: date = Query(...),
    session: AsyncSession = Depends(get_session),
) -> list[SlotInfo]:
    """Free slots of a nutritionist between start_date and end_date (inclusive).

    An empty list means nothing is bookable; an inverted range also yields [].
    """
    if (end_date - start_date).days >= settings.max_slot_range_days:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Date range too large (max {settings.max_slot_range_days} days)",
        )
    slots = await get_available_slots(session, nutritionist_id, start_date, end_date)
    return [SlotInfo.from_slot(s) for s in slots]
