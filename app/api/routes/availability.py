from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_nutritionist, get_session
from app.api.schemas.availability import ReplaceAvailabilityRequest
from app.models.availability import AvailabilityWindow, AvailabilityWindowPublic
from app.models.user import User
from app.services.availability_service import delete_window, list_windows, replace_windows

router = APIRouter(prefix="/availability", tags=["availability"])


def _to_public(w: AvailabilityWindow) -> AvailabilityWindowPublic:
    return AvailabilityWindowPublic.model_validate(w, from_attributes=True)


@router.get("", response_model=list[AvailabilityWindowPublic])
async def get_availability(
    nutritionist_id: int = Query(...),
    session: AsyncSession = Depends(get_session),
) -> list[AvailabilityWindowPublic]:
    windows = await list_windows(session, nutritionist_id)
    return [_to_public(w) for w in windows]


@router.put("", response_model=list[AvailabilityWindowPublic])
async def put_availability(
    body: ReplaceAvailabilityRequest,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_nutritionist),
) -> list[AvailabilityWindowPublic]:
    """Replace the caller's whole weekly schedule."""
    windows = await replace_windows(session, current_user.id, body.windows)
    return [_to_public(w) for w in windows]


@router.delete("/{window_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_availability(
    window_id: int,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_nutritionist),
) -> None:
    ok = await delete_window(session, window_id, current_user.id)
    if not ok:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Availability window not found or not yours",
        )
