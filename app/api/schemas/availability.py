from pydantic import BaseModel

from app.models.availability import AvailabilityWindowCreate


class ReplaceAvailabilityRequest(BaseModel):
    windows: list[AvailabilityWindowCreate]
