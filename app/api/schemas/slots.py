from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from app.services.slot_service import Slot


class SlotInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    date: date
    time: str  # HH:MM
    date_time: datetime = Field(alias="dateTime")

    @classmethod
    def from_slot(cls, slot: Slot) -> "SlotInfo":
        return cls(date=slot.date, time=slot.time, date_time=slot.date_time)
