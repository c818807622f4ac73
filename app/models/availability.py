from pydantic import field_validator, model_validator
from sqlmodel import Field, SQLModel

from app.core.clock import to_minutes


class AvailabilityWindow(SQLModel, table=True):
    """One recurring weekly open interval of a nutritionist."""

    __tablename__ = "availability_windows"
    id: int | None = Field(default=None, primary_key=True)
    nutritionist_id: int = Field(foreign_key="users.id", index=True)
    day_of_week: int  # 0 = Sunday .. 6 = Saturday
    start_time: str  # HH:MM
    end_time: str  # HH:MM
    slot_duration_minutes: int


class AvailabilityWindowCreate(SQLModel):
    day_of_week: int = Field(ge=0, le=6)
    start_time: str
    end_time: str
    slot_duration_minutes: int | None = Field(default=None, gt=0)

    @field_validator("start_time", "end_time")
    @classmethod
    def _check_time(cls, value: str) -> str:
        to_minutes(value)
        return value

    @model_validator(mode="after")
    def _check_range(self) -> "AvailabilityWindowCreate":
        if to_minutes(self.start_time) >= to_minutes(self.end_time):
            raise ValueError("start_time must be before end_time")
        return self


class AvailabilityWindowPublic(SQLModel):
    id: int
    nutritionist_id: int
    day_of_week: int
    start_time: str
    end_time: str
    slot_duration_minutes: int
