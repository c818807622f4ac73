from datetime import UTC, datetime
from enum import Enum

from sqlmodel import Field, SQLModel


class UserRole(str, Enum):
    patient = "patient"
    nutritionist = "nutritionist"
    admin = "admin"


def _utc_naive_now() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)


class UserBase(SQLModel):
    email: str = Field(unique=True, index=True)
    full_name: str | None = None
    role: UserRole = Field(default=UserRole.patient, index=True)


class User(UserBase, table=True):
    __tablename__ = "users"
    id: int | None = Field(default=None, primary_key=True)
    hashed_password: str
    created_at: datetime = Field(default_factory=_utc_naive_now)


class UserCreate(SQLModel):
    email: str
    password: str
    full_name: str | None = None
    role: UserRole = UserRole.patient


class UserPublic(SQLModel):
    id: int
    email: str
    full_name: str | None = None
    role: UserRole
