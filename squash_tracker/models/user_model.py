from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from squash_tracker.core.timeutils import as_utc, utcnow


class UserRole(str, Enum):
    PLAYER = "PLAYER"
    ADMIN = "ADMIN"


class Handedness(str, Enum):
    LEFT = "Left"
    RIGHT = "Right"


class UserModel(BaseModel):
    login: str = Field(min_length=2, max_length=50, pattern=r"^[A-Za-z0-9_.-]+$")  # Unique ID
    display_name: str = Field(min_length=1, max_length=100)
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    club: Optional[str] = "Unattached"
    ranking: Optional[int] = 1000
    handedness: Optional[Handedness] = None
    preferred_court: Optional[str] = None
    role: UserRole = UserRole.PLAYER
    created_at: datetime = Field(default_factory=utcnow)

    class Config:
        from_attributes = True
        use_enum_values = True
        validate_default = True

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @field_validator("created_at")
    @classmethod
    def created_at_utc(cls, v):
        return as_utc(v)
