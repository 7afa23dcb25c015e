from datetime import datetime
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator

from squash_tracker.core.timeutils import as_utc, utcnow


class AuditAction(str, Enum):
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


class AuditTargetType(str, Enum):
    MATCH = "MATCH"
    TOURNAMENT = "TOURNAMENT"
    USER = "USER"


class AuditLog(BaseModel):
    id: str = Field(default_factory=lambda: uuid4().hex[:9])
    timestamp: datetime = Field(default_factory=utcnow)
    actor_login: str
    action: AuditAction
    target_type: AuditTargetType
    target_id: str
    details: str = ""

    class Config:
        from_attributes = True
        use_enum_values = True
        validate_default = True

    @field_validator("timestamp")
    @classmethod
    def timestamp_utc(cls, v):
        return as_utc(v)
