from datetime import datetime
from enum import Enum
from typing import List, Optional
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator, model_validator

from squash_tracker.core.timeutils import as_utc, utcnow


class TournamentType(str, Enum):
    ROUND_ROBIN = "ROUND_ROBIN"
    SINGLE_ELIMINATION = "SINGLE_ELIMINATION"


class TournamentStatus(str, Enum):
    DRAFT = "Draft"
    ACTIVE = "Active"
    COMPLETED = "Completed"


SUPPORTED_BEST_OF = (3, 5)
MIN_POOL_SIZE = 3
DEFAULT_POOL_SIZE = 4


class ScoringRules(BaseModel):
    points_per_game: int = Field(default=11, ge=1)
    best_of: int = 3
    must_win_by_two: bool = True

    class Config:
        frozen = True

    @field_validator("best_of")
    @classmethod
    def supported_best_of(cls, v):
        if v not in SUPPORTED_BEST_OF:
            raise ValueError(f"best_of must be one of {SUPPORTED_BEST_OF}")
        return v

    @property
    def games_needed_to_win(self) -> int:
        return -(-self.best_of // 2)


class TournamentConfig(BaseModel):
    id: str = Field(default_factory=lambda: uuid4().hex[:9])
    title: str = Field(min_length=3, max_length=100)
    description: str = ""
    start_date: datetime = Field(default_factory=utcnow)
    type: TournamentType = TournamentType.ROUND_ROBIN
    status: TournamentStatus = TournamentStatus.DRAFT
    pool_size: int = DEFAULT_POOL_SIZE
    rules: ScoringRules = Field(default_factory=ScoringRules)
    participants: List[str] = Field(default_factory=list)  # List of user logins
    admin_login: str

    class Config:
        from_attributes = True
        use_enum_values = True
        validate_default = True

    @field_validator("start_date")
    @classmethod
    def start_date_utc(cls, v):
        return as_utc(v)

    @field_validator("participants")
    @classmethod
    def dedupe_participants(cls, v):
        # dict keeps first-insertion order
        return list(dict.fromkeys(v))

    @model_validator(mode="after")
    def pool_size_for_round_robin(self):
        if self.type == TournamentType.ROUND_ROBIN and self.pool_size < MIN_POOL_SIZE:
            raise ValueError(f"pool_size must be at least {MIN_POOL_SIZE} for round robin tournaments")
        return self

    def is_admin(self, login: str) -> bool:
        return self.admin_login == login
