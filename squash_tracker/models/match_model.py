from datetime import datetime
from enum import Enum
from typing import List, Optional
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator, model_validator

from squash_tracker.core.timeutils import as_utc


class MatchStatus(str, Enum):
    SCHEDULED = "SCHEDULED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


class Side(str, Enum):
    A = "A"
    B = "B"


class GameScore(BaseModel):
    player_a_score: int = 0
    player_b_score: int = 0

    class Config:
        frozen = True


class MatchModel(BaseModel):
    id: str = Field(default_factory=lambda: uuid4().hex[:9])
    tournament_id: str
    pool_id: Optional[str] = None  # Round robin only
    round: Optional[int] = None  # Elimination only

    player_a_login: str
    player_b_login: str

    scores: List[GameScore] = Field(default_factory=list)
    status: MatchStatus = MatchStatus.SCHEDULED
    winner_login: Optional[str] = None
    court: Optional[str] = None
    scheduled_time: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    class Config:
        from_attributes = True
        use_enum_values = True
        validate_default = True

    @field_validator("scheduled_time", "completed_at")
    @classmethod
    def times_utc(cls, v):
        return as_utc(v)

    @model_validator(mode="after")
    def check_consistency(self):
        if (self.pool_id is None) == (self.round is None):
            raise ValueError("A match belongs to exactly one of a pool or an elimination round")
        if self.player_a_login == self.player_b_login:
            raise ValueError("A match needs two distinct players")
        completed = self.status == MatchStatus.COMPLETED
        if completed != (self.winner_login is not None):
            raise ValueError("winner_login is set if and only if the match is COMPLETED")
        if completed != (self.completed_at is not None):
            raise ValueError("completed_at is set if and only if the match is COMPLETED")
        if self.winner_login is not None and self.winner_login not in self.players:
            raise ValueError("winner_login must be one of the match players")
        return self

    @property
    def players(self) -> tuple:
        return (self.player_a_login, self.player_b_login)

    @property
    def is_completed(self) -> bool:
        return self.status == MatchStatus.COMPLETED

    def login_for(self, side: Side) -> str:
        return self.player_a_login if side == Side.A else self.player_b_login

    def pairing_key(self) -> tuple:
        """Identifies the slot a match fills in a schedule, regardless of side order."""
        return (self.pool_id, self.round, frozenset(self.players))
