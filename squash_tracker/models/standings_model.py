from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from squash_tracker.core.timeutils import as_utc


class PoolStandings(BaseModel):
    login: str
    tournament_id: str
    pool_id: str
    matches_played: int = 0
    matches_won: int = 0
    matches_lost: int = 0
    games_won: int = 0
    games_lost: int = 0
    points_won: int = 0
    points_lost: int = 0
    points_diff: int = 0
    last_played_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    @field_validator("last_played_at")
    @classmethod
    def last_played_at_utc(cls, v):
        return as_utc(v)

    @property
    def key(self) -> tuple:
        return (self.tournament_id, self.pool_id, self.login)
