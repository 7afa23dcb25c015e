from typing import Optional

from pydantic import BaseModel, Field

from squash_tracker.models.user_model import Handedness


class UserUpdate(BaseModel):
    display_name: Optional[str] = Field(None, min_length=1, max_length=100)
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    club: Optional[str] = None
    ranking: Optional[int] = None
    handedness: Optional[Handedness] = None
    preferred_court: Optional[str] = None


class UserStatsRead(BaseModel):
    login: str
    matches_played: int
    matches_won: int
    matches_lost: int
    win_percentage: float
    tournaments_participated: int
    tournaments_created: int
