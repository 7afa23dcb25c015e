from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from squash_tracker.models.standings_model import PoolStandings
from squash_tracker.models.tournament_model import DEFAULT_POOL_SIZE, ScoringRules, TournamentStatus, TournamentType


class TournamentCreate(BaseModel):
    title: str = Field(..., min_length=3, max_length=100, description="Name of the tournament")
    description: str = ""
    start_date: Optional[datetime] = Field(None, description="Defaults to now")
    type: TournamentType = TournamentType.ROUND_ROBIN
    pool_size: int = Field(DEFAULT_POOL_SIZE, description="Players per pool, round robin only")
    rules: ScoringRules = Field(default_factory=ScoringRules)
    participants: List[str] = Field(default_factory=list, description="Initial participant logins")


class StatusUpdate(BaseModel):
    status: TournamentStatus


class StandingsRead(BaseModel):
    tournament_id: str
    pools: Dict[str, List[PoolStandings]]
