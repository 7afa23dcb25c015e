from typing import List, Optional

from pydantic import BaseModel, Field

from squash_tracker.models.match_model import GameScore, MatchModel, Side
from squash_tracker.models.standings_model import PoolStandings


class GameScoreIn(BaseModel):
    player_a_score: int = Field(..., ge=0)
    player_b_score: int = Field(..., ge=0)

    def to_game(self) -> GameScore:
        return GameScore(player_a_score=self.player_a_score, player_b_score=self.player_b_score)


class ScoreUpdate(BaseModel):
    scores: List[GameScoreIn]


class MatchEvaluationRead(BaseModel):
    games_won_by_a: int
    games_won_by_b: int
    winner: Optional[Side] = None
    conflict: bool = False


class MatchUpdateRead(BaseModel):
    match: MatchModel
    standings: List[PoolStandings]
