import logging
from datetime import datetime
from typing import List, NamedTuple, Optional, Sequence

from squash_tracker.core.exceptions import NotFoundError, PreconditionFailedError, ScoreValidationError
from squash_tracker.core.timeutils import utcnow
from squash_tracker.models.audit_model import AuditAction, AuditTargetType
from squash_tracker.models.match_model import GameScore, MatchModel, MatchStatus
from squash_tracker.models.standings_model import PoolStandings
from squash_tracker.models.tournament_model import ScoringRules, TournamentStatus
from squash_tracker.models.user_model import UserModel
from squash_tracker.repositories.base import Repository
from squash_tracker.services.audit_service import AuditService
from squash_tracker.services.permissions import can_score_match
from squash_tracker.services.scoring_service import MatchEvaluation, evaluate_match
from squash_tracker.services.standings_service import recompute_standings

logger = logging.getLogger(__name__)


class MatchUpdateResult(NamedTuple):
    match: MatchModel
    # Fresh rows for the match's pool; empty for elimination matches
    standings: List[PoolStandings]


def apply_score(
    match: MatchModel,
    new_scores: Sequence[GameScore],
    rules: ScoringRules,
    now: Optional[datetime] = None,
) -> MatchModel:
    """
    Returns a copy of ``match`` carrying ``new_scores`` and the status they imply.

    A decided match becomes COMPLETED with its winner and completion time;
    anything else is IN_PROGRESS with no winner, so re-editing a completed
    match can reopen it.
    """
    evaluation = evaluate_match(new_scores, rules)
    if evaluation.conflict:
        raise ScoreValidationError(
            f"Both players have won {rules.games_needed_to_win} games "
            f"({evaluation.games_won_by_a}-{evaluation.games_won_by_b}); check the entered scores."
        )

    data = match.model_dump()
    data["scores"] = [game.model_dump() for game in new_scores]
    if evaluation.winner is not None:
        data["status"] = MatchStatus.COMPLETED.value
        data["winner_login"] = match.login_for(evaluation.winner)
        data["completed_at"] = now or utcnow()
    else:
        data["status"] = MatchStatus.IN_PROGRESS.value
        data["winner_login"] = None
        data["completed_at"] = None
    return MatchModel(**data)


class MatchService:
    def __init__(self, repository: Repository, audit_service: AuditService = None):
        self.repository = repository
        self.audit_service = audit_service or AuditService(repository)

    def get_match(self, match_id: str) -> Optional[MatchModel]:
        return self.repository.get_match(match_id)

    def list_tournament_matches(self, tournament_id: str) -> List[MatchModel]:
        return self.repository.list_matches(tournament_id)

    def preview_score(self, match_id: str, scores: Sequence[GameScore]) -> MatchEvaluation:
        """Win progress for scores that have not been saved; writes nothing."""
        match = self.repository.get_match(match_id)
        if not match:
            raise NotFoundError(f"Match with ID {match_id} not found.")
        tournament = self.repository.get_tournament(match.tournament_id)
        if not tournament:
            raise NotFoundError(f"Tournament with ID {match.tournament_id} not found.")
        return evaluate_match(scores, tournament.rules)

    def update_score(
        self,
        match_id: str,
        scores: Sequence[GameScore],
        acting_user: UserModel,
        now: Optional[datetime] = None,
    ) -> MatchUpdateResult:
        """
        Stores new scores for a match and rebuilds its pool's standings.

        The match, the pool's standings rows and the audit entry are written in
        one transaction; any error leaves all three untouched.
        """
        repo = self.repository
        with repo.transaction():
            match = repo.get_match(match_id)
            if not match:
                raise NotFoundError(f"Match with ID {match_id} not found.")
            tournament = repo.get_tournament(match.tournament_id)
            if not tournament:
                raise NotFoundError(f"Tournament with ID {match.tournament_id} not found.")
            if not can_score_match(acting_user, tournament, match):
                raise PermissionError("User is not authorized to enter scores for this match.")
            if tournament.status != TournamentStatus.ACTIVE:
                raise PreconditionFailedError(
                    f"Scores can only be entered while the tournament is Active. Current status: {tournament.status}"
                )

            updated = apply_score(match, scores, tournament.rules, now=now)
            repo.save_match(updated)

            standings: List[PoolStandings] = []
            if updated.pool_id is not None:
                standings = recompute_standings(repo.load_pool_matches(updated.tournament_id, updated.pool_id))
                repo.replace_standings(updated.tournament_id, updated.pool_id, standings)

            self.audit_service.record(
                acting_user.login,
                AuditAction.UPDATE,
                AuditTargetType.MATCH,
                updated.id,
                f"Score update: {updated.player_a_login} vs {updated.player_b_login}",
            )

        logger.info(
            "Match %s scored by %s: status=%s winner=%s",
            updated.id, acting_user.login, updated.status, updated.winner_login,
        )
        return MatchUpdateResult(match=updated, standings=standings)
