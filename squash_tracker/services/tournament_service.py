import logging
from typing import Dict, List, Optional

from squash_tracker.core.exceptions import NotFoundError, PreconditionFailedError
from squash_tracker.models.audit_model import AuditAction, AuditTargetType
from squash_tracker.models.match_model import MatchModel
from squash_tracker.models.standings_model import PoolStandings
from squash_tracker.models.tournament_model import TournamentConfig, TournamentStatus
from squash_tracker.models.user_model import UserModel
from squash_tracker.repositories.base import Repository
from squash_tracker.services.audit_service import AuditService
from squash_tracker.services.permissions import can_manage_tournament
from squash_tracker.services.standings_service import group_by_pool

logger = logging.getLogger(__name__)

# Draft -> Active happens only through schedule generation.
ALLOWED_STATUS_CHANGES = {
    TournamentStatus.DRAFT.value: set(),
    TournamentStatus.ACTIVE.value: {TournamentStatus.COMPLETED.value, TournamentStatus.DRAFT.value},
    TournamentStatus.COMPLETED.value: {TournamentStatus.ACTIVE.value},
}


class TournamentService:
    def __init__(self, repository: Repository, audit_service: AuditService = None):
        self.repository = repository
        self.audit_service = audit_service or AuditService(repository)

    def create_tournament(self, tournament_data: TournamentConfig, acting_user: UserModel) -> TournamentConfig:
        tournament = TournamentConfig(
            **{
                **tournament_data.model_dump(),
                "admin_login": acting_user.login,
                "status": TournamentStatus.DRAFT.value,
            }
        )
        with self.repository.transaction():
            self.repository.save_tournament(tournament)
            self.audit_service.record(
                acting_user.login,
                AuditAction.CREATE,
                AuditTargetType.TOURNAMENT,
                tournament.id,
                f"Created tournament {tournament.title}",
            )
        logger.info("Tournament %s created by %s", tournament.id, acting_user.login)
        return tournament

    def get_tournament_by_id(self, tournament_id: str) -> Optional[TournamentConfig]:
        return self.repository.get_tournament(tournament_id)

    def _require(self, tournament_id: str) -> TournamentConfig:
        tournament = self.repository.get_tournament(tournament_id)
        if not tournament:
            raise NotFoundError(f"Tournament with ID {tournament_id} not found.")
        return tournament

    def list_tournaments(self) -> List[TournamentConfig]:
        """Newest start date first."""
        return sorted(self.repository.list_tournaments(), key=lambda t: t.start_date, reverse=True)

    def join_tournament(self, tournament_id: str, acting_user: UserModel) -> TournamentConfig:
        with self.repository.transaction():
            tournament = self._require(tournament_id)
            if acting_user.login in tournament.participants:
                return tournament
            if tournament.status != TournamentStatus.DRAFT:
                raise PreconditionFailedError(
                    f"Tournament is not open for registration. Current status: {tournament.status}"
                )
            updated = tournament.model_copy(update={"participants": tournament.participants + [acting_user.login]})
            self.repository.save_tournament(updated)
            self.audit_service.record(
                acting_user.login, AuditAction.UPDATE, AuditTargetType.TOURNAMENT, tournament_id, "Joined tournament"
            )
        return updated

    def update_tournament_status(
        self, tournament_id: str, new_status: TournamentStatus, acting_user: UserModel
    ) -> TournamentConfig:
        new_status = TournamentStatus(new_status).value
        with self.repository.transaction():
            tournament = self._require(tournament_id)
            if not can_manage_tournament(acting_user, tournament):
                raise PermissionError("User is not authorized to change the status of this tournament.")
            if new_status not in ALLOWED_STATUS_CHANGES[tournament.status]:
                raise PreconditionFailedError(f"Cannot change tournament status from {tournament.status} to {new_status}.")
            updated = tournament.model_copy(update={"status": new_status})
            self.repository.save_tournament(updated)
            self.audit_service.record(
                acting_user.login,
                AuditAction.UPDATE,
                AuditTargetType.TOURNAMENT,
                tournament_id,
                f"Status {tournament.status} -> {new_status}",
            )
        logger.info("Tournament %s status %s -> %s", tournament_id, tournament.status, new_status)
        return updated

    def list_matches(self, tournament_id: str) -> List[MatchModel]:
        self._require(tournament_id)
        return self.repository.list_matches(tournament_id)

    def get_standings(self, tournament_id: str) -> Dict[str, List[PoolStandings]]:
        """Standings grouped by pool id, each pool in display order."""
        self._require(tournament_id)
        return group_by_pool(self.repository.list_standings(tournament_id))
