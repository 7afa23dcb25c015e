import logging
import math
from itertools import combinations
from typing import Iterable, List, NamedTuple, Sequence

from squash_tracker.core.exceptions import NotFoundError, PreconditionFailedError
from squash_tracker.models.audit_model import AuditAction, AuditTargetType
from squash_tracker.models.match_model import MatchModel, MatchStatus
from squash_tracker.models.tournament_model import TournamentConfig, TournamentStatus, TournamentType
from squash_tracker.models.user_model import UserModel
from squash_tracker.repositories.base import Repository
from squash_tracker.services.audit_service import AuditService
from squash_tracker.services.permissions import can_manage_tournament
from squash_tracker.services.standings_service import recompute_standings

logger = logging.getLogger(__name__)

FIRST_ROUND = 1


class ScheduleResult(NamedTuple):
    tournament: TournamentConfig  # status moved to Active
    matches: List[MatchModel]  # newly generated matches only


def pool_label(index: int) -> str:
    """0 -> "Pool A", 25 -> "Pool Z", 26 -> "Pool AA"."""
    letters = ""
    index += 1
    while index:
        index, rem = divmod(index - 1, 26)
        letters = chr(ord("A") + rem) + letters
    return f"Pool {letters}"


def assign_pools(participants: Sequence[str], pool_size: int) -> List[List[str]]:
    """
    Deals players into pools like cards: player ``i`` lands in pool
    ``i % num_pools``. Dealing instead of slicing keeps pool sizes within one
    of each other.
    """
    if not participants:
        return []
    num_pools = math.ceil(len(participants) / pool_size)
    pools: List[List[str]] = [[] for _ in range(num_pools)]
    for i, login in enumerate(participants):
        pools[i % num_pools].append(login)
    return pools


def elimination_pairs(participants: Sequence[str]) -> List[tuple]:
    # An odd player out gets no match this round.
    return [(participants[i], participants[i + 1]) for i in range(0, len(participants) - 1, 2)]


def build_schedule(tournament: TournamentConfig, existing_matches: Iterable[MatchModel] = ()) -> ScheduleResult:
    """
    Generates the match list for a Draft tournament.

    ``existing_matches`` are the tournament's stored matches. The caller drops
    the non-completed ones; completed ones are kept as they are, and no new
    match is generated for a pairing that one of them already settled.
    """
    if tournament.status != TournamentStatus.DRAFT:
        raise PreconditionFailedError(
            f"Schedule can only be generated for a Draft tournament. Current status: {tournament.status}"
        )

    settled = {m.pairing_key() for m in existing_matches if m.status == MatchStatus.COMPLETED}

    candidates: List[MatchModel] = []
    if tournament.type == TournamentType.ROUND_ROBIN:
        for index, pool_players in enumerate(assign_pools(tournament.participants, tournament.pool_size)):
            pool_id = pool_label(index)
            for player_a, player_b in combinations(pool_players, 2):
                candidates.append(
                    MatchModel(
                        tournament_id=tournament.id,
                        pool_id=pool_id,
                        player_a_login=player_a,
                        player_b_login=player_b,
                    )
                )
    elif tournament.type == TournamentType.SINGLE_ELIMINATION:
        for player_a, player_b in elimination_pairs(tournament.participants):
            candidates.append(
                MatchModel(
                    tournament_id=tournament.id,
                    round=FIRST_ROUND,
                    player_a_login=player_a,
                    player_b_login=player_b,
                )
            )
    else:
        raise NotImplementedError(f"Schedule generation for {tournament.type} is not implemented.")

    matches = [m for m in candidates if m.pairing_key() not in settled]
    activated = tournament.model_copy(update={"status": TournamentStatus.ACTIVE.value})
    return ScheduleResult(tournament=activated, matches=matches)


class ScheduleService:
    def __init__(self, repository: Repository, audit_service: AuditService = None):
        self.repository = repository
        self.audit_service = audit_service or AuditService(repository)

    def generate_schedule(self, tournament_id: str, acting_user: UserModel) -> List[MatchModel]:
        """
        Replaces the open matches of a Draft tournament with a fresh schedule,
        activates the tournament and materializes standings for every pool.
        Returns the tournament's full match list afterwards.
        """
        repo = self.repository
        with repo.transaction():
            tournament = repo.get_tournament(tournament_id)
            if not tournament:
                raise NotFoundError(f"Tournament with ID {tournament_id} not found.")
            if not can_manage_tournament(acting_user, tournament):
                raise PermissionError("User is not authorized to generate the schedule for this tournament.")
            if len(tournament.participants) < 2:
                raise PreconditionFailedError("A schedule needs at least 2 participants.")

            result = build_schedule(tournament, repo.list_matches(tournament_id))

            discarded = repo.discard_open_matches(tournament_id)
            for match in result.matches:
                repo.save_match(match)
            repo.save_tournament(result.tournament)

            all_matches = repo.list_matches(tournament_id)
            repo.clear_standings(tournament_id)
            pool_ids = list(dict.fromkeys(m.pool_id for m in all_matches if m.pool_id is not None))
            for pool_id in pool_ids:
                pool_matches = [m for m in all_matches if m.pool_id == pool_id]
                repo.replace_standings(tournament_id, pool_id, recompute_standings(pool_matches))

            self.audit_service.record(
                acting_user.login,
                AuditAction.UPDATE,
                AuditTargetType.TOURNAMENT,
                tournament_id,
                "Generated schedule",
            )

        logger.info(
            "Generated schedule for tournament %s: %d new matches, %d discarded, %d pools",
            tournament_id, len(result.matches), discarded, len(pool_ids),
        )
        return all_matches
