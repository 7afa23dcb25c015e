from squash_tracker.models.match_model import MatchModel
from squash_tracker.models.tournament_model import TournamentConfig
from squash_tracker.models.user_model import UserModel


def can_manage_tournament(user: UserModel, tournament: TournamentConfig) -> bool:
    return user.is_admin or tournament.is_admin(user.login)


def can_score_match(user: UserModel, tournament: TournamentConfig, match: MatchModel) -> bool:
    return can_manage_tournament(user, tournament) or user.login in match.players
