import logging
from typing import Any, Dict, List, NamedTuple, Optional

from squash_tracker.core.exceptions import DuplicateError, NotFoundError
from squash_tracker.models.audit_model import AuditAction, AuditTargetType
from squash_tracker.models.match_model import MatchStatus
from squash_tracker.models.user_model import UserModel, UserRole
from squash_tracker.repositories.base import Repository
from squash_tracker.services.audit_service import AuditService

logger = logging.getLogger(__name__)

DEMO_USERS = [
    {"login": "admin", "display_name": "AdminUser", "role": UserRole.ADMIN, "club": "City Club", "ranking": 1200},
    {"login": "jdoe", "display_name": "John Doe", "club": "City Club", "ranking": 1150},
    {"login": "asmith", "display_name": "Alice Smith", "club": "Westside", "ranking": 1300},
    {"login": "bwayne", "display_name": "Bruce Wayne", "club": "Gotham", "ranking": 1500},
    {"login": "ckent", "display_name": "Clark Kent", "club": "Metropolis", "ranking": 1450},
    {"login": "dprince", "display_name": "Diana Prince", "club": "Themyscira", "ranking": 1600},
]

# Fields a profile edit may not touch
PROTECTED_FIELDS = {"login", "role", "created_at"}


class UserStats(NamedTuple):
    login: str
    matches_played: int
    matches_won: int
    matches_lost: int
    win_percentage: float
    tournaments_participated: int
    tournaments_created: int


class UserService:
    def __init__(self, repository: Repository, audit_service: AuditService = None):
        self.repository = repository
        self.audit_service = audit_service or AuditService(repository)

    def register(self, login: str, display_name: str, **profile: Any) -> UserModel:
        user = UserModel(login=login, display_name=display_name, **profile)
        with self.repository.transaction():
            if self.repository.get_user(login):
                raise DuplicateError(f"User {login} already exists.")
            self.repository.save_user(user)
            self.audit_service.record(login, AuditAction.CREATE, AuditTargetType.USER, login, "Registered")
        logger.info("Registered user %s", login)
        return user

    def login(self, login: str) -> UserModel:
        user = self.repository.get_user(login)
        if not user:
            raise NotFoundError(f"User {login} not found.")
        return user

    def get_user(self, login: str) -> Optional[UserModel]:
        return self.repository.get_user(login)

    def list_users(self) -> List[UserModel]:
        return self.repository.list_users()

    def update_profile(self, login: str, updates: Dict[str, Any], acting_user: UserModel) -> UserModel:
        if acting_user.login != login and not acting_user.is_admin:
            raise PermissionError("User is not authorized to update this profile.")
        forbidden = PROTECTED_FIELDS.intersection(updates)
        if forbidden:
            raise ValueError(f"Fields cannot be changed through a profile update: {sorted(forbidden)}")

        with self.repository.transaction():
            user = self.repository.get_user(login)
            if not user:
                raise NotFoundError(f"User {login} not found.")
            updated = UserModel(**{**user.model_dump(), **updates})
            self.repository.save_user(updated)
            self.audit_service.record(
                acting_user.login,
                AuditAction.UPDATE,
                AuditTargetType.USER,
                login,
                f"Updated profile for {updated.display_name}",
            )
        return updated

    def get_user_stats(self, login: str) -> UserStats:
        if not self.repository.get_user(login):
            raise NotFoundError(f"User {login} not found.")

        played = won = participated = created = 0
        for tournament in self.repository.list_tournaments():
            if login in tournament.participants:
                participated += 1
            if tournament.admin_login == login:
                created += 1
            for match in self.repository.list_matches(tournament.id):
                if match.status != MatchStatus.COMPLETED or login not in match.players:
                    continue
                played += 1
                if match.winner_login == login:
                    won += 1

        win_percentage = round(100.0 * won / played, 1) if played else 0.0
        return UserStats(login, played, won, played - won, win_percentage, participated, created)

    def seed_demo_users(self) -> int:
        added = 0
        with self.repository.transaction():
            for data in DEMO_USERS:
                if self.repository.get_user(data["login"]):
                    continue
                self.repository.save_user(UserModel(**data))
                added += 1
        if added:
            logger.info("Seeded %d demo users", added)
        return added
