"""
Storage interface used by the service layer.

The scheduling and standings logic never talks to a backend directly; it goes
through a ``Repository`` so the JSON file store and the SQL store can be
swapped at startup. Writes issued inside ``transaction()`` become visible to
readers together or not at all, which is what keeps a completed match and its
pool's standings from ever being observed out of step.
"""
from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import List, Optional, Sequence

from squash_tracker.models.audit_model import AuditLog
from squash_tracker.models.match_model import MatchModel
from squash_tracker.models.standings_model import PoolStandings
from squash_tracker.models.tournament_model import TournamentConfig
from squash_tracker.models.user_model import UserModel


class Repository(ABC):

    @abstractmethod
    def transaction(self) -> AbstractContextManager:
        """Groups writes into one atomic commit. Nested calls join the outer one."""

    # --- Users ---

    @abstractmethod
    def get_user(self, login: str) -> Optional[UserModel]: ...

    @abstractmethod
    def list_users(self) -> List[UserModel]: ...

    @abstractmethod
    def save_user(self, user: UserModel) -> UserModel: ...

    # --- Tournaments ---

    @abstractmethod
    def get_tournament(self, tournament_id: str) -> Optional[TournamentConfig]: ...

    @abstractmethod
    def list_tournaments(self) -> List[TournamentConfig]: ...

    @abstractmethod
    def save_tournament(self, tournament: TournamentConfig) -> TournamentConfig: ...

    # --- Matches ---

    @abstractmethod
    def get_match(self, match_id: str) -> Optional[MatchModel]: ...

    @abstractmethod
    def list_matches(self, tournament_id: str) -> List[MatchModel]:
        """Matches of a tournament in the order they were first saved."""

    def load_pool_matches(self, tournament_id: str, pool_id: str) -> List[MatchModel]:
        return [m for m in self.list_matches(tournament_id) if m.pool_id == pool_id]

    @abstractmethod
    def save_match(self, match: MatchModel) -> MatchModel: ...

    @abstractmethod
    def discard_open_matches(self, tournament_id: str) -> int:
        """Deletes every non-completed match of a tournament; returns how many went."""

    # --- Standings ---

    @abstractmethod
    def list_standings(self, tournament_id: str) -> List[PoolStandings]: ...

    @abstractmethod
    def replace_standings(self, tournament_id: str, pool_id: str, rows: Sequence[PoolStandings]) -> None:
        """Drops every stored row of the pool and stores ``rows`` in their place."""

    @abstractmethod
    def clear_standings(self, tournament_id: str) -> None: ...

    # --- Audit ---

    @abstractmethod
    def add_audit_entry(self, entry: AuditLog) -> AuditLog: ...

    @abstractmethod
    def list_audit_entries(self, target_id: Optional[str] = None) -> List[AuditLog]: ...
