import json
import logging
import os
import tempfile
import threading
from contextlib import contextmanager
from typing import Any, Dict, List, Optional, Sequence

from squash_tracker.models.audit_model import AuditLog
from squash_tracker.models.match_model import MatchModel, MatchStatus
from squash_tracker.models.standings_model import PoolStandings
from squash_tracker.models.tournament_model import TournamentConfig
from squash_tracker.models.user_model import UserModel
from squash_tracker.repositories.base import Repository

logger = logging.getLogger(__name__)

DATA_DIR = "data"
DATA_FILE = os.path.join(DATA_DIR, "squash.json")

COLLECTIONS = ("users", "tournaments", "matches", "standings", "audit")


class JsonRepository(Repository):
    """
    Keeps every collection in a single JSON document.

    One document means one file replace per transaction, so a match and the
    standings derived from it always land on disk together.
    """

    def __init__(self, data_file_path: str = DATA_FILE):
        self.data_file_path = data_file_path
        self._lock = threading.RLock()
        self._local = threading.local()

        directory = os.path.dirname(self.data_file_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        if not os.path.exists(self.data_file_path):
            self._save_document(self._empty_document())

    @staticmethod
    def _empty_document() -> Dict[str, List[Dict[str, Any]]]:
        return {name: [] for name in COLLECTIONS}

    def _load_document(self) -> Dict[str, List[Dict[str, Any]]]:
        if not os.path.exists(self.data_file_path):
            return self._empty_document()
        with open(self.data_file_path, "r") as f:
            content = f.read()
        if not content:
            return self._empty_document()
        try:
            document = json.loads(content)
        except json.JSONDecodeError:
            logger.error("Could not decode JSON store %s", self.data_file_path)
            raise
        for name in COLLECTIONS:
            document.setdefault(name, [])
        return document

    def _save_document(self, document: Dict[str, List[Dict[str, Any]]]):
        directory = os.path.dirname(os.path.abspath(self.data_file_path))
        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".squash-", suffix=".json")
        try:
            with os.fdopen(fd, "w") as f:
                json.dump(document, f, indent=4)
            os.replace(tmp_path, self.data_file_path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    @contextmanager
    def transaction(self):
        if getattr(self._local, "document", None) is not None:
            yield
            return
        with self._lock:
            self._local.document = self._load_document()
            try:
                yield
                self._save_document(self._local.document)
            finally:
                self._local.document = None

    def _read(self, collection: str) -> List[Dict[str, Any]]:
        document = getattr(self._local, "document", None)
        if document is None:
            document = self._load_document()
        return document[collection]

    def _write(self, collection: str, items: List[Dict[str, Any]]):
        # Callers always hold a transaction.
        self._local.document[collection] = items

    def _upsert(self, collection: str, key: str, item: Dict[str, Any]):
        with self.transaction():
            items = self._read(collection)
            for i, existing in enumerate(items):
                if existing.get(key) == item[key]:
                    items[i] = item
                    break
            else:
                items.append(item)
            self._write(collection, items)

    # --- Users ---

    def get_user(self, login: str) -> Optional[UserModel]:
        for user_dict in self._read("users"):
            if user_dict.get("login") == login:
                return UserModel(**user_dict)
        return None

    def list_users(self) -> List[UserModel]:
        return [UserModel(**u) for u in self._read("users")]

    def save_user(self, user: UserModel) -> UserModel:
        self._upsert("users", "login", user.model_dump(mode="json"))
        return user

    # --- Tournaments ---

    def get_tournament(self, tournament_id: str) -> Optional[TournamentConfig]:
        for tournament_dict in self._read("tournaments"):
            if tournament_dict.get("id") == tournament_id:
                return TournamentConfig(**tournament_dict)
        return None

    def list_tournaments(self) -> List[TournamentConfig]:
        return [TournamentConfig(**t) for t in self._read("tournaments")]

    def save_tournament(self, tournament: TournamentConfig) -> TournamentConfig:
        self._upsert("tournaments", "id", tournament.model_dump(mode="json"))
        return tournament

    # --- Matches ---

    def get_match(self, match_id: str) -> Optional[MatchModel]:
        for match_dict in self._read("matches"):
            if match_dict.get("id") == match_id:
                return MatchModel(**match_dict)
        return None

    def list_matches(self, tournament_id: str) -> List[MatchModel]:
        return [MatchModel(**m) for m in self._read("matches") if m.get("tournament_id") == tournament_id]

    def save_match(self, match: MatchModel) -> MatchModel:
        self._upsert("matches", "id", match.model_dump(mode="json"))
        return match

    def discard_open_matches(self, tournament_id: str) -> int:
        with self.transaction():
            matches = self._read("matches")
            kept = [
                m for m in matches
                if m.get("tournament_id") != tournament_id or m.get("status") == MatchStatus.COMPLETED.value
            ]
            self._write("matches", kept)
        return len(matches) - len(kept)

    # --- Standings ---

    def list_standings(self, tournament_id: str) -> List[PoolStandings]:
        return [PoolStandings(**s) for s in self._read("standings") if s.get("tournament_id") == tournament_id]

    def replace_standings(self, tournament_id: str, pool_id: str, rows: Sequence[PoolStandings]) -> None:
        with self.transaction():
            others = [
                s for s in self._read("standings")
                if not (s.get("tournament_id") == tournament_id and s.get("pool_id") == pool_id)
            ]
            self._write("standings", others + [row.model_dump(mode="json") for row in rows])

    def clear_standings(self, tournament_id: str) -> None:
        with self.transaction():
            self._write("standings", [s for s in self._read("standings") if s.get("tournament_id") != tournament_id])

    # --- Audit ---

    def add_audit_entry(self, entry: AuditLog) -> AuditLog:
        with self.transaction():
            logs = self._read("audit")
            logs.append(entry.model_dump(mode="json"))
            self._write("audit", logs)
        return entry

    def list_audit_entries(self, target_id: Optional[str] = None) -> List[AuditLog]:
        return [
            AuditLog(**a) for a in self._read("audit")
            if target_id is None or a.get("target_id") == target_id
        ]
