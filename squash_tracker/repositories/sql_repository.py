import logging
import threading
from contextlib import contextmanager
from typing import List, Optional, Sequence

from sqlalchemy import func
from sqlalchemy.orm import Session

from squash_tracker.core.database import make_engine, make_session_factory
from squash_tracker.models import AuditLogEntry, Base, Match, Standing, Tournament, User
from squash_tracker.models.audit_model import AuditLog
from squash_tracker.models.match_model import MatchModel, MatchStatus
from squash_tracker.models.standings_model import PoolStandings
from squash_tracker.models.tournament_model import TournamentConfig
from squash_tracker.models.user_model import UserModel
from squash_tracker.repositories.base import Repository

logger = logging.getLogger(__name__)


class SqlRepository(Repository):
    """SQLAlchemy-backed store; a transaction is a single session commit."""

    def __init__(self, database_url: Optional[str] = None, engine=None):
        if engine is None:
            if database_url is None:
                raise ValueError("SqlRepository needs a database_url or an engine")
            engine = make_engine(database_url)
        self.engine = engine
        Base.metadata.create_all(bind=self.engine)
        self.SessionLocal = make_session_factory(self.engine)
        self._local = threading.local()

    @contextmanager
    def transaction(self):
        if getattr(self._local, "session", None) is not None:
            yield
            return
        db: Session = self.SessionLocal()
        self._local.session = db
        try:
            yield
            db.commit()
        except Exception:
            db.rollback()
            logger.warning("Rolled back SQL transaction", exc_info=True)
            raise
        finally:
            self._local.session = None
            db.close()

    @contextmanager
    def _session(self):
        with self.transaction():
            yield self._local.session

    @staticmethod
    def _update_row(row, values: dict):
        for key, value in values.items():
            setattr(row, key, value)

    # --- Users ---

    def get_user(self, login: str) -> Optional[UserModel]:
        with self._session() as db:
            user = db.get(User, login)
            return UserModel.model_validate(user) if user else None

    def list_users(self) -> List[UserModel]:
        with self._session() as db:
            return [UserModel.model_validate(u) for u in db.query(User).order_by(User.created_at).all()]

    def save_user(self, user: UserModel) -> UserModel:
        with self._session() as db:
            values = user.model_dump()
            row = db.get(User, user.login)
            if row is None:
                db.add(User(**values))
            else:
                self._update_row(row, values)
            db.flush()
        return user

    # --- Tournaments ---

    def get_tournament(self, tournament_id: str) -> Optional[TournamentConfig]:
        with self._session() as db:
            tournament = db.get(Tournament, tournament_id)
            return TournamentConfig.model_validate(tournament) if tournament else None

    def list_tournaments(self) -> List[TournamentConfig]:
        with self._session() as db:
            return [TournamentConfig.model_validate(t) for t in db.query(Tournament).all()]

    def save_tournament(self, tournament: TournamentConfig) -> TournamentConfig:
        with self._session() as db:
            values = tournament.model_dump()
            # JSON columns only notice reassignment, never in-place edits
            values["participants"] = list(values["participants"])
            row = db.get(Tournament, tournament.id)
            if row is None:
                db.add(Tournament(**values))
            else:
                self._update_row(row, values)
            db.flush()
        return tournament

    # --- Matches ---

    def get_match(self, match_id: str) -> Optional[MatchModel]:
        with self._session() as db:
            match = db.get(Match, match_id)
            return MatchModel.model_validate(match) if match else None

    def list_matches(self, tournament_id: str) -> List[MatchModel]:
        with self._session() as db:
            rows = (
                db.query(Match)
                .filter(Match.tournament_id == tournament_id)
                .order_by(Match.position)
                .all()
            )
            return [MatchModel.model_validate(m) for m in rows]

    def load_pool_matches(self, tournament_id: str, pool_id: str) -> List[MatchModel]:
        with self._session() as db:
            rows = (
                db.query(Match)
                .filter(Match.tournament_id == tournament_id, Match.pool_id == pool_id)
                .order_by(Match.position)
                .all()
            )
            return [MatchModel.model_validate(m) for m in rows]

    def save_match(self, match: MatchModel) -> MatchModel:
        with self._session() as db:
            values = match.model_dump()
            row = db.get(Match, match.id)
            if row is None:
                last = db.query(func.max(Match.position)).scalar()
                db.add(Match(position=(last or 0) + 1, **values))
            else:
                self._update_row(row, values)
            db.flush()
        return match

    def discard_open_matches(self, tournament_id: str) -> int:
        with self._session() as db:
            return (
                db.query(Match)
                .filter(Match.tournament_id == tournament_id, Match.status != MatchStatus.COMPLETED.value)
                .delete()
            )

    # --- Standings ---

    def list_standings(self, tournament_id: str) -> List[PoolStandings]:
        with self._session() as db:
            rows = (
                db.query(Standing)
                .filter(Standing.tournament_id == tournament_id)
                .order_by(Standing.pool_id, Standing.position)
                .all()
            )
            return [PoolStandings.model_validate(s) for s in rows]

    def replace_standings(self, tournament_id: str, pool_id: str, rows: Sequence[PoolStandings]) -> None:
        with self._session() as db:
            db.query(Standing).filter(
                Standing.tournament_id == tournament_id, Standing.pool_id == pool_id
            ).delete()
            for position, row in enumerate(rows):
                db.add(Standing(position=position, **row.model_dump()))
            db.flush()

    def clear_standings(self, tournament_id: str) -> None:
        with self._session() as db:
            db.query(Standing).filter(Standing.tournament_id == tournament_id).delete()

    # --- Audit ---

    def add_audit_entry(self, entry: AuditLog) -> AuditLog:
        with self._session() as db:
            db.add(AuditLogEntry(**entry.model_dump()))
            db.flush()
        return entry

    def list_audit_entries(self, target_id: Optional[str] = None) -> List[AuditLog]:
        with self._session() as db:
            query = db.query(AuditLogEntry)
            if target_id is not None:
                query = query.filter(AuditLogEntry.target_id == target_id)
            return [AuditLog.model_validate(a) for a in query.order_by(AuditLogEntry.seq).all()]
