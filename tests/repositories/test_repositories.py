from datetime import datetime, timezone

import pytest

from squash_tracker.core.config import Settings
from squash_tracker.models.audit_model import AuditAction, AuditLog, AuditTargetType
from squash_tracker.models.match_model import GameScore, MatchModel, MatchStatus
from squash_tracker.models.standings_model import PoolStandings
from squash_tracker.models.tournament_model import TournamentConfig
from squash_tracker.models.user_model import UserModel
from squash_tracker.repositories import create_repository
from squash_tracker.repositories.json_repository import JsonRepository
from squash_tracker.repositories.sql_repository import SqlRepository

FIXED_NOW = datetime(2024, 3, 1, 18, 30, tzinfo=timezone.utc)


def make_match(match_id, a="p1", b="p2", **kwargs):
    return MatchModel(id=match_id, tournament_id="t1", pool_id="Pool A", player_a_login=a, player_b_login=b, **kwargs)


def completed(match_id, a="p1", b="p2"):
    return make_match(
        match_id, a, b,
        scores=[GameScore(player_a_score=11, player_b_score=4), GameScore(player_a_score=11, player_b_score=9)],
        status=MatchStatus.COMPLETED,
        winner_login=a,
        completed_at=FIXED_NOW,
    )


@pytest.fixture
def stored_tournament(repository):
    return repository.save_tournament(
        TournamentConfig(id="t1", title="Storage Cup", admin_login="organizer", participants=["p1", "p2", "p3"])
    )


class TestRepository:

    def test_user_round_trip(self, repository):
        user = UserModel(login="jsmith", display_name="Jane Smith", handedness="Right", created_at=FIXED_NOW)
        repository.save_user(user)
        assert repository.get_user("jsmith") == user
        assert repository.get_user("ghost") is None

        repository.save_user(user.model_copy(update={"club": "Riverside"}))
        assert repository.get_user("jsmith").club == "Riverside"
        assert len(repository.list_users()) == 1

    def test_tournament_round_trip(self, repository, stored_tournament):
        loaded = repository.get_tournament("t1")
        assert loaded == stored_tournament
        assert loaded.start_date.tzinfo is not None
        assert repository.get_tournament("missing") is None

    def test_matches_keep_save_order(self, repository, stored_tournament):
        for match_id in ("m3", "m1", "m2"):
            repository.save_match(make_match(match_id))
        repository.save_match(completed("m1"))
        assert [m.id for m in repository.list_matches("t1")] == ["m3", "m1", "m2"]
        assert repository.get_match("m1").completed_at == FIXED_NOW

    def test_load_pool_matches(self, repository, stored_tournament):
        repository.save_match(make_match("m1"))
        repository.save_match(MatchModel(id="m2", tournament_id="t1", pool_id="Pool B", player_a_login="p3", player_b_login="p4"))
        assert [m.id for m in repository.load_pool_matches("t1", "Pool B")] == ["m2"]

    def test_discard_open_matches(self, repository, stored_tournament):
        repository.save_match(make_match("m1"))
        repository.save_match(completed("m2", "p1", "p3"))
        repository.save_match(make_match("m3", "p2", "p3", scores=[GameScore(player_a_score=3)], status=MatchStatus.IN_PROGRESS))

        assert repository.discard_open_matches("t1") == 2
        assert [m.id for m in repository.list_matches("t1")] == ["m2"]

    def test_replace_standings(self, repository, stored_tournament):
        first = [PoolStandings(login=p, tournament_id="t1", pool_id="Pool A") for p in ("p1", "p2")]
        other_pool = [PoolStandings(login="p9", tournament_id="t1", pool_id="Pool B")]
        repository.replace_standings("t1", "Pool A", first)
        repository.replace_standings("t1", "Pool B", other_pool)

        second = [PoolStandings(login="p2", tournament_id="t1", pool_id="Pool A", matches_won=1, matches_played=1)]
        repository.replace_standings("t1", "Pool A", second)

        rows = repository.list_standings("t1")
        assert {(r.pool_id, r.login) for r in rows} == {("Pool A", "p2"), ("Pool B", "p9")}

        repository.clear_standings("t1")
        assert repository.list_standings("t1") == []

    def test_replace_standings_twice_in_one_transaction(self, repository, stored_tournament):
        rows = [PoolStandings(login="p1", tournament_id="t1", pool_id="Pool A")]
        with repository.transaction():
            repository.replace_standings("t1", "Pool A", rows)
            repository.replace_standings("t1", "Pool A", [rows[0].model_copy(update={"matches_won": 1})])
        assert [r.matches_won for r in repository.list_standings("t1")] == [1]

    def test_audit_entries_in_insertion_order(self, repository):
        for target in ("m1", "t1", "m1"):
            repository.add_audit_entry(
                AuditLog(actor_login="organizer", action=AuditAction.UPDATE, target_type=AuditTargetType.MATCH, target_id=target)
            )
        assert [e.target_id for e in repository.list_audit_entries()] == ["m1", "t1", "m1"]
        assert len(repository.list_audit_entries("m1")) == 2

    def test_transaction_is_all_or_nothing(self, repository, stored_tournament):
        repository.save_match(make_match("m1"))

        with pytest.raises(RuntimeError):
            with repository.transaction():
                repository.save_match(completed("m1"))
                repository.replace_standings(
                    "t1", "Pool A", [PoolStandings(login="p1", tournament_id="t1", pool_id="Pool A", matches_won=1)]
                )
                raise RuntimeError("write failed")

        assert repository.get_match("m1").status == MatchStatus.SCHEDULED
        assert repository.list_standings("t1") == []

    def test_writes_in_a_transaction_are_visible_inside_it(self, repository, stored_tournament):
        with repository.transaction():
            repository.save_match(make_match("m1"))
            assert repository.get_match("m1") is not None
        assert repository.get_match("m1") is not None


class TestJsonRepository:

    def test_data_survives_a_new_instance(self, tmp_path):
        path = str(tmp_path / "nested" / "squash.json")
        JsonRepository(data_file_path=path).save_user(UserModel(login="jsmith", display_name="Jane"))
        assert JsonRepository(data_file_path=path).get_user("jsmith").display_name == "Jane"

    def test_empty_file_is_an_empty_store(self, tmp_path):
        path = tmp_path / "squash.json"
        path.write_text("")
        assert JsonRepository(data_file_path=str(path)).list_users() == []

    def test_corrupt_file_is_reported(self, tmp_path):
        path = tmp_path / "squash.json"
        path.write_text("{not json")
        with pytest.raises(ValueError):
            JsonRepository(data_file_path=str(path)).list_users()


class TestCreateRepository:

    def test_json_backend(self, tmp_path):
        repository = create_repository(Settings(STORAGE_BACKEND="json", DATA_DIR=str(tmp_path)))
        assert isinstance(repository, JsonRepository)
        assert repository.data_file_path == str(tmp_path / "squash.json")

    def test_sql_backend(self):
        repository = create_repository(Settings(STORAGE_BACKEND="sql", DATABASE_URL="sqlite://"))
        assert isinstance(repository, SqlRepository)

    def test_unknown_backend(self):
        with pytest.raises(ValueError, match="mongo"):
            create_repository(Settings(STORAGE_BACKEND="mongo"))
