from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from squash_tracker.api.dependencies import get_tournament_service
from squash_tracker.core.config import Settings
from squash_tracker.main import create_app
from squash_tracker.repositories.json_repository import JsonRepository
from squash_tracker.services.tournament_service import TournamentService

PLAYERS = ["alice", "bob", "carol", "dave"]


@pytest.fixture
def app(tmp_path):
    settings = Settings(STORAGE_BACKEND="json", DATA_DIR=str(tmp_path), SEED_DEMO_USERS=False)
    return create_app(settings=settings, repository=JsonRepository(data_file_path=str(tmp_path / "squash.json")))


@pytest.fixture
def client(app):
    return TestClient(app)


def auth_headers(client: TestClient, login: str) -> dict:
    response = client.post("/auth/register", json={"login": login, "display_name": login.title()})
    if response.status_code == 409:
        response = client.post("/auth/login", json={"login": login})
    token = response.json()["access_token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def organizer_headers(client):
    return auth_headers(client, "organizer")


@pytest.fixture
def active_tournament(client, organizer_headers):
    response = client.post(
        "/tournaments",
        json={"title": "Club Night", "participants": PLAYERS, "rules": {"points_per_game": 11, "best_of": 3}},
        headers=organizer_headers,
    )
    tournament_id = response.json()["id"]
    client.post(f"/tournaments/{tournament_id}/schedule", headers=organizer_headers)
    return tournament_id


class TestAuthRoutes:

    def test_register_login_and_me(self, client: TestClient):
        response = client.post("/auth/register", json={"login": "jsmith", "display_name": "Jane Smith", "club": "Riverside"})
        assert response.status_code == 201
        assert response.json()["token_type"] == "bearer"

        response = client.post("/auth/login", json={"login": "jsmith"})
        assert response.status_code == 200
        token = response.json()["access_token"]

        me = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert me.status_code == 200
        assert me.json()["club"] == "Riverside"

    def test_duplicate_registration(self, client: TestClient):
        client.post("/auth/register", json={"login": "jsmith", "display_name": "Jane"})
        response = client.post("/auth/register", json={"login": "jsmith", "display_name": "Jane"})
        assert response.status_code == 409

    def test_unknown_login(self, client: TestClient):
        assert client.post("/auth/login", json={"login": "ghost"}).status_code == 404

    def test_bad_token(self, client: TestClient):
        response = client.get("/auth/me", headers={"Authorization": "Bearer not-a-token"})
        assert response.status_code == 401


class TestTournamentRoutes:

    def test_create_tournament(self, client: TestClient, organizer_headers):
        response = client.post("/tournaments", json={"title": "Club Night"}, headers=organizer_headers)
        assert response.status_code == 201
        data = response.json()
        assert data["admin_login"] == "organizer"
        assert data["status"] == "Draft"
        assert data["rules"] == {"points_per_game": 11, "best_of": 3, "must_win_by_two": True}

    def test_create_requires_login(self, client: TestClient):
        assert client.post("/tournaments", json={"title": "Club Night"}).status_code == 401

    def test_invalid_rules(self, client: TestClient, organizer_headers):
        response = client.post("/tournaments", json={"title": "Club Night", "rules": {"best_of": 4}}, headers=organizer_headers)
        assert response.status_code == 422

    def test_get_tournament_not_found(self, client: TestClient):
        assert client.get("/tournaments/missing").status_code == 404

    def test_schedule_and_standings(self, client: TestClient, active_tournament):
        tournament = client.get(f"/tournaments/{active_tournament}").json()
        assert tournament["status"] == "Active"

        matches = client.get(f"/tournaments/{active_tournament}/matches").json()
        assert len(matches) == 6

        standings = client.get(f"/tournaments/{active_tournament}/standings").json()
        assert list(standings["pools"]) == ["Pool A"]
        assert sorted(r["login"] for r in standings["pools"]["Pool A"]) == sorted(PLAYERS)

    def test_schedule_twice_conflicts(self, client: TestClient, active_tournament, organizer_headers):
        response = client.post(f"/tournaments/{active_tournament}/schedule", headers=organizer_headers)
        assert response.status_code == 409

    def test_schedule_by_non_admin_is_forbidden(self, client: TestClient, organizer_headers):
        tournament_id = client.post(
            "/tournaments", json={"title": "Club Night", "participants": PLAYERS}, headers=organizer_headers
        ).json()["id"]
        response = client.post(f"/tournaments/{tournament_id}/schedule", headers=auth_headers(client, "bob"))
        assert response.status_code == 403

    def test_join_and_status(self, client: TestClient, organizer_headers):
        tournament_id = client.post("/tournaments", json={"title": "Club Night"}, headers=organizer_headers).json()["id"]
        joined = client.post(f"/tournaments/{tournament_id}/join", headers=auth_headers(client, "alice"))
        assert joined.json()["participants"] == ["alice"]

        response = client.patch(f"/tournaments/{tournament_id}/status", json={"status": "Completed"}, headers=organizer_headers)
        assert response.status_code == 409

    def test_audit_trail(self, client: TestClient, active_tournament, organizer_headers):
        entries = client.get(f"/tournaments/{active_tournament}/audit", headers=organizer_headers).json()
        assert [e["details"] for e in entries][-1] == "Generated schedule"


class TestMatchRoutes:

    def test_score_completes_match_and_updates_standings(self, client: TestClient, active_tournament, organizer_headers):
        match = client.get(f"/tournaments/{active_tournament}/matches").json()[0]
        response = client.put(
            f"/matches/{match['id']}/score",
            json={"scores": [{"player_a_score": 11, "player_b_score": 3}, {"player_a_score": 11, "player_b_score": 7}]},
            headers=organizer_headers,
        )
        assert response.status_code == 200
        body = response.json()
        assert body["match"]["status"] == "COMPLETED"
        assert body["match"]["winner_login"] == match["player_a_login"]

        rows = {r["login"]: r for r in client.get(f"/tournaments/{active_tournament}/standings").json()["pools"]["Pool A"]}
        assert rows[match["player_a_login"]]["points_diff"] == 12
        assert rows[match["player_b_login"]]["matches_lost"] == 1

    def test_player_scores_own_match(self, client: TestClient, active_tournament):
        match = client.get(f"/tournaments/{active_tournament}/matches").json()[0]
        response = client.put(
            f"/matches/{match['id']}/score",
            json={"scores": [{"player_a_score": 11, "player_b_score": 9}]},
            headers=auth_headers(client, match["player_b_login"]),
        )
        assert response.status_code == 200
        assert response.json()["match"]["status"] == "IN_PROGRESS"

    def test_outsider_cannot_score(self, client: TestClient, active_tournament):
        match = client.get(f"/tournaments/{active_tournament}/matches").json()[0]
        response = client.put(
            f"/matches/{match['id']}/score",
            json={"scores": [{"player_a_score": 11, "player_b_score": 9}]},
            headers=auth_headers(client, "stranger"),
        )
        assert response.status_code == 403

    def test_negative_scores_are_rejected(self, client: TestClient, active_tournament, organizer_headers):
        match = client.get(f"/tournaments/{active_tournament}/matches").json()[0]
        response = client.put(
            f"/matches/{match['id']}/score",
            json={"scores": [{"player_a_score": -1, "player_b_score": 9}]},
            headers=organizer_headers,
        )
        assert response.status_code == 422

    def test_conflicting_scores(self, client: TestClient, active_tournament, organizer_headers):
        match = client.get(f"/tournaments/{active_tournament}/matches").json()[0]
        games = [{"player_a_score": 11, "player_b_score": 0}] * 2 + [{"player_a_score": 0, "player_b_score": 11}] * 2
        response = client.put(f"/matches/{match['id']}/score", json={"scores": games}, headers=organizer_headers)
        assert response.status_code == 400

    def test_unknown_match(self, client: TestClient, organizer_headers):
        response = client.put("/matches/missing/score", json={"scores": []}, headers=organizer_headers)
        assert response.status_code == 404

    def test_preview(self, client: TestClient, active_tournament, organizer_headers):
        match = client.get(f"/tournaments/{active_tournament}/matches").json()[0]
        response = client.post(
            f"/matches/{match['id']}/preview",
            json={"scores": [{"player_a_score": 11, "player_b_score": 3}]},
            headers=organizer_headers,
        )
        assert response.json() == {"games_won_by_a": 1, "games_won_by_b": 0, "winner": None, "conflict": False}
        assert client.get(f"/matches/{match['id']}").json()["status"] == "SCHEDULED"


class TestRoutesWithMockedService:

    def test_list_tournaments_uses_service(self, app, client: TestClient):
        mock_service = MagicMock(spec=TournamentService)
        mock_service.list_tournaments.return_value = []
        app.dependency_overrides[get_tournament_service] = lambda: mock_service

        response = client.get("/tournaments")

        assert response.status_code == 200
        assert response.json() == []
        mock_service.list_tournaments.assert_called_once_with()


class TestUserRoutes:

    def test_profile_update_and_stats(self, client: TestClient):
        headers = auth_headers(client, "jsmith")
        response = client.put("/users/jsmith", json={"ranking": 1350}, headers=headers)
        assert response.status_code == 200
        assert response.json()["ranking"] == 1350

        stats = client.get("/users/jsmith/stats").json()
        assert stats["matches_played"] == 0
        assert stats["win_percentage"] == 0.0

    def test_update_someone_else(self, client: TestClient):
        auth_headers(client, "jsmith")
        response = client.put("/users/jsmith", json={"club": "Elsewhere"}, headers=auth_headers(client, "bjones"))
        assert response.status_code == 403
