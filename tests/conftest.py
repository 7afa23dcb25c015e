import pytest

from squash_tracker.models.user_model import UserModel, UserRole
from squash_tracker.repositories.json_repository import JsonRepository
from squash_tracker.repositories.sql_repository import SqlRepository



@pytest.fixture
def json_repository(tmp_path):
    return JsonRepository(data_file_path=str(tmp_path / "squash.json"))


@pytest.fixture
def sql_repository():
    return SqlRepository(database_url="sqlite://")


@pytest.fixture(params=["json", "sql"])
def repository(request, tmp_path):
    if request.param == "json":
        return JsonRepository(data_file_path=str(tmp_path / "squash.json"))
    return SqlRepository(database_url="sqlite://")


@pytest.fixture
def organizer():
    return UserModel(login="organizer", display_name="Tournament Organizer")


@pytest.fixture
def site_admin():
    return UserModel(login="admin", display_name="AdminUser", role=UserRole.ADMIN)


@pytest.fixture
def outsider():
    return UserModel(login="outsider", display_name="Not Involved")
