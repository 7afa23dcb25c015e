from fastapi import Depends, HTTPException, Request, status

from squash_tracker.core import security
from squash_tracker.models.user_model import UserModel
from squash_tracker.repositories.base import Repository
from squash_tracker.services.audit_service import AuditService
from squash_tracker.services.match_service import MatchService
from squash_tracker.services.schedule_service import ScheduleService
from squash_tracker.services.tournament_service import TournamentService
from squash_tracker.services.user_service import UserService


def get_repository(request: Request) -> Repository:
    # Chosen once at startup, see squash_tracker.main.create_app
    return request.app.state.repository


def get_audit_service(repository: Repository = Depends(get_repository)) -> AuditService:
    return AuditService(repository)


def get_user_service(repository: Repository = Depends(get_repository)) -> UserService:
    return UserService(repository)


def get_tournament_service(repository: Repository = Depends(get_repository)) -> TournamentService:
    return TournamentService(repository)


def get_schedule_service(repository: Repository = Depends(get_repository)) -> ScheduleService:
    return ScheduleService(repository)


def get_match_service(repository: Repository = Depends(get_repository)) -> MatchService:
    return MatchService(repository)


def get_current_user(
    token: str = Depends(security.oauth2_scheme),
    repository: Repository = Depends(get_repository),
) -> UserModel:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    login = security.verify_token(token, credentials_exception)
    user = repository.get_user(login)
    if user is None:
        raise credentials_exception
    return user
