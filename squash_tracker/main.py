import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from squash_tracker import __version__
from squash_tracker.api.endpoints import auth as auth_endpoints
from squash_tracker.api.endpoints import matches as match_endpoints
from squash_tracker.api.endpoints import tournaments as tournament_endpoints
from squash_tracker.api.endpoints import users as user_endpoints
from squash_tracker.core.config import Settings, configure_logging, settings as default_settings
from squash_tracker.core.exceptions import (
    DuplicateError,
    NotFoundError,
    PreconditionFailedError,
    ScoreValidationError,
)
from squash_tracker.repositories import Repository, create_repository
from squash_tracker.services.user_service import UserService

logger = logging.getLogger(__name__)


def _error_handler(status_code: int):
    async def handler(request: Request, exc: Exception):
        return JSONResponse(status_code=status_code, content={"detail": str(exc)})

    return handler


def create_app(settings: Optional[Settings] = None, repository: Optional[Repository] = None) -> FastAPI:
    settings = settings or default_settings
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(title="Squash Tournament API", version=__version__)
    # One storage backend for the life of the process
    app.state.repository = repository or create_repository(settings)

    if settings.SEED_DEMO_USERS:
        UserService(app.state.repository).seed_demo_users()

    app.include_router(auth_endpoints.router, prefix="/auth", tags=["Authentication"])
    app.include_router(user_endpoints.router, prefix="/users", tags=["Users"])
    app.include_router(tournament_endpoints.router, prefix="/tournaments", tags=["Tournaments"])
    app.include_router(match_endpoints.router, prefix="/matches", tags=["Matches"])

    # Most specific class wins, so ValueError only catches what is left over.
    app.add_exception_handler(NotFoundError, _error_handler(status.HTTP_404_NOT_FOUND))
    app.add_exception_handler(PreconditionFailedError, _error_handler(status.HTTP_409_CONFLICT))
    app.add_exception_handler(DuplicateError, _error_handler(status.HTTP_409_CONFLICT))
    app.add_exception_handler(ScoreValidationError, _error_handler(status.HTTP_400_BAD_REQUEST))
    app.add_exception_handler(PermissionError, _error_handler(status.HTTP_403_FORBIDDEN))
    app.add_exception_handler(ValueError, _error_handler(status.HTTP_400_BAD_REQUEST))

    @app.get("/")
    async def root():
        return {"message": "Squash Tournament API", "version": __version__}

    logger.info("Squash Tournament API ready (storage=%s)", settings.STORAGE_BACKEND)
    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("squash_tracker.main:create_app", factory=True, host="0.0.0.0", port=8000, reload=True)
