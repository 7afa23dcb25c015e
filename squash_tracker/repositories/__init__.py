import logging
import os

from squash_tracker.core.config import Settings
from squash_tracker.repositories.base import Repository
from squash_tracker.repositories.json_repository import JsonRepository
from squash_tracker.repositories.sql_repository import SqlRepository

logger = logging.getLogger(__name__)

__all__ = ["Repository", "JsonRepository", "SqlRepository", "create_repository"]


def create_repository(settings: Settings) -> Repository:
    backend = settings.STORAGE_BACKEND.lower()
    if backend == "json":
        path = os.path.join(settings.DATA_DIR, "squash.json")
        logger.info("Using JSON storage at %s", path)
        return JsonRepository(data_file_path=path)
    if backend == "sql":
        logger.info("Using SQL storage at %s", settings.DATABASE_URL)
        return SqlRepository(database_url=settings.DATABASE_URL)
    raise ValueError(f"Unknown STORAGE_BACKEND {settings.STORAGE_BACKEND!r}; expected 'json' or 'sql'")
