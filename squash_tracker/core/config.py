import logging

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    SECRET_KEY: str = "YOUR_SECRET_KEY_HERE"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 12

    STORAGE_BACKEND: str = "json"  # "json" or "sql"
    DATA_DIR: str = "data"
    DATABASE_URL: str = "sqlite:///./squash.db"

    LOG_LEVEL: str = "INFO"
    SEED_DEMO_USERS: bool = False

    class Config:
        env_file = ".env"


settings = Settings()


def configure_logging(level: str = settings.LOG_LEVEL) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
