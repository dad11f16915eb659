# backend/creatoraide/config.py
import os
from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings


def _get_version() -> str:
    """Get version from APP_VERSION env var, VERSION file, or fallback to 'dev'."""
    if (version := os.environ.get("APP_VERSION")) and version != "dev":
        return version

    version_file = os.path.join(os.path.dirname(os.path.dirname(__file__)), "VERSION")
    try:
        with open(version_file) as f:
            if version := f.read().strip():
                return version
    except (FileNotFoundError, IOError):
        pass

    return "dev"


class Settings(BaseSettings):
    # Application version (from APP_VERSION env, VERSION file, or "dev")
    app_version: str = _get_version()
    git_commit: str = os.environ.get("GIT_COMMIT", "dev")

    # App
    app_name: str = "CreatorAIDE"
    debug: bool = True
    log_level: str = "INFO"
    cors_origins: List[str] = ["http://localhost:5173", "http://localhost:3000"]

    # Database
    database_url: str = "sqlite:///./creatoraide.db"

    # Redis
    redis_url: str = "redis://redis:6379/0"

    # Onboarding progress persistence: "database", "redis" or "memory"
    progress_backend: str = "database"
    progress_key_prefix: str = "onboarding-progress-"

    # Where onboarding notifications go: "database" (notification inbox) or "log"
    notification_sink: str = "database"

    # JWT (tokens are issued by the identity provider, only decoded here)
    jwt_secret_key: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"

    class Config:
        env_file = ".env"


@lru_cache
def get_settings() -> Settings:
    return Settings()
