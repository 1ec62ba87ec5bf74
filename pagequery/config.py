from functools import lru_cache
from typing import Any, Optional
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_parse_none_str="none",
    )

    # Database
    DATABASE_URL: str = "postgresql+asyncpg://postgres:postgres@db:5432/pagequery"
    # Isolation level pinned for the count-and-fetch transaction (None keeps the engine default)
    SNAPSHOT_ISOLATION_LEVEL: Optional[str] = "REPEATABLE READ"

    # Pagination
    DEFAULT_PAGE_SIZE: int = 20

    # API
    API_TITLE: str = "PageQuery API"
    API_VERSION: str = "1.0.0"
    LOG_LEVEL: str = "info"

    # CORS
    CORS_ORIGINS: list[str] = ["http://localhost:3000"]

    # Environment
    ENV: str = "development"

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: Any) -> list[str]:
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",")]
        elif isinstance(v, list):
            return v
        return []

    @field_validator("DEFAULT_PAGE_SIZE")
    @classmethod
    def check_default_page_size(cls, v: int) -> int:
        if v < 1:
            raise ValueError("DEFAULT_PAGE_SIZE must be a positive integer")
        return v


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
