from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    APP_NAME: str = "String Analyzer Service"

    # Persistence: "sql" uses DATABASE_URL, "memory" keeps records in-process
    DATABASE_URL: str = "sqlite:///./strings.db"
    STORE_BACKEND: Literal["sql", "memory"] = "sql"

    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Logging configuration used by string_analyzer.logging
    LOG_LEVEL: str = "INFO"
    CONSOLE_LOG_LEVEL: str = "INFO"
    LOG_COLOR: bool = True
    SLOW_QUERY_THRESHOLD_MS: int = 200

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
