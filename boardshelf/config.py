# boardshelf/config.py
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DATABASE_URL: str

    # Pool tuning (ignored for SQLite)
    DB_POOL_SIZE: int = 4
    DB_MAX_CONNECTIONS: int = 20
    DB_POOL_TIMEOUT: float = 10.0
    DB_POOL_RECYCLE: int = 1800

    DB_QUERY_TIMEOUT: float = 10.0
    DB_HEALTH_CHECK_INTERVAL: int = 30
    DB_MAX_RETRIES: int = 5
    DB_RETRY_BACKOFF: float = 1.0
    DB_ECHO: bool = False

    ORIGIN: str = "http://localhost:3000"
    LOG_LEVEL: str = "INFO"

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")

    @property
    def max_overflow(self) -> int:
        return max(0, self.DB_MAX_CONNECTIONS - self.DB_POOL_SIZE)


@lru_cache
def get_settings() -> Settings:
    return Settings()
