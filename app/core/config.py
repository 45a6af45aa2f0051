"""
Application configuration using Pydantic Settings.

Loads configuration from environment variables (.env file).
"""

from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Project Info
    PROJECT_NAME: str = "Task Tracker API"
    VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"  # development, staging, production

    LOG_LEVEL: str = "INFO"

    # Redis
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    REDIS_PASSWORD: str = ""
    REDIS_DB: int = 0
    REDIS_POOL_SIZE: int = 10
    REDIS_SOCKET_TIMEOUT: float = 5.0

    # Sessions
    SESSION_DURATION_DAYS: int = 7
    SESSION_COOKIE_NAME: str = "session"
    SESSION_SECURE: bool = False
    SESSION_HTTP_ONLY: bool = True

    # Security
    BCRYPT_ROUNDS: int = 12
    RATE_LIMIT: int = 1000  # requests per minute per IP, 0 disables
    ENABLE_CORS: bool = True
    FRONTEND_URL: str = "http://localhost:3000"

    # Soft-delete lifecycle
    TASK_RETENTION_DAYS: int = 7
    CLEANUP_INTERVAL_SECONDS: int = 3600  # 0 disables the background sweep

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    @property
    def session_ttl_seconds(self) -> int:
        return self.SESSION_DURATION_DAYS * 24 * 60 * 60

    @property
    def allowed_origins(self) -> List[str]:
        return [self.FRONTEND_URL]


# Global settings instance
settings = Settings()
