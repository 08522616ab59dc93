"""
Configuration management using Pydantic Settings
"""
from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Security (required, the process refuses to start without it)
    JWT_SECRET: str
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRE_MINUTES: int = 60

    # Database
    DATABASE_URL: str = "sqlite:///./quizzard.db"

    # Redis (optional question cache backend)
    REDIS_URL: Optional[str] = None

    # Application
    APP_NAME: str = "Quizzard Backend"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    PORT: int = 5005
    API_PREFIX: str = "/api"
    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:5173"]

    # Open Trivia DB
    TRIVIA_API_URL: str = "https://opentdb.com/api.php"
    TRIVIA_TOKEN_URL: str = "https://opentdb.com/api_token.php"
    TRIVIA_TIMEOUT: float = 10.0
    TRIVIA_QUESTION_COUNT: int = 10
    TRIVIA_MIN_REQUEST_INTERVAL: float = 2.0  # seconds between upstream calls
    TRIVIA_TOKEN_TTL: int = 21600  # 6 hours

    # Question cache and backoff
    QUESTION_CACHE_TTL: int = 1800  # 30 minutes
    BACKOFF_BASE_SECONDS: float = 1.0
    BACKOFF_MAX_SECONDS: float = 30.0

    # Logging
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = True


# Global settings instance
settings = Settings()
