"""Application configuration"""
from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./vendorhub.db"
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # CORS
    ALLOWED_ORIGINS: List[str] = ["http://localhost:5173", "http://127.0.0.1:5173"]

    # Rate limiting
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_PER_MINUTE: int = 30

    # Auth tokens
    JWT_SECRET: str = "change-this-secret"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    # Recommendation provider
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_MODEL: str = "gpt-4o"
    RECOMMENDATION_TIMEOUT_SECONDS: float = 8.0

    # Trust score weights
    TRUST_FLAG_WEIGHT: int = 25
    TRUST_BADGE_BONUS: int = 25

    # Seconds a SQLite writer waits for the database lock
    SQLITE_BUSY_TIMEOUT_SECONDS: float = 30.0

    SEED_DEMO_DATA: bool = False

    class Config:
        env_file = ".env"


settings = Settings()
