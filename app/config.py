"""
Application settings for the GreenRewards backend.
"""
from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite:///./data/greenrewards.db"

    # Security
    SECRET_KEY: str = "your-secret-key-change-in-production"
    SESSION_MAX_AGE: int = 7 * 24 * 60 * 60

    # Environment
    ENVIRONMENT: str = "development"
    DEBUG: bool = False

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:5173"]

    # File storage
    DATA_DIR: str = "./data"

    # Visitor identity cookie
    VISITOR_COOKIE_NAME: str = "visitorId"
    VISITOR_COOKIE_MAX_AGE: int = 365 * 24 * 60 * 60

    # Rewards policy
    MIN_WITHDRAWAL_POINTS: int = 500
    ENFORCE_FORWARD_ONLY_TRANSITIONS: bool = False

    # Donations
    RECENT_DONATIONS_LIMIT: int = 10

    # LLM (receipt OCR)
    LLM_API_KEY: str = ""
    LLM_BASE_URL: str = ""
    LLM_MODEL: str = "gpt-4o"
    LLM_MAX_TOKENS: int = 500

    # Demo data
    SEED_DEMO_DATA: bool = False
    ADMIN_USERNAME: str = ""
    ADMIN_PASSWORD: str = ""

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
