import os
from pydantic_settings import BaseSettings
from typing import List

class Settings(BaseSettings):
    """Application settings."""
    # Base settings
    DEBUG: bool = False
    APP_NAME: str = "LetsChat API"
    CLIENT_URL: str = os.getenv("CLIENT_URL", "http://localhost:5173")

    # CORS settings
    CORS_ORIGINS: List[str] = [
        "http://localhost:5173",  # Frontend development server
        "http://localhost:8000",  # Backend server
    ]

    # Firebase settings
    FIREBASE_ENABLED: bool = os.getenv("FIREBASE_ENABLED", "false").lower() == "true"
    # Explicit Firebase Admin SDK credentials JSON path
    FIREBASE_SERVICE_ACCOUNT_JSON: str = os.getenv("FIREBASE_SERVICE_ACCOUNT_JSON", "./firebase-service-account.json")

    # Database settings
    DB_HOST: str = os.getenv("DB_HOST", "localhost")
    DB_PORT: str = os.getenv("DB_PORT", "5432")
    DB_USER: str = os.getenv("DB_USER", "postgres")
    DB_PASSWORD: str = os.getenv("DB_PASSWORD", "postgres")
    DB_NAME: str = os.getenv("DB_NAME", "letschat")
    DATABASE_URL: str = os.getenv(
        "DATABASE_URL",
        f"postgresql://{DB_USER}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}"
    )

    # Redis settings (rate limiting storage)
    REDIS_HOST: str = os.getenv("REDIS_HOST", "localhost")
    REDIS_PORT: int = int(os.getenv("REDIS_PORT", "6379"))
    RATE_LIMIT_ENABLED: bool = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"

    # Email settings
    EMAIL_PROVIDER: str = os.getenv("EMAIL_PROVIDER", "logging")  # mailgun | logging
    EMAIL_FROM: str = os.getenv("EMAIL_FROM", "hello@letschat.app")
    EMAIL_FROM_NAME: str = os.getenv("EMAIL_FROM_NAME", "LetsChat")

    # Mailgun settings
    MAILGUN_API_KEY: str = os.getenv("MAILGUN_API_KEY", "")
    MAILGUN_DOMAIN: str = os.getenv("MAILGUN_DOMAIN", "letschat.app")
    MAILGUN_BASE_URL: str = os.getenv("MAILGUN_BASE_URL", "https://api.mailgun.net")

    class Config:
        env_file = ".env"
        case_sensitive = True

# Create settings instance
settings = Settings()
