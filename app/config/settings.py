# app/config/settings.py
# Runtime configuration read from the environment (.env supported)

import os
from typing import List

from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Application settings"""

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./maintenance_service.db")
    DB_SSLMODE: str = os.getenv("DB_SSLMODE", "require")

    # JWT verification
    SECRET_KEY: str = os.getenv("SECRET_KEY", "change-me")
    ALGORITHM: str = os.getenv("ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 60 * 24))

    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development").lower()

    # Outbound mail
    EMAIL_HOST: str = os.getenv("EMAIL_HOST", "smtp.gmail.com")
    EMAIL_PORT: int = int(os.getenv("EMAIL_PORT", 587))
    EMAIL_USER: str = os.getenv("EMAIL_USER", "")
    EMAIL_PASS: str = os.getenv("EMAIL_PASS", "")
    EMAIL_FROM: str = os.getenv("EMAIL_FROM", "noreply@facilities-service.com")
    EMAIL_TIMEOUT: float = float(os.getenv("EMAIL_TIMEOUT", 10))
    FRONTEND_URL: str = os.getenv("FRONTEND_URL", "http://localhost:3000")

    # Reminder scheduling
    SCHEDULER_ENABLED: bool = os.getenv("SCHEDULER_ENABLED", "true").lower() == "true"
    REMINDER_HOUR: int = int(os.getenv("REMINDER_HOUR", 9))
    REMINDER_MINUTE: int = int(os.getenv("REMINDER_MINUTE", 0))
    REMINDER_INTERVAL_MINUTES: int = int(os.getenv("REMINDER_INTERVAL_MINUTES", 30))
    REMINDER_WINDOW_DAYS: int = int(os.getenv("REMINDER_WINDOW_DAYS", 7))
    REMINDER_LOOKBACK_DAYS: int = int(os.getenv("REMINDER_LOOKBACK_DAYS", 1))
    REMINDER_SEND_DELAY: float = float(os.getenv("REMINDER_SEND_DELAY", 1.0))

    CORS_ORIGINS: List[str] = [
        origin.strip()
        for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")
        if origin.strip()
    ]

    @classmethod
    def is_production(cls) -> bool:
        return cls.ENVIRONMENT == "production"


settings = Settings()
