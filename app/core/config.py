"""
Configuration settings for the application
"""

import os
from typing import List
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """Application settings"""

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./social_events.db")
    USE_FIREBASE: bool = os.getenv("USE_FIREBASE", "false").lower() in ("1", "true", "yes")
    FIREBASE_CREDENTIALS_JSON: str | None = os.getenv("FIREBASE_CREDENTIALS_JSON")
    FIREBASE_CREDENTIALS_FILE: str | None = os.getenv("FIREBASE_CREDENTIALS_FILE")
    FIREBASE_CREDENTIALS_B64: str | None = os.getenv("FIREBASE_CREDENTIALS_B64")
    EVENTS_COLLECTION: str = os.getenv("EVENTS_COLLECTION", "events")

    # Security
    FIREBASE_CHECK_REVOKED: bool = os.getenv("FIREBASE_CHECK_REVOKED", "false").lower() in ("1", "true", "yes")

    # CORS
    ALLOW_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://localhost:8000",
    ]

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Client data layer
    API_BASE_URL: str = os.getenv("API_BASE_URL", "http://localhost:8000")
    STATIC_EVENTS_FILE: str = os.getenv("STATIC_EVENTS_FILE", "static/eventsData.json")
    CLIENT_TIMEOUT: float = float(os.getenv("CLIENT_TIMEOUT", "10"))

    class Config:
        env_file = ".env"

settings = Settings()
