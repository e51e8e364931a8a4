"""
Application Configuration Settings
"""

from pydantic_settings import BaseSettings
from typing import List
from datetime import datetime
import os


class Settings(BaseSettings):
    """Application settings"""

    # Application
    APP_NAME: str = "Procurement Approval System"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Database
    DATABASE_URL: str = "sqlite:///./procurement.db"
    SEED_DEMO_DATA: bool = True

    # JWT
    SECRET_KEY: str = "change-me-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 12
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:8000"  # Comma-separated string

    @property
    def cors_origins_list(self) -> List[str]:
        """Convert comma-separated string to list"""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "logs/app.log"

    # Procurement
    DEFAULT_CURRENCY: str = "IDR"
    DOCUMENT_YEAR: int = datetime.utcnow().year  # PR-<year>-0001, PO-<year>-0001, RFQ-<year>-001
    DEFAULT_PO_TERMS: str = "Standard terms"

    class Config:
        env_file = ".env"
        case_sensitive = True


# Create settings instance
settings = Settings()


os.makedirs("logs", exist_ok=True)
