"""
Configuration management for the Auth Service
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional


LOCAL_ENVIRONMENTS = ("local", "development", "dev")


class Settings(BaseSettings):
    """Auth Service configuration loaded from environment variables"""

    # Server Configuration
    PORT: int = 8080
    LOG_LEVEL: str = "INFO"
    ENVIRONMENT: str = "production"

    # Token signing
    JWT_SECRET: str
    JWT_ISSUER: str = "account_platform"

    # Database Configuration
    DATABASE_URL: str
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10
    SHOULD_MIGRATE: bool = False

    # Outbound mail (reset codes are only logged when SMTP_HOST is unset)
    SMTP_HOST: Optional[str] = None
    SMTP_PORT: int = 587
    SMTP_USER: Optional[str] = None
    SMTP_PASSWORD: Optional[str] = None
    FROM_EMAIL: str = "no-reply@localhost"

    # Identity provider (application default credentials when unset)
    FIREBASE_SERVICE_KEY_PATH: Optional[str] = None

    # CORS Configuration
    CORS_ORIGINS: List[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True
    )

    @property
    def is_local(self) -> bool:
        return self.ENVIRONMENT.lower() in LOCAL_ENVIRONMENTS


# Global settings instance; a missing JWT_SECRET or DATABASE_URL fails here.
settings = Settings()
