"""
Application configuration using Pydantic Settings.
Loads environment variables and provides type-safe configuration.
"""

from typing import List
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator

DEFAULT_CORS_ORIGINS = ["http://localhost:3000", "http://localhost:5173", "http://localhost:8081"]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment
    environment: str = Field(default="development", description="Current environment")
    debug: bool = Field(default=False, description="Debug mode")

    # API Configuration
    api_title: str = Field(default="Crefin Financial Tracker")
    api_version: str = Field(default="1.0.0")
    api_prefix: str = Field(default="/api/v1")
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3001)

    # Database
    database_url: str = Field(default="sqlite:///./crefin.db", description="SQLAlchemy database URL")
    database_echo: bool = Field(default=False, description="Log emitted SQL")

    # JWT Configuration (verification only, tokens are issued by the auth service)
    jwt_secret_key: str = Field(default="development-secret-key-change-in-production", description="JWT secret key")
    jwt_algorithm: str = Field(default="HS256")

    # CORS
    cors_origins: str | List[str] = Field(default=",".join(DEFAULT_CORS_ORIGINS))
    cors_allow_credentials: bool = Field(default=True)
    cors_allow_methods: List[str] = Field(default=["*"])
    cors_allow_headers: List[str] = Field(default=["*"])

    # Pagination
    default_page_size: int = Field(default=50)
    max_page_size: int = Field(default=100)

    # ML payment predictor
    ml_api_url: str = Field(default="http://localhost:8000", description="Base URL of the ML prediction service")
    ml_api_timeout_seconds: float = Field(default=10.0, description="Timeout for a single prediction call")

    # Invoicing
    invoice_number_prefix: str = Field(default="INV")
    invoice_number_max_attempts: int = Field(default=3, description="Attempts to allocate a unique invoice number")

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from comma-separated string or list."""
        if v is None:
            return list(DEFAULT_CORS_ORIGINS)
        if isinstance(v, str):
            if not v.strip():
                return list(DEFAULT_CORS_ORIGINS)
            return [origin.strip() for origin in v.split(",")]
        return v

    @field_validator("ml_api_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment.lower() == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"

    def validate_environment(self) -> None:
        """Validate that all required environment variables are set."""
        required_vars = [
            "database_url",
            "jwt_secret_key",
            "ml_api_url",
        ]

        missing_vars = []
        for var in required_vars:
            if not getattr(self, var, None):
                missing_vars.append(var.upper())

        if self.jwt_secret_key.startswith("development-"):
            missing_vars.append("JWT_SECRET_KEY")

        if missing_vars:
            raise ValueError(
                f"Missing required environment variables: {', '.join(missing_vars)}"
            )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    Use this function to get settings throughout the application.
    """
    settings = Settings()

    # Validate environment in production
    if settings.is_production:
        settings.validate_environment()

    return settings


# Create a global settings instance
settings = get_settings()
