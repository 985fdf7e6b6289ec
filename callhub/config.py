"""
Application configuration using Pydantic Settings.
Loads configuration from environment variables with validation.
"""
from typing import List
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment
    environment: str = Field(default="development", description="Environment: development, staging, production")
    debug: bool = Field(default=False, description="Debug mode")

    # Database
    database_url: str = Field(
        default="sqlite+aiosqlite:///./callhub.db",
        description="Async SQLAlchemy connection URL (postgresql+psycopg://... in production)"
    )
    auto_create_tables: bool = Field(default=True, description="Create missing tables on startup")

    # Security
    jwt_secret: str = Field(..., min_length=32, description="JWT secret key (min 32 chars)")
    jwt_algorithm: str = Field(default="HS256", description="JWT algorithm")
    jwt_expiration_hours: int = Field(default=24, description="JWT expiration time in hours")

    # Accounts
    admin_emails: str = Field(
        default="",
        description="Comma-separated list of emails that register with the admin role"
    )

    # CORS
    allowed_origins: str = Field(
        default="http://localhost:3000",
        description="Comma-separated list of allowed CORS origins"
    )

    # Signaling provider
    signaling_api_url: str = Field(default="", description="Signaling provider base URL (empty disables remote calls)")
    signaling_api_key: str = Field(default="", description="Signaling provider API key")
    signaling_api_secret: str = Field(default="", description="Secret used to sign provider join tokens")
    signaling_api_timeout: int = Field(default=10, description="Signaling provider request timeout in seconds")
    signaling_token_ttl_seconds: int = Field(default=3600, description="Join token lifetime in seconds")

    # Call lifecycle
    call_update_max_retries: int = Field(
        default=3,
        ge=1,
        description="Attempts for a call mutation before giving up on version conflicts"
    )

    # Rate Limiting
    rate_limit_enabled: bool = Field(default=True, description="Enable rate limiting")
    auth_rate_limit: str = Field(default="20/minute", description="Rate limit for auth endpoints per client")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")

    def get_allowed_origins_list(self) -> List[str]:
        """Parse comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]

    def get_admin_emails_list(self) -> List[str]:
        """Parse comma-separated admin emails into a lower-cased list."""
        return [email.strip().lower() for email in self.admin_emails.split(",") if email.strip()]

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment.lower() == "development"

    @property
    def is_sqlite(self) -> bool:
        """Check if the configured database is SQLite."""
        return self.database_url.startswith("sqlite")


# Global settings instance
settings = Settings()
