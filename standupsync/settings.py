"""Settings configuration for StandupSync."""

from typing import Optional

from dotenv import load_dotenv
from pydantic import ConfigDict, Field
from pydantic_settings import BaseSettings

# Load environment variables from .env file
load_dotenv()


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = ConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    # Application Settings
    app_env: str = Field(default="development", description="Application environment")
    log_level: str = Field(default="INFO", description="Logging level")

    # Database
    database_url: Optional[str] = Field(
        default=None, description="PostgreSQL connection URL (postgresql+asyncpg://...)"
    )
    database_pool_size: int = Field(default=5, ge=1, le=50)
    database_pool_overflow: int = Field(default=10, ge=0, le=100)

    # JWT Authentication
    jwt_secret_key: Optional[str] = Field(
        default=None, description="Secret key for signing access tokens"
    )
    jwt_refresh_secret_key: Optional[str] = Field(
        default=None, description="Separate secret key for signing refresh tokens"
    )
    jwt_algorithm: str = Field(default="HS256", description="JWT signing algorithm")
    jwt_access_token_expire_minutes: int = Field(
        default=60 * 24, ge=1, description="Access token expiry in minutes"
    )
    jwt_refresh_token_expire_days: int = Field(
        default=30, ge=1, description="Refresh token expiry in days"
    )

    # CORS
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000"], description="CORS allowed origins"
    )

    # Slack
    slack_signing_secret: Optional[str] = Field(
        default=None, description="Slack signing secret for slash command validation"
    )

    # Invitation email (Postmark)
    postmark_api_key: Optional[str] = Field(
        default=None, description="Postmark server token for invitation emails"
    )
    postmark_from_email: str = Field(
        default="noreply@standupsync.com", description="Sender address for invitation emails"
    )
    frontend_url: str = Field(
        default="http://localhost:3000", description="Web app URL used in invitation links"
    )


def load_settings() -> Settings:
    """Load settings with proper error handling."""
    try:
        return Settings()
    except Exception as e:
        raise ValueError(f"Failed to load settings: {e}") from e
