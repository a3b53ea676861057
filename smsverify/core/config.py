"""
smsverify/core/config.py

Purpose: Application configuration

- Loads environment variables
- Centralizes config values (DB URI, gateway endpoint, SMS limits)
- Validates configuration on startup
- Environment-specific settings
"""

from pydantic import Field, validator
from pydantic_settings import BaseSettings
from typing import Optional, Literal


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Validates all required configs on startup.
    """

    # Environment
    ENVIRONMENT: Literal["development", "staging", "production"] = "development"

    # MongoDB
    MONGODB_URL: str = Field(
        default="mongodb://localhost:27017",
        description="MongoDB connection URI"
    )
    MONGODB_DB_NAME: str = Field(
        default="smsverify",
        description="MongoDB database name"
    )

    # SMS Gateway
    SMS_GATEWAY_MODE: Literal["live", "test"] = Field(
        default="test",
        description="'live' posts to the gateway over HTTP, 'test' records deliveries in memory"
    )
    SMS_GATEWAY_URL: str = Field(
        default="http://localhost:5002",
        description="SMS gateway base URL"
    )
    SMS_GATEWAY_API_KEY: Optional[str] = Field(
        default=None,
        description="API key sent to the SMS gateway"
    )
    SMS_GATEWAY_SENDER: Optional[str] = Field(
        default=None,
        description="Sender ID or short code used for outbound messages"
    )
    SMS_GATEWAY_TIMEOUT: float = Field(
        default=10.0,
        description="SMS gateway request timeout in seconds"
    )

    # Messaging limits
    SMS_MAX_LENGTH: int = Field(
        default=160,
        description="Maximum characters in a single SMS segment"
    )
    CONFIRMATION_CODE_LENGTH: int = Field(
        default=6,
        description="Length of generated confirmation codes"
    )

    # Application
    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    API_PREFIX: str = Field(
        default="/api/v1",
        description="API route prefix"
    )
    CORS_ORIGINS: list = Field(
        default=["*"],
        description="Allowed CORS origins"
    )

    @validator("SMS_GATEWAY_API_KEY")
    def validate_gateway_key(cls, v, values):
        """Ensure the gateway key is set when delivering for real in production."""
        if (
            values.get("ENVIRONMENT") == "production"
            and values.get("SMS_GATEWAY_MODE") == "live"
            and not v
        ):
            raise ValueError("SMS_GATEWAY_API_KEY is required for live delivery in production")
        return v

    @validator("SMS_MAX_LENGTH", "CONFIRMATION_CODE_LENGTH")
    def validate_positive(cls, v):
        if v <= 0:
            raise ValueError("must be a positive integer")
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"

    class Config:
        env_file = ".env"
        case_sensitive = True
        env_file_encoding = "utf-8"


# Global settings instance
settings = Settings()


def validate_settings():
    """
    Validates critical settings on application startup.
    Raises ValueError if any required setting is missing or invalid.
    """
    errors = []

    if not settings.MONGODB_URL:
        errors.append("MONGODB_URL is required")

    if settings.SMS_GATEWAY_MODE == "live" and not settings.SMS_GATEWAY_URL:
        errors.append("SMS_GATEWAY_URL is required in live mode")

    # Production-specific validations
    if settings.is_production:
        if settings.SMS_GATEWAY_MODE != "live":
            errors.append("SMS_GATEWAY_MODE must be 'live' in production")

    if errors:
        raise ValueError(f"Configuration validation failed: {', '.join(errors)}")

    return True
