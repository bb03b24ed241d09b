# 📄 File: plantid/shared/config/settings.py
#
# 🧭 Purpose (Layman Explanation):
# The main configuration center that reads all settings from environment variables
# (API keys, free limits, Stripe prices) and hands them to the rest of the app.
#
# 🧪 Purpose (Technical Summary):
# Pydantic-based settings management with environment variable loading,
# validation, and type safety for all application configuration parameters.
#
# 🔗 Dependencies:
# - pydantic-settings for configuration management
# - typing for type hints
#
# 🔄 Connected Modules / Calls From:
# - plantid.main (application startup)
# - Database connection modules
# - Classification provider clients and Stripe gateway
# - Usage quota policy

from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Uses Pydantic for validation and type safety. Settings are loaded
    from environment variables with fallback to .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # =========================================================================
    # APPLICATION SETTINGS
    # =========================================================================

    APP_NAME: str = Field(default="Plant Identification API", description="Application name")
    APP_VERSION: str = Field(default="1.0.0", description="Application version")
    APP_DESCRIPTION: str = Field(
        default="Photo-based plant identification with usage quotas and premium subscriptions",
        description="Application description"
    )
    ENVIRONMENT: str = Field(default="development", description="Runtime environment")
    DEBUG: bool = Field(default=False, description="Debug mode flag")
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FORMAT: str = Field(default="text", description="Log output format (text/json)")

    # =========================================================================
    # SERVER CONFIGURATION
    # =========================================================================

    HOST: str = Field(default="0.0.0.0", description="Server host")
    PORT: int = Field(default=5000, description="Server port")
    RELOAD: bool = Field(default=False, description="Auto-reload on changes")

    # =========================================================================
    # DATABASE CONFIGURATION
    # =========================================================================

    # In-memory SQLite keeps records for the life of the process
    DATABASE_URL: str = Field(
        default="sqlite+aiosqlite:///:memory:",
        description="SQLAlchemy async database URL"
    )
    DB_ECHO: bool = Field(default=False, description="Echo SQL statements")

    # CORS Settings
    CORS_ORIGINS: str = Field(
        default="http://localhost:3000,http://localhost:5173,capacitor://localhost",
        description="CORS allowed origins"
    )
    CORS_ALLOW_CREDENTIALS: bool = Field(default=True, description="CORS allow credentials")

    # =========================================================================
    # RATE LIMITING
    # =========================================================================

    RATE_LIMIT_ENABLED: bool = Field(default=True, description="Enable slowapi rate limits")
    IDENTIFY_RATE_LIMIT: str = Field(
        default="30/minute",
        description="Identification rate limit in '<limit>/<period>' format"
    )

    # =========================================================================
    # USAGE QUOTAS
    # =========================================================================

    FREE_DAILY_LIMIT: int = Field(default=3, ge=0, description="Free identifications per UTC day")
    TRIAL_DAYS: int = Field(default=5, ge=0, description="Trial length in days from first use")
    REQUIRE_SUBSCRIPTION_AFTER_TRIAL: bool = Field(
        default=False,
        description="Refuse non-premium identifications once the trial has expired"
    )
    PREMIUM_MONTHLY_LIMIT: int = Field(
        default=100,
        ge=0,
        description="Premium identifications per calendar month (0 = unlimited)"
    )

    # =========================================================================
    # IMAGE & HISTORY
    # =========================================================================

    MAX_IMAGE_SIZE: int = Field(default=5242880, description="Max decoded image size (5MB)")
    HISTORY_DEFAULT_LIMIT: int = Field(default=10, description="Default history page size")
    HISTORY_MAX_LIMIT: int = Field(default=50, description="Maximum history page size")

    # =========================================================================
    # PLANT IDENTIFICATION APIs
    # =========================================================================

    # Plant.id API
    PLANT_ID_API_KEY: Optional[str] = Field(None, description="Plant.id API key")
    PLANT_ID_API_URL: str = Field(
        default="https://api.plant.id/v3/identification",
        description="Plant.id API URL"
    )
    PLANT_ID_PRIORITY: int = Field(default=1, description="Plant.id rotation priority")

    # OpenAI Vision
    OPENAI_API_KEY: Optional[str] = Field(None, description="OpenAI API key")
    OPENAI_API_URL: str = Field(
        default="https://api.openai.com/v1/chat/completions",
        description="OpenAI chat completions URL"
    )
    OPENAI_VISION_MODEL: str = Field(default="gpt-4o", description="OpenAI vision model")
    OPENAI_MAX_TOKENS: int = Field(default=500, description="OpenAI max tokens")
    OPENAI_PRIORITY: int = Field(default=2, description="OpenAI rotation priority")

    # Outbound HTTP behaviour
    EXTERNAL_API_TIMEOUT: int = Field(default=30, description="Outbound request timeout (seconds)")
    CIRCUIT_BREAKER_FAILURE_THRESHOLD: int = Field(default=5, description="Failures before a circuit opens")
    CIRCUIT_BREAKER_RECOVERY_TIMEOUT: int = Field(default=60, description="Seconds before a half-open trial call")

    # =========================================================================
    # PAYMENT GATEWAY
    # =========================================================================

    STRIPE_SECRET_KEY: Optional[str] = Field(None, description="Stripe secret key")
    STRIPE_PRICE_ID: Optional[str] = Field(None, description="Stripe price for the premium monthly plan")
    STRIPE_WEBHOOK_SECRET: Optional[str] = Field(None, description="Stripe webhook secret")

    # =========================================================================
    # VALIDATORS
    # =========================================================================

    @field_validator("ENVIRONMENT")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment value."""
        allowed_environments = ["development", "staging", "production", "test"]
        if v.lower() not in allowed_environments:
            raise ValueError(f"Environment must be one of {allowed_environments}")
        return v.lower()

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level value."""
        allowed_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed_levels:
            raise ValueError(f"Log level must be one of {allowed_levels}")
        return v.upper()

    @field_validator("LOG_FORMAT")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        if v.lower() not in ("text", "json"):
            raise ValueError("Log format must be 'text' or 'json'")
        return v.lower()

    @field_validator("CORS_ORIGINS")
    @classmethod
    def validate_cors_origins(cls, v: str) -> str:
        """Validate CORS origins format."""
        origins = [origin.strip() for origin in v.split(",")]
        for origin in origins:
            if not origin.startswith(("http://", "https://", "capacitor://", "*")):
                raise ValueError(f"Invalid CORS origin format: {origin}")
        return v

    # =========================================================================
    # COMPUTED PROPERTIES
    # =========================================================================

    @property
    def cors_origins_list(self) -> List[str]:
        """Get CORS origins as a list."""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    @property
    def is_testing(self) -> bool:
        return self.ENVIRONMENT == "test"

    @property
    def stripe_configured(self) -> bool:
        """Stripe calls need both a secret key and a premium price."""
        return bool(self.STRIPE_SECRET_KEY and self.STRIPE_PRICE_ID)

    # =========================================================================
    # API PROVIDER CONFIGURATIONS
    # =========================================================================

    def get_plant_api_config(self) -> dict:
        """Get plant identification provider configuration."""
        return {
            "plant_id": {
                "api_key": self.PLANT_ID_API_KEY,
                "api_url": self.PLANT_ID_API_URL,
                "priority": self.PLANT_ID_PRIORITY,
            },
            "openai": {
                "api_key": self.OPENAI_API_KEY,
                "api_url": self.OPENAI_API_URL,
                "model": self.OPENAI_VISION_MODEL,
                "max_tokens": self.OPENAI_MAX_TOKENS,
                "priority": self.OPENAI_PRIORITY,
            },
        }


# ============================================================================
# SETTINGS FACTORY
# ============================================================================

@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Uses lru_cache to ensure settings are loaded only once
    and reused throughout the application lifecycle.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
