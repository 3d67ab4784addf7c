"""Configuration management for the order engine."""

from decimal import Decimal
from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Redis Configuration
    redis_url: str = Field(default="redis://localhost:6379/0", description="Redis URL")

    # Environment
    environment: Literal["development", "staging", "production"] = Field(
        default="development"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: Literal["json", "text"] = Field(default="json", description="Log format")

    # Transaction retries
    max_retries: int = Field(
        default=3, ge=1, description="Attempts for order operations hitting store failures"
    )
    retry_delay: float = Field(
        default=0.05, ge=0, description="Initial retry delay in seconds"
    )
    max_retry_delay: float = Field(
        default=1.0, ge=0, description="Upper bound on a single retry delay in seconds"
    )
    conflict_max_retries: int = Field(
        default=10,
        ge=1,
        description="Attempts for an operation that keeps losing races on contended keys",
    )

    # Pricing
    default_tax_rate: Decimal = Field(
        default=Decimal("0.20"),
        ge=0,
        description="Tax rate used when a restaurant does not configure one",
    )

    # Inventory
    low_stock_threshold: int = Field(
        default=10, ge=0, description="Low stock alert threshold"
    )

    # Order numbers
    order_number_ttl: int = Field(
        default=172800, description="Lifetime of a per-day order counter in seconds"
    )

    # Estimated preparation times
    default_delivery_minutes: int = Field(default=45, ge=0)
    default_pickup_minutes: int = Field(default=25, ge=0)

    # Outbox worker
    outbox_poll_interval: float = Field(
        default=0.5, gt=0, description="Idle wait between outbox polls in seconds"
    )
    outbox_max_attempts: int = Field(
        default=3, ge=1, description="Attempts per side-effect handler"
    )

    # Kitchen
    kitchen_email: str = Field(
        default="kitchen@restaurant.com",
        description="Fallback address for kitchen tickets",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return v_upper


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
