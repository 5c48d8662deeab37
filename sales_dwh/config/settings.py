"""
Sales Data Warehouse Analytics
Centralized Configuration Management

Configuration is loaded from environment variables and an optional ``.env``
file using Pydantic settings. Reporting policy (segment thresholds, rounding,
window sizes) lives here so query logic never carries inlined literals.
"""

from functools import lru_cache
from typing import Optional
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Warehouse Database Configuration"""

    model_config = SettingsConfigDict(env_prefix="DATABASE_")

    url: str = Field(
        default="sqlite+aiosqlite:///./warehouse.db",
        description="Async SQLAlchemy URL of the warehouse",
    )
    schema_name: Optional[str] = Field(
        default=None,
        alias="DATABASE_SCHEMA",
        description="Schema holding the Gold tables (e.g. 'gold')",
    )
    echo: bool = Field(default=False, description="Echo SQL queries")
    pool_pre_ping: bool = Field(default=True, description="Verify connections before use")


class AnalyticsSettings(BaseSettings):
    """Reporting policy shared by all analytic queries"""

    model_config = SettingsConfigDict(env_prefix="ANALYTICS_")

    vip_threshold: float = Field(default=5000.0, description="Minimum lifetime spend for VIP")
    regular_threshold: float = Field(default=1000.0, description="Minimum lifetime spend for Regular")
    round_digits: int = Field(default=2, ge=0, description="Decimal places for averages and percentages")
    top_n: int = Field(default=10, ge=1, description="Default row limit for top/bottom reports")
    moving_average_window: int = Field(default=7, ge=1, description="Trailing window for moving averages, in rows")

    @model_validator(mode="after")
    def validate_thresholds(self) -> "AnalyticsSettings":
        """Segment bands must be ordered"""
        if self.regular_threshold > self.vip_threshold:
            raise ValueError("regular_threshold must not exceed vip_threshold")
        return self


class MonitoringSettings(BaseSettings):
    """Logging Configuration"""

    model_config = SettingsConfigDict(env_prefix="")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL", description="Logging level")
    log_format: str = Field(default="json", alias="LOG_FORMAT", description="Log format: json or text")


class Settings(BaseSettings):
    """
    Main Application Settings

    Aggregates all configuration sections and provides a single entry point
    for accessing application configuration.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="sales-dwh-analytics", alias="APP_NAME", description="Application name")
    app_env: str = Field(default="development", alias="APP_ENV", description="Environment")
    debug: bool = Field(default=False, alias="DEBUG", description="Debug mode")

    # API Server
    api_host: str = Field(default="0.0.0.0", alias="API_HOST", description="API host")
    api_port: int = Field(default=8000, alias="API_PORT", description="API port")

    # Version
    version: str = Field(default="1.0.0", description="Application version")

    # Subsystem configurations
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    analytics: AnalyticsSettings = Field(default_factory=AnalyticsSettings)
    monitoring: MonitoringSettings = Field(default_factory=MonitoringSettings)

    @field_validator("app_env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        """Validate environment value"""
        allowed = ["development", "staging", "production", "testing"]
        if v.lower() not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v.lower()

    @property
    def is_development(self) -> bool:
        """Check if running in development"""
        return self.app_env == "development"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses LRU cache to ensure settings are only loaded once.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
