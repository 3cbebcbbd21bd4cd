"""
Application settings and configuration management
Uses Pydantic Settings for environment variable handling and validation
"""

from functools import lru_cache
from typing import Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict, PydanticBaseSettingsSource
import pytz

from analytics_backend.periods.comparison import ComparisonMode
from analytics_backend.periods.presets import PresetId


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    # Application
    app_name: str = "Analytics Period Engine"
    environment: str = Field(default="development", alias="ENVIRONMENT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_format: str = Field(
        default="console",
        alias="LOG_FORMAT",
        description="Log renderer: console or json"
    )

    # Time zone used for day, week and month boundaries.
    # None keeps the viewer-local wall clock (naive datetimes).
    timezone: Optional[str] = Field(
        default=None,
        alias="TIMEZONE",
        description="IANA zone name, e.g. Europe/Berlin"
    )

    # Selection defaults
    default_period: str = Field(default=PresetId.LAST_30_DAYS.value, alias="DEFAULT_PERIOD")
    comparison_enabled: bool = Field(default=False, alias="COMPARISON_ENABLED")
    default_comparison_mode: str = Field(
        default=ComparisonMode.PREVIOUS_PERIOD.value,
        alias="DEFAULT_COMPARISON_MODE"
    )

    model_config = SettingsConfigDict(
        case_sensitive=False,
        populate_by_name=True,
        env_parse_none_str="null"
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize settings sources to exclude .env file loading"""
        return init_settings, env_settings, file_secret_settings

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return v.upper()

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v):
        if v.lower() not in ("console", "json"):
            raise ValueError("Log format must be 'console' or 'json'")
        return v.lower()

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v):
        if v is None or not v.strip():
            return None
        try:
            pytz.timezone(v.strip())
        except pytz.UnknownTimeZoneError:
            raise ValueError(f"Unknown time zone: {v}")
        return v.strip()

    @field_validator("default_period")
    @classmethod
    def validate_default_period(cls, v):
        value = v.strip().lower()
        if value not in {p.value for p in PresetId}:
            raise ValueError(f"Default period must be one of {[p.value for p in PresetId]}")
        return value

    @field_validator("default_comparison_mode")
    @classmethod
    def validate_default_comparison_mode(cls, v):
        value = v.strip().lower()
        if value not in {m.value for m in ComparisonMode}:
            raise ValueError(f"Comparison mode must be one of {[m.value for m in ComparisonMode]}")
        return value

    @property
    def is_production(self) -> bool:
        """Check if running in production environment"""
        return self.environment.lower() == "production"

    @property
    def tzinfo(self):
        """Return the configured pytz zone, or None for viewer-local time"""
        if self.timezone is None:
            return None
        return pytz.timezone(self.timezone)

    @property
    def preset(self) -> PresetId:
        """Default period as a PresetId"""
        return PresetId(self.default_period)

    @property
    def comparison_mode(self) -> ComparisonMode:
        """Default comparison mode as a ComparisonMode"""
        return ComparisonMode(self.default_comparison_mode)

    def validate_configuration(self) -> list[str]:
        """
        Validate runtime configuration.
        Returns list of issues (empty if all valid).
        """
        issues = []

        if self.timezone is None:
            if self.is_production:
                issues.append(
                    "WARNING: TIMEZONE is not set in production. Day boundaries follow "
                    "the server's local clock, which may differ from your viewers."
                )

        if self.is_production and self.log_level == "DEBUG":
            issues.append("WARNING: DEBUG logging is enabled in production")

        return issues


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings
    Uses lru_cache to avoid reading environment variables multiple times
    """
    return Settings()


def clear_settings_cache() -> None:
    """
    Clear the settings cache. Used primarily for testing.
    After calling this, the next call to get_settings() will
    create a new Settings instance with fresh environment variables.
    """
    get_settings.cache_clear()
