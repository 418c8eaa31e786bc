from loguru import logger
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from courtplan.planning.invariants import DEFAULT_WINDOW_DAYS


class Settings(BaseSettings):
    log_level: str = Field(default="INFO", validation_alias="COURTPLAN_LOG_LEVEL")
    log_file: str | None = Field(default=None, validation_alias="COURTPLAN_LOG_FILE")
    analysis_window_days: int = Field(
        default=DEFAULT_WINDOW_DAYS,
        ge=1,
        validation_alias="COURTPLAN_ANALYSIS_WINDOW_DAYS",
        description="Days of logged sessions compared against each plan",
    )
    include_in_progress: bool = Field(
        default=True,
        validation_alias="COURTPLAN_INCLUDE_IN_PROGRESS",
        description="Count entries from the session currently running",
    )
    plan_cache_ttl_seconds: float = Field(
        default=300.0,
        gt=0,
        validation_alias="COURTPLAN_PLAN_CACHE_TTL_SECONDS",
        description="Seconds an upcast plan stays cached",
    )
    plan_cache_max_entries: int = Field(
        default=256,
        ge=1,
        validation_alias="COURTPLAN_PLAN_CACHE_MAX_ENTRIES",
        description="Maximum plans held in the plan cache",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="COURTPLAN_",
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate that log level is one of the standard logging levels."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_value = value.upper()
        if upper_value not in valid_levels:
            logger.warning(f"Invalid LOG_LEVEL '{value}'. Valid levels are: {', '.join(sorted(valid_levels))}. Defaulting to INFO.")
            return "INFO"
        return upper_value


settings = Settings()
