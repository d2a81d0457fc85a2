"""
Configuration module for the health rules engine.
Uses pydantic-settings so values can come from the environment or a .env
file (prefix ``HEALTH_RULES_``). The default threshold profile defined here
is built once and injected into the engine for patients without
personalised thresholds.
"""
import logging
from typing import Optional

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from health_rules.models.profile import ThresholdProfile
from health_rules.utils.exceptions import ConfigurationError
from health_rules.utils.logging import setup_logging

logger = logging.getLogger(__name__)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """Engine settings with validation."""

    model_config = SettingsConfigDict(
        env_prefix="HEALTH_RULES_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Root logging level")
    log_file: Optional[str] = Field(default=None, description="Optional log file path")

    # Default threshold profile
    default_bp_sys_high: float = Field(default=140, description="Systolic high cutoff (mmHg)")
    default_bp_dia_high: float = Field(default=90, description="Diastolic high cutoff (mmHg)")
    default_bp_sys_very_high: float = Field(default=180, description="Systolic very-high cutoff (mmHg)")
    default_bp_dia_very_high: float = Field(default=120, description="Diastolic very-high cutoff (mmHg)")
    default_glucose_fasting_high: float = Field(default=7, description="Fasting glucose high cutoff (mmol/L)")
    default_glucose_random_high: float = Field(default=10, description="Random glucose high cutoff (mmol/L)")
    default_glucose_very_high: float = Field(default=13, description="Glucose very-high cutoff (mmol/L)")
    default_glucose_low: float = Field(default=3.9, description="Glucose low cutoff (mmol/L)")

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(_LOG_LEVELS)}")
        return level

    @property
    def default_thresholds(self) -> ThresholdProfile:
        """The default profile built from the ``default_*`` settings."""
        try:
            return ThresholdProfile(
                bp_sys_high=self.default_bp_sys_high,
                bp_dia_high=self.default_bp_dia_high,
                bp_sys_very_high=self.default_bp_sys_very_high,
                bp_dia_very_high=self.default_bp_dia_very_high,
                glucose_fasting_high=self.default_glucose_fasting_high,
                glucose_random_high=self.default_glucose_random_high,
                glucose_very_high=self.default_glucose_very_high,
                glucose_low=self.default_glucose_low,
            )
        except ValidationError as exc:
            logger.critical(f"Default threshold settings are inconsistent: {exc}")
            raise ConfigurationError(
                "Default threshold settings are inconsistent",
                setting="default_thresholds",
                details={"errors": [err["msg"] for err in exc.errors()]},
            ) from exc

    def configure_logging(self) -> None:
        setup_logging(self.log_level, self.log_file)


settings = Settings()


def get_settings() -> Settings:
    return settings
