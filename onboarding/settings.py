"""Pydantic v2 Settings Management for the onboarding simulator.

This module provides type-safe, validated configuration using Pydantic v2
with support for environment variables, .env files, and YAML configuration.

Features:
    - Feature toggles mirroring the admin switches (grade target, reminders,
      multi-language content)
    - Thresholds used by the comprehension flag and the risk flag count
    - Integration constants stamped into the stubbed outbound events
    - Environment variable support with ONBOARDING_ prefix
    - YAML configuration file loading
"""

from __future__ import annotations

from enum import StrEnum
from functools import lru_cache
from pathlib import Path
from typing import Annotated

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

from onboarding.exceptions import ConfigValidationError


class LogLevel(StrEnum):
    """Supported log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class AppSettings(BaseModel):
    """Application-level settings."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = "Digital Patient Onboarding"
    version: str = "0.3.0"
    log_level: LogLevel = LogLevel.INFO
    json_logs: bool = False


class FeatureToggles(BaseModel):
    """Admin switches that shape content policy and outbound messaging."""

    model_config = ConfigDict(frozen=True)

    require_grade_target: bool = True
    auto_reminders: bool = True
    multilingual: bool = True


class Thresholds(BaseModel):
    """Cut-offs for the comprehension flag and dashboard risk flags."""

    model_config = ConfigDict(frozen=True)

    comprehension_cutoff: Annotated[int, Field(ge=0, le=100)] = 67
    adherence_cutoff: Annotated[int, Field(ge=0, le=100)] = 60
    risk_cutoff: Annotated[int, Field(ge=0, le=100)] = 50
    target_grade: Annotated[int, Field(ge=2, le=14)] = 6


class IntegrationSettings(BaseModel):
    """Constants stamped into the stubbed survey, messaging and telehealth events."""

    model_config = ConfigDict(frozen=True)

    survey_project_id: str = "DEMO-REDCAP-123"
    reminder_channel: str = "PowerAutomateWebhook"
    call_urgency: str = "next_business_day"
    escalation_policy: str = "On-demand escalation for low literacy/low comprehension"


class Settings(BaseSettings):
    """Main settings class with environment variable support.

    Environment variables are prefixed with ONBOARDING_ and use double underscore
    for nested settings (e.g., ONBOARDING_FEATURES__AUTO_REMINDERS=false).
    """

    model_config = SettingsConfigDict(
        env_prefix="ONBOARDING_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        validate_default=True,
    )

    app: AppSettings = Field(default_factory=AppSettings)
    features: FeatureToggles = Field(default_factory=FeatureToggles)
    thresholds: Thresholds = Field(default_factory=Thresholds)
    integrations: IntegrationSettings = Field(default_factory=IntegrationSettings)

    # Task auto-completed by a quiz submission; None disables the linkage.
    quiz_task_id: str | None = "t3"

    @classmethod
    def from_yaml(cls, path: str | Path) -> Settings:
        """Load settings from YAML file, merged with environment variables.

        Raises:
            ConfigValidationError: If the file is not valid YAML or fails validation
        """
        yaml_path = Path(path)
        if not yaml_path.exists():
            return cls()

        try:
            with yaml_path.open("r", encoding="utf-8") as f:
                yaml_config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigValidationError([{"msg": str(e)}], str(yaml_path), cause=e) from e

        try:
            return cls(**yaml_config)
        except ValidationError as e:
            errors = [{"loc": list(err["loc"]), "msg": err["msg"]} for err in e.errors()]
            raise ConfigValidationError(errors, str(yaml_path), cause=e) from e

    def with_features(self, **toggles: bool) -> Settings:
        """Return a copy with some feature toggles flipped."""
        return self.model_copy(update={"features": self.features.model_copy(update=toggles)})

    def model_dump_yaml(self) -> str:
        """Export settings to YAML format."""
        data = self.model_dump(mode="json")
        return yaml.dump(data, default_flow_style=False, sort_keys=False)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Settings are loaded once and cached. To reload, call get_settings.cache_clear().
    """
    config_path = Path("onboarding.yaml")
    if config_path.exists():
        return Settings.from_yaml(config_path)
    return Settings()


__all__ = [
    "Settings",
    "get_settings",
    "AppSettings",
    "FeatureToggles",
    "Thresholds",
    "IntegrationSettings",
    "LogLevel",
]
