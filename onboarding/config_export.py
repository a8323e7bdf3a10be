"""Exported integration configuration document.

The admin screen exports a small JSON file describing how the survey,
messaging and telehealth integrations are set up. It is written for humans and
downstream tooling to read; nothing in this package parses it back.
"""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from .exceptions import ExportError
from .logging import get_logger
from .settings import Settings

logger = get_logger(__name__)

DEFAULT_EXPORT_FILENAME = "onboarding-config.json"


class IntegrationConfig(BaseModel):
    """Serialized view of the integration settings and feature toggles."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    survey_project_id: str = Field(alias="redcapProjectId")
    messaging_flow: str = Field(alias="teamsFlow")
    telehealth_escalation: str = Field(alias="healthdirect")
    content_policy: str = Field(alias="contentPolicy")
    multilingual: str = Field(alias="multilingual")

    @classmethod
    def from_settings(cls, settings: Settings) -> IntegrationConfig:
        features = settings.features
        return cls(
            survey_project_id=settings.integrations.survey_project_id,
            messaging_flow="Enabled: Power Automate Webhook" if features.auto_reminders else "Disabled",
            telehealth_escalation=settings.integrations.escalation_policy,
            content_policy=(
                f"Target reading grade <= {settings.thresholds.target_grade}"
                if features.require_grade_target
                else "No constraint"
            ),
            multilingual="Enabled" if features.multilingual else "Disabled",
        )

    def to_document(self) -> dict[str, str]:
        return self.model_dump(by_alias=True)

    def to_json(self) -> str:
        return json.dumps(self.to_document(), indent=2, ensure_ascii=False)


def export_config(settings: Settings, path: str | Path = DEFAULT_EXPORT_FILENAME) -> Path:
    """Write the integration config document as JSON.

    Raises:
        ExportError: If the file cannot be written
    """
    out_path = Path(path)
    document = IntegrationConfig.from_settings(settings)
    try:
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(document.to_json() + "\n", encoding="utf-8")
    except OSError as e:
        raise ExportError(str(out_path), cause=e) from e

    logger.info("Integration config exported", path=str(out_path))
    return out_path
