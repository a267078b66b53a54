"""
Configuration management for SkillChart.

Uses Pydantic for type-safe, validated configuration with environment variable support.
"""

from pathlib import Path
from typing import List, Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from skillchart.constants import MAX_ARTIFACT_NAME_LENGTH


class SkillChartSettings(BaseSettings):
    """Main configuration for SkillChart.

    Settings can be overridden via:
    1. Environment variables (prefixed with SKILLCHART_)
    2. .env file in the working directory
    3. Programmatic overrides (CLI options)

    Values left empty here may still come from the "variables" and
    "editors" sheets of the responses spreadsheet, see
    ``config.schema.resolve_run_config``.

    Example:
        export SKILLCHART_SPREADSHEET_ID=1LlRSVHw...
        export SKILLCHART_PROFILE=notify
    """

    # === Google access ===
    spreadsheet_id: Optional[str] = Field(
        default=None, description="Id of the form responses spreadsheet"
    )
    auth_mode: Literal["auto", "service_account", "oauth"] = Field(
        default="auto", description="Which credential file to use"
    )
    credentials_file: Path = Field(
        default=Path("service_account.json"),
        description="Service account key file",
    )
    token_file: Path = Field(
        default=Path("token.json"),
        description="Authorized user token file (OAuth)",
    )

    # === Filing ===
    folder_id: Optional[str] = Field(
        default=None, description="Drive folder receiving spreadsheets and PDFs"
    )
    folder_name: str = Field(
        default="Skill Check Charts",
        description="Folder created on demand when no folder id is configured",
    )
    folder_parent_id: Optional[str] = Field(
        default=None, description="Parent of the auto-created folder"
    )
    editors: str = Field(
        default="", description="Comma-separated emails granted edit access"
    )

    # === Policy ===
    profile: Literal["pdf", "notify", "share"] = Field(
        default="pdf", description="Filing/export/notification preset"
    )
    export_pdf: Optional[bool] = Field(
        default=None, description="Override the profile's PDF export toggle"
    )
    notify_on_submit: Optional[bool] = Field(
        default=None, description="Override the profile's notification toggle"
    )
    share_with_editors: Optional[bool] = Field(
        default=None, description="Override the profile's editor sharing toggle"
    )
    max_name_length: int = Field(
        default=MAX_ARTIFACT_NAME_LENGTH,
        ge=1,
        le=MAX_ARTIFACT_NAME_LENGTH,
        description="Maximum length of the per-respondent spreadsheet name",
    )

    # === Responses spreadsheet layout ===
    source_sheet_index: int = Field(
        default=0, ge=0, description="Index of the sheet holding form responses"
    )
    variables_sheet: str = Field(default="variables")
    folder_id_label: str = Field(default="Folder ID")
    webhook_label: str = Field(default="Slack Webhook")
    editors_sheet: str = Field(default="editors")
    links_sheet: str = Field(default="links")

    # === Notification ===
    slack_webhook: Optional[str] = Field(
        default=None, description="Incoming webhook URL for submit notifications"
    )
    notify_template: str = Field(
        default=(
            '"{person}" of "{organization}" submitted the skill check sheet.'
            "\n\n<{link}|Download PDF>"
        ),
        description="mrkdwn message; {organization}, {person} and {link} are filled in",
    )

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )
    log_to_file: bool = Field(default=True, description="Enable file logging")
    logs_dir: Path = Field(default=Path("logs"), description="Log files directory")
    log_rotation: str = Field(default="10 MB", description="Log file rotation size")
    log_retention: str = Field(
        default="10 days", description="Log file retention period"
    )

    # === HTTP ===
    http_timeout: int = Field(
        default=60, ge=5, le=300, description="HTTP request timeout in seconds"
    )
    max_retry_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts for PDF export and webhook requests",
    )
    retry_base_delay: float = Field(
        default=0.5,
        ge=0.1,
        le=10.0,
        description="Base delay for exponential backoff (seconds)",
    )

    @field_validator("credentials_file", "token_file", "logs_dir", mode="before")
    @classmethod
    def expand_path(cls, v):
        """Expand ~ in configured paths."""
        if isinstance(v, str):
            v = Path(v)
        return v.expanduser()

    @property
    def editor_list(self) -> List[str]:
        return [email.strip() for email in self.editors.split(",") if email.strip()]

    model_config = {
        "env_prefix": "SKILLCHART_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


def load_settings(env_file: Optional[Path] = None, **overrides) -> SkillChartSettings:
    """Build settings from the environment, an optional .env file and overrides.

    Overrides whose value is None are dropped so unset CLI options do not
    mask environment variables.
    """
    values = {key: value for key, value in overrides.items() if value is not None}
    if env_file is not None:
        return SkillChartSettings(_env_file=env_file, **values)
    return SkillChartSettings(**values)
