"""Typed runtime settings with dotenv support and startup validation."""

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})
_LOG_FORMATS = frozenset({"console", "json"})


class SettingsLoadError(RuntimeError):
    """Raised when runtime settings cannot be loaded or validated."""


class NotifierSettings(BaseSettings):
    """Runtime settings for notification rendering and delivery.

    Environment variable names map directly to field names in uppercase.
    Example: `request_timeout_seconds` reads from `REQUEST_TIMEOUT_SECONDS`.

    Attributes:
        request_timeout_seconds: Ceiling for one webhook HTTP attempt.
        retry_backoff_seconds: Fixed delay before the transport-failure retry.
        max_retries: Transport-failure retries (`0` disables the retry).
        default_channel: Channel used when no channel input is supplied.
        mattermost_username: Bot display name for Mattermost posts.
        log_level: Minimum structlog level.
        log_format: `console` for human-readable logs, `json` for JSON lines.
        webhook_url: Fallback for the `--webhook-url` input.
        notification_type: Fallback for the `--notification-type` input.
        channel: Fallback for the `--channel` input.
        workflow_name: Fallback for the `--workflow-name` input.
        job_results: Fallback for the `--job-results` input.
        github_context: Fallback for the `--github-context` input.
        github_repository: Ambient `GITHUB_REPOSITORY` value.
        github_ref_name: Ambient `GITHUB_REF_NAME` value.
        github_head_ref: Ambient `GITHUB_HEAD_REF` value.
        github_sha: Ambient `GITHUB_SHA` value.
        github_actor: Ambient `GITHUB_ACTOR` value.
        github_run_id: Ambient `GITHUB_RUN_ID` value.
        github_server_url: Ambient `GITHUB_SERVER_URL` value.
        github_workflow: Ambient `GITHUB_WORKFLOW` value.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    request_timeout_seconds: float = Field(default=10.0, gt=0)
    retry_backoff_seconds: float = Field(default=2.0, ge=0)
    max_retries: int = Field(default=1, ge=0, le=1)
    default_channel: str = Field(default="cicd-notifications", min_length=1)
    mattermost_username: str = Field(default="CI/CD Notifier", min_length=1)
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="console")

    webhook_url: str = Field(default="")
    notification_type: str = Field(default="")
    channel: str = Field(default="")
    workflow_name: str = Field(default="")
    job_results: str = Field(default="")
    github_context: str = Field(default="")

    github_repository: str = Field(default="")
    github_ref_name: str = Field(default="")
    github_head_ref: str = Field(default="")
    github_sha: str = Field(default="")
    github_actor: str = Field(default="")
    github_run_id: str = Field(default="")
    github_server_url: str = Field(default="")
    github_workflow: str = Field(default="")

    @field_validator("default_channel", "mattermost_username")
    @classmethod
    def _validate_non_empty_string(cls, value: str) -> str:
        stripped_value = value.strip()
        if not stripped_value:
            raise ValueError("value must not be blank")
        return stripped_value

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        normalized_value = value.strip().upper()
        if normalized_value not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {sorted(_LOG_LEVELS)}")
        return normalized_value

    @field_validator("log_format")
    @classmethod
    def _validate_log_format(cls, value: str) -> str:
        normalized_value = value.strip().lower()
        if normalized_value not in _LOG_FORMATS:
            raise ValueError(f"log_format must be one of {sorted(_LOG_FORMATS)}")
        return normalized_value

    def settings_github_environment(self) -> dict[str, str]:
        """Return ambient `GITHUB_*` values keyed like the GitHub context.

        Returns:
            dict[str, str]: Mapping using `github` context key names.

        Raises:
            RuntimeError: This helper does not raise runtime errors.
        """

        return {
            "repository": self.github_repository,
            "ref_name": self.github_ref_name,
            "head_ref": self.github_head_ref,
            "sha": self.github_sha,
            "actor": self.github_actor,
            "run_id": self.github_run_id,
            "server_url": self.github_server_url,
            "workflow": self.github_workflow,
        }


def config_load_settings() -> NotifierSettings:
    """Load and validate runtime settings from environment and dotenv.

    Returns:
        NotifierSettings: Validated runtime settings object.

    Raises:
        SettingsLoadError: Raised when settings are invalid.
    """

    try:
        return NotifierSettings()
    except ValidationError as error:
        raise SettingsLoadError(
            f"Configuration validation failed. Update .env or environment variables. Details: {error}"
        ) from error
