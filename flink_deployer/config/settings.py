"""Typed runtime settings with dotenv support and startup validation."""

import tempfile

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SettingsLoadError(RuntimeError):
    """Raised when runtime settings cannot be loaded or validated."""


class DeployerSettings(BaseSettings):
    """Deployer settings for Flink job control, artifact handling and API runtime.

    Environment variable names map to field names in uppercase with the
    `FLINK_DEPLOYER_` prefix. Example: `flink_binary_path` reads from
    `FLINK_DEPLOYER_FLINK_BINARY_PATH`.

    Attributes:
        environment_name: Runtime environment label.
        application_host: Host interface for web server binding.
        application_port: Web server port.
        log_level: Root log level name.
        flink_binary_path: Path or name of the Flink command-line client.
        flink_jobmanager_address: Optional job manager address passed with `-m`.
        flink_savepoint_target_directory: Optional target directory for triggered savepoints.
        default_savepoint_directory: Fallback savepoint directory for updates that specify none.
        artifact_download_directory: Local directory for downloaded remote job artifacts.
        artifact_request_timeout_seconds: HTTP timeout for remote artifact downloads.
    """

    model_config = SettingsConfigDict(
        env_prefix="FLINK_DEPLOYER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    environment_name: str = Field(default="development")
    application_host: str = Field(default="0.0.0.0")
    application_port: int = Field(default=8080, ge=1, le=65535)
    log_level: str = Field(default="INFO")
    flink_binary_path: str = Field(default="flink", min_length=1)
    flink_jobmanager_address: str | None = Field(default=None)
    flink_savepoint_target_directory: str | None = Field(default=None)
    default_savepoint_directory: str | None = Field(default=None)
    artifact_download_directory: str = Field(default_factory=tempfile.gettempdir)
    artifact_request_timeout_seconds: float = Field(default=30.0, gt=0)

    @field_validator("flink_binary_path", "artifact_download_directory")
    @classmethod
    def _validate_non_empty_string(cls, value: str) -> str:
        stripped_value = value.strip()
        if not stripped_value:
            raise ValueError("value must not be blank")
        return stripped_value

    @field_validator(
        "flink_jobmanager_address",
        "flink_savepoint_target_directory",
        "default_savepoint_directory",
    )
    @classmethod
    def _normalize_optional_string(cls, value: str | None) -> str | None:
        if value is None:
            return None
        stripped_value = value.strip()
        return stripped_value or None

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        normalized_value = value.strip().upper()
        if normalized_value not in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}:
            raise ValueError("log_level must be one of CRITICAL, ERROR, WARNING, INFO, DEBUG")
        return normalized_value


def config_load_settings() -> DeployerSettings:
    """Load and validate runtime settings from environment and dotenv.

    Returns:
        DeployerSettings: Validated runtime settings object.

    Raises:
        SettingsLoadError: Raised when settings are invalid.
    """

    try:
        return DeployerSettings()
    except ValidationError as error:
        raise SettingsLoadError(
            f"Startup configuration validation failed. Update .env or environment variables. Details: {error}"
        ) from error
