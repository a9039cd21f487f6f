"""Application bootstrap wiring for startup validation and dependency assembly."""

from fastapi import FastAPI

from flink_deployer.adapters import (
    FlinkCliDeployAdapter,
    FlinkCliJobControlAdapter,
    HttpArtifactFetcher,
    LocalFilesystemAdapter,
)
from flink_deployer.api import create_api_application
from flink_deployer.config import DeployerSettings, config_load_settings
from flink_deployer.jobs import SavepointCreator, SavepointLocator, UpdateJobOrchestrator
from flink_deployer.observability import configure_logging


def bootstrap_configure_logging(settings: DeployerSettings) -> None:
    configure_logging(
        service_name="flink-deployer",
        level=settings.log_level,
        environment_name=settings.environment_name,
        jobmanager_address=settings.flink_jobmanager_address,
    )


def bootstrap_create_job_control(settings: DeployerSettings) -> FlinkCliJobControlAdapter:
    """Build the Flink CLI job-control adapter from settings.

    Args:
        settings: Validated deployer settings.

    Returns:
        FlinkCliJobControlAdapter: Configured job-control adapter.
    """

    return FlinkCliJobControlAdapter(
        flink_binary_path=settings.flink_binary_path,
        jobmanager_address=settings.flink_jobmanager_address,
        savepoint_target_directory=settings.flink_savepoint_target_directory,
    )


def bootstrap_create_deployer(settings: DeployerSettings) -> FlinkCliDeployAdapter:
    """Build the Flink CLI deploy adapter from settings.

    Args:
        settings: Validated deployer settings.

    Returns:
        FlinkCliDeployAdapter: Configured deploy adapter with remote artifact support.
    """

    artifact_fetcher = HttpArtifactFetcher(
        download_directory=settings.artifact_download_directory,
        request_timeout_seconds=settings.artifact_request_timeout_seconds,
    )
    return FlinkCliDeployAdapter(
        artifact_fetcher=artifact_fetcher,
        flink_binary_path=settings.flink_binary_path,
        jobmanager_address=settings.flink_jobmanager_address,
    )


def bootstrap_create_update_orchestrator(settings: DeployerSettings | None = None) -> UpdateJobOrchestrator:
    """Build update orchestrator for CLI and HTTP trigger surfaces.

    Args:
        settings: Optional validated settings; loaded from environment when omitted.

    Returns:
        UpdateJobOrchestrator: Fully wired update orchestrator instance.

    Raises:
        SettingsLoadError: Raised when startup configuration validation fails.
    """

    resolved_settings = settings or config_load_settings()
    filesystem = LocalFilesystemAdapter()
    job_control = bootstrap_create_job_control(resolved_settings)
    return UpdateJobOrchestrator(
        job_control=job_control,
        deployer=bootstrap_create_deployer(resolved_settings),
        savepoint_locator=SavepointLocator(filesystem=filesystem),
        savepoint_creator=SavepointCreator(job_control=job_control, filesystem=filesystem),
    )


def bootstrap_create_application() -> FastAPI:
    """Assemble the HTTP application after validating startup configuration.

    Returns:
        FastAPI: Fully initialized FastAPI application instance.

    Raises:
        SettingsLoadError: Raised when startup configuration validation fails.
    """

    settings = config_load_settings()
    bootstrap_configure_logging(settings)
    return create_api_application(
        settings=settings,
        job_control=bootstrap_create_job_control(settings),
        update_orchestrator=bootstrap_create_update_orchestrator(settings),
    )
