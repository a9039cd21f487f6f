"""FastAPI application factory for the deployer HTTP surface."""

from fastapi import FastAPI

from flink_deployer.adapters import JobControlPort
from flink_deployer.config import DeployerSettings
from flink_deployer.jobs import UpdateOrchestratorPort

from .routers import api_create_health_router, api_create_jobs_router


def create_api_application(
    settings: DeployerSettings,
    job_control: JobControlPort,
    update_orchestrator: UpdateOrchestratorPort,
) -> FastAPI:
    """Create the FastAPI application instance for the service.

    Args:
        settings: Validated deployer settings.
        job_control: Job-control port reported by health checks.
        update_orchestrator: Orchestrator executing job updates.

    Returns:
        FastAPI: Framework application instance.
    """

    application = FastAPI(title="Flink Deployer")

    @application.get("/", tags=["foundation"])
    def foundation_index() -> dict[str, str]:
        return {
            "service": "flink-deployer",
            "status": "ready",
            "environment": settings.environment_name,
        }

    application.include_router(api_create_health_router(job_control=job_control))
    application.include_router(
        api_create_jobs_router(
            update_orchestrator=update_orchestrator,
            default_savepoint_directory=settings.default_savepoint_directory,
        )
    )

    return application
