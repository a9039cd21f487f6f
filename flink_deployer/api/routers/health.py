"""Health endpoint router composition for app and job-control target checks."""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from flink_deployer.adapters import JobControlPort


def api_create_health_router(job_control: JobControlPort) -> APIRouter:
    """Create health-check router reporting app status and job-control target.

    Args:
        job_control: Job-control port whose target is reported.

    Returns:
        APIRouter: Router exposing `/health` endpoint.

    Raises:
        ValueError: Raised when job_control is invalid.
    """

    if job_control is None:
        raise ValueError("job_control must not be None")

    router = APIRouter(tags=["health"])

    @router.get("/health")
    def api_health_status() -> JSONResponse:
        payload = {
            "status": "ok",
            "app": "up",
            "job_control": job_control.job_control_source_name(),
        }
        return JSONResponse(content=payload, status_code=status.HTTP_200_OK)

    return router
