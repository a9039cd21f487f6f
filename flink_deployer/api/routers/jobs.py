"""Job update API router composition."""

from __future__ import annotations

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from flink_deployer.domain import (
    AmbiguousSavepointError,
    DeployerError,
    DeploymentError,
    InvalidArgumentError,
    JobConflictError,
    JobControlError,
    SavepointNotFoundError,
    SavepointStorageError,
    UpdateRequest,
)
from flink_deployer.jobs import UpdateOrchestratorPort


class UpdateJobPayload(BaseModel):
    """Request body for `POST /jobs/update`."""

    job_name: str
    run_args: str = ""
    local_filename: str = ""
    remote_filename: str = ""
    api_token: str = Field(default="", repr=False)
    jar_args: str = ""
    savepoint_directory: str = ""
    allow_non_restorable_state: bool = False

    def payload_to_update_request(self, default_savepoint_directory: str | None = None) -> UpdateRequest:
        return UpdateRequest(
            job_name=self.job_name,
            run_args=self.run_args,
            local_filename=self.local_filename,
            remote_filename=self.remote_filename,
            api_token=self.api_token,
            jar_args=self.jar_args,
            savepoint_directory=self.savepoint_directory or (default_savepoint_directory or ""),
            allow_non_restorable_state=self.allow_non_restorable_state,
        )


def api_status_code_for_error(error: DeployerError) -> int:
    """Map deployer error type to HTTP status code.

    Args:
        error: Caught deployer error.

    Returns:
        int: HTTP status code.
    """

    if isinstance(error, InvalidArgumentError):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(error, JobConflictError):
        return status.HTTP_409_CONFLICT
    if isinstance(error, (SavepointNotFoundError, AmbiguousSavepointError)):
        return 422
    if isinstance(error, SavepointStorageError):
        return status.HTTP_500_INTERNAL_SERVER_ERROR
    if isinstance(error, (JobControlError, DeploymentError)):
        return status.HTTP_502_BAD_GATEWAY
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def api_create_jobs_router(
    update_orchestrator: UpdateOrchestratorPort,
    default_savepoint_directory: str | None = None,
) -> APIRouter:
    """Create jobs router with the update trigger endpoint.

    Args:
        update_orchestrator: Orchestrator executing job updates.
        default_savepoint_directory: Savepoint directory used when a request carries none.

    Returns:
        APIRouter: Router exposing job update APIs.

    Raises:
        ValueError: Raised when dependencies are invalid.
    """

    if update_orchestrator is None:
        raise ValueError("update_orchestrator must not be None")

    router = APIRouter(prefix="/jobs", tags=["jobs"])

    @router.post("/update")
    def api_jobs_update_trigger(payload: UpdateJobPayload) -> JSONResponse:
        """Run one job update and report the resolved savepoint and deploy output.

        Returns:
            JSONResponse: Update result or typed error payload.
        """

        try:
            execution_result = update_orchestrator.job_execute(
                payload.payload_to_update_request(default_savepoint_directory=default_savepoint_directory)
            )
        except DeployerError as error:
            error_payload = {
                "status": "error",
                "error_type": type(error).__name__,
                "message": error.message,
            }
            return JSONResponse(content=error_payload, status_code=api_status_code_for_error(error))

        response_payload = {
            "job_name": execution_result.job_name,
            "status": "success",
            "savepoint_path": execution_result.savepoint_path,
            "output": execution_result.deploy_output.decode("utf-8", errors="replace"),
            "timeline": execution_result.stage_timeline,
        }
        return JSONResponse(content=response_payload, status_code=status.HTTP_200_OK)

    return router
