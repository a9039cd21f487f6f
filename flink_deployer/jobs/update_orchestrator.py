"""Job-layer update orchestrator: savepoint, stop and redeploy a running Flink job."""

from __future__ import annotations

import structlog

from flink_deployer.adapters import DeployPort, JobControlPort
from flink_deployer.domain import (
    DeploymentRequest,
    InvalidArgumentError,
    JobConflictError,
    UpdateRequest,
    domain_build_stage_event,
    domain_validate_deployment_inputs,
)
from flink_deployer.observability import get_logger

from .interfaces import UpdateExecutionResult, UpdateOrchestratorPort
from .savepoints import SavepointCreator, SavepointLocator

logger = get_logger(__name__)


class UpdateJobOrchestrator(UpdateOrchestratorPort):
    """Reconcile running instances with the savepoint seeding the redeployment.

    Zero running instances restore from the newest savepoint in the request's
    savepoint directory, one running instance is savepointed then cancelled,
    and several running instances abort the update.
    """

    def __init__(
        self,
        job_control: JobControlPort,
        deployer: DeployPort,
        savepoint_locator: SavepointLocator,
        savepoint_creator: SavepointCreator,
    ):
        """Initialize update orchestrator dependencies.

        Args:
            job_control: Job-control port for listing and cancelling instances.
            deployer: Deploy port submitting the new job run.
            savepoint_locator: Latest-savepoint lookup for the no-instance path.
            savepoint_creator: Savepoint trigger for the single-instance path.

        Raises:
            ValueError: Raised when dependencies are missing.
        """

        if job_control is None:
            raise ValueError("job_control must not be None")
        if deployer is None:
            raise ValueError("deployer must not be None")
        if savepoint_locator is None:
            raise ValueError("savepoint_locator must not be None")
        if savepoint_creator is None:
            raise ValueError("savepoint_creator must not be None")

        self._job_control = job_control
        self._deployer = deployer
        self._savepoint_locator = savepoint_locator
        self._savepoint_creator = savepoint_creator

    def job_execute(self, request: UpdateRequest) -> UpdateExecutionResult:
        """Execute one update: resolve the seeding savepoint, then deploy.

        Args:
            request: Update request.

        Returns:
            UpdateExecutionResult: Deploy output and stage timeline.

        Raises:
            InvalidArgumentError: Raised when job name, artifact or required savepoint directory is
                missing, or when run or jar arguments are malformed.
            JobConflictError: Raised when more than one instance is running.
            JobControlError: Raised when listing instances or triggering the savepoint fails.
            SavepointNotFoundError: Raised when the triggered savepoint cannot be resolved.
            AmbiguousSavepointError: Raised when the savepoint output reports several paths.
            SavepointStorageError: Raised when savepoint storage cannot be read.
            DeploymentError: Raised when submission fails.
        """

        job_name = request.job_name.strip()
        if not job_name:
            raise InvalidArgumentError("unspecified argument 'job_name'")
        # Rejected before the running instance is savepointed and cancelled.
        domain_validate_deployment_inputs(request)

        timeline: list[dict[str, object]] = []
        with structlog.contextvars.bound_contextvars(job_name=job_name):
            logger.info("job_update_started")
            timeline.append(domain_build_stage_event(stage="update", status="started"))

            try:
                timeline.append(domain_build_stage_event(stage="query", status="started"))
                job_ids = self._job_control.job_control_list_running_job_ids(job_name)
            except (RuntimeError, OSError) as error:
                logger.error("running_jobs_query_failed", error=str(error))
                raise
            timeline.append(
                domain_build_stage_event(
                    stage="query",
                    status="completed",
                    details={"running_job_ids": list(job_ids)},
                )
            )

            if len(job_ids) == 0:
                savepoint_path = self._job_resolve_latest_savepoint(request, timeline)
            elif len(job_ids) == 1:
                savepoint_path = self._job_savepoint_and_cancel(job_ids[0], timeline)
            else:
                logger.error("job_update_conflict", instance_count=len(job_ids))
                raise JobConflictError(job_name=job_name, instance_count=len(job_ids))

            deployment_request = DeploymentRequest.from_update_request(request, savepoint_path=savepoint_path)
            timeline.append(
                domain_build_stage_event(
                    stage="deploy",
                    status="started",
                    details={"savepoint_path": savepoint_path},
                )
            )
            deploy_output = self._deployer.deploy_submit(deployment_request)
            timeline.append(domain_build_stage_event(stage="deploy", status="completed"))
            timeline.append(domain_build_stage_event(stage="update", status="success"))
            logger.info("job_update_completed", savepoint_path=savepoint_path)

        return UpdateExecutionResult(
            job_name=job_name,
            savepoint_path=savepoint_path,
            deploy_output=deploy_output,
            stage_timeline=timeline,
        )

    def _job_resolve_latest_savepoint(
        self,
        request: UpdateRequest,
        timeline: list[dict[str, object]],
    ) -> str | None:
        """Resolve the fallback savepoint when no instance is running.

        Args:
            request: Update request carrying the savepoint directory.
            timeline: Mutable stage timeline events.

        Returns:
            str | None: Newest savepoint path, or None for a fresh start.

        Raises:
            InvalidArgumentError: Raised when the savepoint directory is blank.
            SavepointStorageError: Raised when the directory cannot be read.
        """

        logger.info("no_running_instance", detail="using last available savepoint")
        savepoint_directory = request.savepoint_directory.strip()
        if not savepoint_directory:
            raise InvalidArgumentError(
                "cannot retrieve the latest savepoint without specifying the savepoint directory"
            )

        timeline.append(
            domain_build_stage_event(
                stage="savepoint",
                status="started",
                details={"source": "latest", "directory": savepoint_directory},
            )
        )
        try:
            latest_savepoint = self._savepoint_locator.job_savepoint_find_latest(savepoint_directory)
        except OSError as error:
            logger.error("latest_savepoint_lookup_failed", error=str(error))
            raise

        if latest_savepoint is None:
            logger.info("no_savepoint_found", directory=savepoint_directory)
            timeline.append(
                domain_build_stage_event(
                    stage="savepoint",
                    status="skipped",
                    details={"skip_reason": "savepoint_directory_empty"},
                )
            )
            return None

        timeline.append(
            domain_build_stage_event(
                stage="savepoint",
                status="completed",
                details={"savepoint_path": latest_savepoint.path},
            )
        )
        return latest_savepoint.path

    def _job_savepoint_and_cancel(self, job_id: str, timeline: list[dict[str, object]]) -> str:
        """Savepoint the single running instance, then request its cancellation.

        Cancellation is best-effort: a failed cancel is recorded and the update
        proceeds to deploy.

        Args:
            job_id: Running instance id.
            timeline: Mutable stage timeline events.

        Returns:
            str: Created savepoint path.

        Raises:
            JobControlError: Raised when the savepoint trigger fails.
            SavepointNotFoundError: Raised when the savepoint path cannot be resolved.
            AmbiguousSavepointError: Raised when several savepoint paths are reported.
        """

        logger.info("single_running_instance", job_id=job_id)
        timeline.append(
            domain_build_stage_event(
                stage="savepoint",
                status="started",
                details={"source": "running_instance", "job_id": job_id},
            )
        )
        savepoint_path = self._savepoint_creator.job_savepoint_create(job_id)
        timeline.append(
            domain_build_stage_event(
                stage="savepoint",
                status="completed",
                details={"savepoint_path": savepoint_path},
            )
        )

        timeline.append(domain_build_stage_event(stage="cancel", status="started", details={"job_id": job_id}))
        try:
            self._job_control.job_control_cancel(job_id)
        except (RuntimeError, OSError) as error:
            logger.warning("job_cancel_failed", job_id=job_id, error=str(error))
            timeline.append(
                domain_build_stage_event(
                    stage="cancel",
                    status="failed",
                    details={"error_type": type(error).__name__, "error_message": str(error)},
                )
            )
        else:
            timeline.append(domain_build_stage_event(stage="cancel", status="completed"))
        return savepoint_path
