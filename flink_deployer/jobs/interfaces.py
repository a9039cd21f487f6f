"""Typed interfaces for job-layer update orchestration."""

from dataclasses import dataclass
from typing import Protocol

from flink_deployer.domain import UpdateRequest


@dataclass(frozen=True)
class UpdateExecutionResult:
    """Result contract for one completed job update.

    Attributes:
        job_name: Updated job name.
        savepoint_path: Savepoint that seeded the deployment, or None for a fresh start.
        deploy_output: Raw deploy collaborator output.
        stage_timeline: Structured stage events recorded during the update.
    """

    job_name: str
    savepoint_path: str | None
    deploy_output: bytes
    stage_timeline: list[dict[str, object]]


class UpdateOrchestratorPort(Protocol):
    """Port definition for executing zero-downtime job updates."""

    def job_execute(self, request: UpdateRequest) -> UpdateExecutionResult:
        """Execute one job update.

        Args:
            request: Update request.

        Returns:
            UpdateExecutionResult: Completed update payload.

        Raises:
            DeployerError: Raised when the update did not complete.
        """
