"""Typed interfaces for collaborator boundaries consumed by the update workflow."""

from typing import Protocol

from flink_deployer.domain import DeploymentRequest, FilesystemEntry


class FilesystemPort(Protocol):
    """Port definition for savepoint storage inspection."""

    def fs_list_entries(self, directory: str) -> list[FilesystemEntry]:
        """List immediate entries of one directory.

        Args:
            directory: Directory path without trailing separator.

        Returns:
            list[FilesystemEntry]: Entries in enumeration order.

        Raises:
            SavepointStorageError: Raised when listing or entry metadata fails.
        """

    def fs_path_exists(self, path: str) -> bool:
        """Return whether a path currently exists.

        Args:
            path: Candidate path.

        Returns:
            bool: True when the path exists.

        Raises:
            SavepointStorageError: Raised when existence cannot be determined.
        """


class JobControlPort(Protocol):
    """Port definition for listing, savepointing and cancelling running jobs."""

    def job_control_source_name(self) -> str:
        """Return job-control target label for diagnostics.

        Returns:
            str: Human-readable job-control target.
        """

    def job_control_list_running_job_ids(self, job_name: str) -> list[str]:
        """Return ids of running instances whose name equals `job_name`.

        Args:
            job_name: User-facing job name.

        Returns:
            list[str]: Running instance ids, possibly empty.

        Raises:
            JobControlError: Raised when the running jobs cannot be listed.
        """

    def job_control_trigger_savepoint(self, job_id: str) -> str:
        """Trigger a savepoint for one running instance.

        Args:
            job_id: Running instance id.

        Returns:
            str: Raw textual output of the savepoint operation.

        Raises:
            JobControlError: Raised when the savepoint could not be triggered.
        """

    def job_control_cancel(self, job_id: str) -> None:
        """Request cancellation of one running instance.

        Implementations report failures only as `RuntimeError` or `OSError`
        subclasses; the update treats those as a non-fatal cancel failure.
        Any other exception is a programming error and aborts the update.

        Args:
            job_id: Running instance id.

        Raises:
            JobControlError: Raised when the cancel request fails.
            OSError: Raised when the job-control transport cannot be reached.
        """


class DeployPort(Protocol):
    """Port definition for submitting a new job run."""

    def deploy_submit(self, request: DeploymentRequest) -> bytes:
        """Submit one deployment.

        Args:
            request: Deployment contract, optionally seeded from a savepoint.

        Returns:
            bytes: Raw submission output.

        Raises:
            DeploymentError: Raised when submission fails.
            InvalidArgumentError: Raised when no artifact is specified.
        """
