"""Project-native typed exceptions for job update and deployment failures."""

from __future__ import annotations


class DeployerError(Exception):
    """Base exception for deployer failures.

    Attributes:
        message: Human-readable failure message.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidArgumentError(DeployerError, ValueError):
    """Caller input is missing or blank where a value is required."""


class SavepointStorageError(DeployerError, OSError):
    """Savepoint storage could not be listed or an entry could not be inspected."""


class SavepointNotFoundError(DeployerError, LookupError):
    """No savepoint path could be resolved, or the resolved path does not exist."""


class AmbiguousSavepointError(DeployerError, LookupError):
    """More than one savepoint path was reported where exactly one is required."""


class JobConflictError(DeployerError, RuntimeError):
    """Several running instances share the job name, so no instance is authoritative.

    Attributes:
        job_name: Name of the conflicting job.
        instance_count: Number of running instances observed.
    """

    def __init__(self, job_name: str, instance_count: int):
        super().__init__(f"{job_name} has {instance_count} instances running")
        self.job_name = job_name
        self.instance_count = instance_count


class JobControlError(DeployerError, RuntimeError):
    """Job-control command failed (list, savepoint or cancel).

    Attributes:
        command: Executed command arguments.
        exit_code: Process exit code when the command ran.
        stderr: Captured standard error text.
    """

    def __init__(
        self,
        message: str,
        command: tuple[str, ...] = (),
        exit_code: int | None = None,
        stderr: str = "",
    ):
        super().__init__(message)
        self.command = command
        self.exit_code = exit_code
        self.stderr = stderr


class DeploymentError(DeployerError, RuntimeError):
    """Job submission or artifact retrieval failed."""
