"""Typed value objects shared across deployer layers.

All contracts are immutable and scoped to a single update or deploy call.
"""

from __future__ import annotations

import shlex
from dataclasses import dataclass, field

from .errors import InvalidArgumentError


@dataclass(frozen=True)
class FilesystemEntry:
    """One immediate entry of a listed directory.

    Attributes:
        name: Entry base name.
        modified_at_unix: Modification time in Unix seconds.
    """

    name: str
    modified_at_unix: int


@dataclass(frozen=True)
class SavepointDescriptor:
    """Savepoint location resolved from savepoint storage.

    Attributes:
        path: Savepoint path, existing at the time it was returned.
        modified_at_unix: Modification time used for latest-savepoint selection.
    """

    path: str
    modified_at_unix: int


@dataclass(frozen=True)
class UpdateRequest:
    """Caller input for one job update.

    Attributes:
        job_name: Name of the Flink job to update.
        run_args: Extra arguments passed to `flink run`.
        local_filename: Local path of the job artifact.
        remote_filename: Remote URL of the job artifact.
        api_token: Token used to download the remote artifact.
        jar_args: Arguments passed to the job main class.
        savepoint_directory: Fallback savepoint directory when no instance is running.
        allow_non_restorable_state: Whether state that cannot be mapped may be skipped on restore.
    """

    job_name: str
    run_args: str = ""
    local_filename: str = ""
    remote_filename: str = ""
    api_token: str = field(default="", repr=False)
    jar_args: str = ""
    savepoint_directory: str = ""
    allow_non_restorable_state: bool = False


@dataclass(frozen=True)
class DeploymentRequest:
    """Deploy collaborator input derived from an update request.

    Attributes:
        run_args: Extra arguments passed to `flink run`.
        local_filename: Local path of the job artifact.
        remote_filename: Remote URL of the job artifact.
        api_token: Token used to download the remote artifact.
        jar_args: Arguments passed to the job main class.
        savepoint_path: Savepoint seeding the deployment, or None for a fresh start.
        allow_non_restorable_state: Whether state that cannot be mapped may be skipped on restore.
    """

    run_args: str = ""
    local_filename: str = ""
    remote_filename: str = ""
    api_token: str = field(default="", repr=False)
    jar_args: str = ""
    savepoint_path: str | None = None
    allow_non_restorable_state: bool = False

    @classmethod
    def from_update_request(cls, request: UpdateRequest, savepoint_path: str | None) -> DeploymentRequest:
        """Carry update parameters into a deployment seeded from `savepoint_path`.

        Args:
            request: Validated update request.
            savepoint_path: Resolved savepoint path, or None for a fresh start.

        Returns:
            DeploymentRequest: Immutable deployment contract.
        """

        return cls(
            run_args=request.run_args,
            local_filename=request.local_filename,
            remote_filename=request.remote_filename,
            api_token=request.api_token,
            jar_args=request.jar_args,
            savepoint_path=savepoint_path or None,
            allow_non_restorable_state=request.allow_non_restorable_state,
        )


def domain_split_arguments(raw_arguments: str, argument_name: str) -> list[str]:
    """Split a shell-style argument string into CLI arguments.

    Args:
        raw_arguments: Argument string as given by the caller.
        argument_name: Request field name used in the error message.

    Returns:
        list[str]: Split arguments, empty for a blank string.

    Raises:
        InvalidArgumentError: Raised when quoting is unbalanced.
    """

    try:
        return shlex.split(raw_arguments)
    except ValueError as error:
        raise InvalidArgumentError(f"invalid argument '{argument_name}': {error}") from error


def domain_validate_deployment_inputs(request: UpdateRequest | DeploymentRequest) -> None:
    """Reject deployment inputs that can never be submitted.

    Args:
        request: Update or deployment request.

    Raises:
        InvalidArgumentError: Raised when no artifact is given or arguments do not split.
    """

    if not request.remote_filename.strip() and not request.local_filename.strip():
        raise InvalidArgumentError("unspecified argument 'local_filename' or 'remote_filename'")
    domain_split_arguments(request.run_args, "run_args")
    domain_split_arguments(request.jar_args, "jar_args")
