"""Flink command-line client adapters for job control and job submission."""

from __future__ import annotations

import re
import subprocess
from dataclasses import dataclass
from typing import Callable, Final

from flink_deployer.domain import (
    DeploymentError,
    DeploymentRequest,
    InvalidArgumentError,
    JobControlError,
    domain_split_arguments,
)
from flink_deployer.observability import get_logger

from .artifact_fetcher import HttpArtifactFetcher
from .interfaces import DeployPort, JobControlPort

logger = get_logger(__name__)

_RUNNING_JOB_LINE_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^\S+ \S+ : (?P<job_id>[0-9A-Fa-f]+) : (?P<job_name>.+) \((?P<state>RUNNING|RESTARTING)\)\s*$",
    re.MULTILINE,
)


@dataclass(frozen=True)
class CommandResult:
    """Captured outcome of one CLI invocation.

    Attributes:
        exit_code: Process exit code.
        stdout: Raw standard output.
        stderr: Raw standard error.
    """

    exit_code: int
    stdout: bytes
    stderr: bytes


CommandRunner = Callable[[list[str]], CommandResult]


def flink_cli_run_command(command: list[str]) -> CommandResult:
    """Run one command to completion and capture its output.

    Args:
        command: Command arguments.

    Returns:
        CommandResult: Exit code and captured output.

    Raises:
        OSError: Raised when the executable cannot be started.
    """

    completed_process = subprocess.run(command, capture_output=True, check=False)
    return CommandResult(
        exit_code=completed_process.returncode,
        stdout=completed_process.stdout or b"",
        stderr=completed_process.stderr or b"",
    )


def flink_cli_parse_running_jobs(output: str) -> list[tuple[str, str]]:
    """Parse `flink list -r` output into (job id, job name) pairs.

    Args:
        output: Raw listing output.

    Returns:
        list[tuple[str, str]]: Running or restarting jobs in output order.
    """

    return [
        (match.group("job_id"), match.group("job_name"))
        for match in _RUNNING_JOB_LINE_PATTERN.finditer(output)
    ]


class _FlinkCliClient:
    """Shared Flink CLI invocation helpers."""

    def __init__(
        self,
        flink_binary_path: str = "flink",
        jobmanager_address: str | None = None,
        command_runner: CommandRunner | None = None,
    ):
        normalized_binary_path = flink_binary_path.strip()
        if not normalized_binary_path:
            raise ValueError("flink_binary_path must not be blank")

        self._flink_binary_path = normalized_binary_path
        self._jobmanager_address = (jobmanager_address or "").strip() or None
        self._command_runner = command_runner or flink_cli_run_command

    def _cli_build_command(self, action: str, *arguments: str) -> list[str]:
        command = [self._flink_binary_path, action]
        if self._jobmanager_address is not None:
            command.extend(["-m", self._jobmanager_address])
        command.extend(arguments)
        return command

    def _cli_execute(self, command: list[str]) -> CommandResult:
        """Run one Flink CLI command and raise on failure.

        Args:
            command: Command arguments.

        Returns:
            CommandResult: Successful command result.

        Raises:
            JobControlError: Raised when the command cannot start or exits non-zero.
        """

        logger.debug("flink_cli_command", command=command)
        try:
            result = self._command_runner(command)
        except OSError as error:
            raise JobControlError(
                f"running {command[0]} failed: {error}",
                command=tuple(command),
            ) from error

        if result.exit_code != 0:
            stderr_text = result.stderr.decode("utf-8", errors="replace").strip()
            raise JobControlError(
                f"{' '.join(command[:2])} exited with code {result.exit_code}: {stderr_text}",
                command=tuple(command),
                exit_code=result.exit_code,
                stderr=stderr_text,
            )
        return result


class FlinkCliJobControlAdapter(_FlinkCliClient, JobControlPort):
    """Job-control port backed by `flink list`, `flink savepoint` and `flink cancel`."""

    def __init__(
        self,
        flink_binary_path: str = "flink",
        jobmanager_address: str | None = None,
        savepoint_target_directory: str | None = None,
        command_runner: CommandRunner | None = None,
    ):
        """Initialize Flink CLI job-control adapter.

        Args:
            flink_binary_path: Path or name of the Flink CLI.
            jobmanager_address: Optional job manager address passed with `-m`.
            savepoint_target_directory: Optional target directory for triggered savepoints.
            command_runner: Optional command runner replacing subprocess execution.

        Raises:
            ValueError: Raised when the binary path is blank.
        """

        super().__init__(
            flink_binary_path=flink_binary_path,
            jobmanager_address=jobmanager_address,
            command_runner=command_runner,
        )
        self._savepoint_target_directory = (savepoint_target_directory or "").strip() or None

    def job_control_source_name(self) -> str:
        return f"flink_cli:{self._jobmanager_address or 'default'}"

    def job_control_list_running_job_ids(self, job_name: str) -> list[str]:
        """Return ids of running jobs whose name matches exactly.

        Args:
            job_name: User-facing job name.

        Returns:
            list[str]: Matching job ids in listing order.

        Raises:
            JobControlError: Raised when `flink list` fails.
        """

        result = self._cli_execute(self._cli_build_command("list", "-r"))
        listing_output = result.stdout.decode("utf-8", errors="replace")
        return [
            running_job_id
            for running_job_id, running_job_name in flink_cli_parse_running_jobs(listing_output)
            if running_job_name == job_name
        ]

    def job_control_trigger_savepoint(self, job_id: str) -> str:
        """Trigger a savepoint and return the CLI output text.

        Args:
            job_id: Running job id.

        Returns:
            str: Raw `flink savepoint` output.

        Raises:
            JobControlError: Raised when `flink savepoint` fails.
        """

        arguments = [job_id]
        if self._savepoint_target_directory is not None:
            arguments.append(self._savepoint_target_directory)
        result = self._cli_execute(self._cli_build_command("savepoint", *arguments))
        return result.stdout.decode("utf-8", errors="replace")

    def job_control_cancel(self, job_id: str) -> None:
        self._cli_execute(self._cli_build_command("cancel", job_id))


class FlinkCliDeployAdapter(_FlinkCliClient, DeployPort):
    """Deploy port backed by detached `flink run` submission."""

    def __init__(
        self,
        artifact_fetcher: HttpArtifactFetcher,
        flink_binary_path: str = "flink",
        jobmanager_address: str | None = None,
        command_runner: CommandRunner | None = None,
    ):
        """Initialize Flink CLI deploy adapter.

        Args:
            artifact_fetcher: Fetcher used for remote job artifacts.
            flink_binary_path: Path or name of the Flink CLI.
            jobmanager_address: Optional job manager address passed with `-m`.
            command_runner: Optional command runner replacing subprocess execution.

        Raises:
            ValueError: Raised when dependencies or config values are invalid.
        """

        if artifact_fetcher is None:
            raise ValueError("artifact_fetcher must not be None")
        super().__init__(
            flink_binary_path=flink_binary_path,
            jobmanager_address=jobmanager_address,
            command_runner=command_runner,
        )
        self._artifact_fetcher = artifact_fetcher

    def deploy_submit(self, request: DeploymentRequest) -> bytes:
        """Submit the job artifact, seeded from the savepoint when present.

        Args:
            request: Deployment contract.

        Returns:
            bytes: Raw `flink run` output.

        Raises:
            InvalidArgumentError: Raised when no artifact is given or arguments are malformed.
            DeploymentError: Raised when artifact download or submission fails.
        """

        run_arguments = domain_split_arguments(request.run_args, "run_args")
        jar_arguments = domain_split_arguments(request.jar_args, "jar_args")
        artifact_path = self._deploy_resolve_artifact(request)

        arguments = ["-d"]
        if request.savepoint_path:
            arguments.extend(["-s", request.savepoint_path])
            if request.allow_non_restorable_state:
                arguments.append("-n")
        arguments.extend(run_arguments)
        arguments.append(artifact_path)
        arguments.extend(jar_arguments)

        command = self._cli_build_command("run", *arguments)
        logger.info(
            "flink_job_submit",
            artifact_path=artifact_path,
            savepoint_path=request.savepoint_path,
        )
        try:
            result = self._cli_execute(command)
        except JobControlError as error:
            raise DeploymentError(f"job submission failed: {error.message}") from error
        return result.stdout

    def _deploy_resolve_artifact(self, request: DeploymentRequest) -> str:
        if request.remote_filename.strip():
            return self._artifact_fetcher.artifact_fetch(
                remote_url=request.remote_filename,
                api_token=request.api_token,
            )
        if request.local_filename.strip():
            return request.local_filename.strip()
        raise InvalidArgumentError("unspecified argument 'local_filename' or 'remote_filename'")
