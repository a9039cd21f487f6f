"""Adapter layer package for savepoint storage, job control and deployment boundaries."""

from .artifact_fetcher import HttpArtifactFetcher
from .flink_cli import (
	CommandResult,
	FlinkCliDeployAdapter,
	FlinkCliJobControlAdapter,
	flink_cli_parse_running_jobs,
	flink_cli_run_command,
)
from .interfaces import DeployPort, FilesystemPort, JobControlPort
from .local_filesystem import LocalFilesystemAdapter

__all__ = [
	"CommandResult",
	"DeployPort",
	"FilesystemPort",
	"FlinkCliDeployAdapter",
	"FlinkCliJobControlAdapter",
	"HttpArtifactFetcher",
	"JobControlPort",
	"LocalFilesystemAdapter",
	"flink_cli_parse_running_jobs",
	"flink_cli_run_command",
]
