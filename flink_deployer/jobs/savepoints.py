"""Savepoint resolution steps used by the update workflow."""

from __future__ import annotations

import re
from typing import Final

from flink_deployer.adapters import FilesystemPort, JobControlPort
from flink_deployer.domain import AmbiguousSavepointError, SavepointDescriptor, SavepointNotFoundError
from flink_deployer.observability import get_logger

logger = get_logger(__name__)

SAVEPOINT_COMPLETED_PATTERN: Final[re.Pattern[str]] = re.compile(r"Savepoint completed\. Path: file:(.*)\n")


def job_savepoint_extract_path(raw_output: str) -> str:
    """Extract the savepoint path from savepoint-trigger output.

    Exactly one `Savepoint completed. Path: file:<path>` line is accepted.
    Several matches are rejected rather than resolved, because restoring from
    the wrong savepoint is worse than failing the update.

    Args:
        raw_output: Raw textual output of the savepoint trigger.

    Returns:
        str: Captured savepoint path.

    Raises:
        SavepointNotFoundError: Raised when no marker line is present.
        AmbiguousSavepointError: Raised when more than one marker line is present.
    """

    matches = SAVEPOINT_COMPLETED_PATTERN.findall(raw_output)
    if not matches:
        raise SavepointNotFoundError("could not extract savepoint path from Flink's output")
    if len(matches) > 1:
        raise AmbiguousSavepointError("multiple matches for savepoint found")
    return matches[0]


class SavepointLocator:
    """Find the most recently modified savepoint in a directory."""

    def __init__(self, filesystem: FilesystemPort):
        if filesystem is None:
            raise ValueError("filesystem must not be None")
        self._filesystem = filesystem

    def job_savepoint_find_latest(self, directory_path: str) -> SavepointDescriptor | None:
        """Return the newest immediate entry of `directory_path`.

        Among entries sharing the newest modification time, the one listed
        last wins.

        Args:
            directory_path: Savepoint directory, with or without trailing separator.

        Returns:
            SavepointDescriptor | None: Newest entry, or None when the directory is empty.

        Raises:
            SavepointStorageError: Raised when the directory or an entry cannot be read.
        """

        normalized_directory = directory_path.rstrip("/") or "/"
        newest: SavepointDescriptor | None = None
        for entry in self._filesystem.fs_list_entries(normalized_directory):
            if newest is None or entry.modified_at_unix >= newest.modified_at_unix:
                newest = SavepointDescriptor(
                    path=f"{normalized_directory.rstrip('/')}/{entry.name}",
                    modified_at_unix=entry.modified_at_unix,
                )
        return newest


class SavepointCreator:
    """Trigger a savepoint on one running instance and resolve its path."""

    def __init__(self, job_control: JobControlPort, filesystem: FilesystemPort):
        """Initialize savepoint creator dependencies.

        Args:
            job_control: Job-control port used to trigger savepoints.
            filesystem: Filesystem port used to verify the savepoint exists.

        Raises:
            ValueError: Raised when dependencies are missing.
        """

        if job_control is None:
            raise ValueError("job_control must not be None")
        if filesystem is None:
            raise ValueError("filesystem must not be None")
        self._job_control = job_control
        self._filesystem = filesystem

    def job_savepoint_create(self, job_id: str) -> str:
        """Trigger, extract and verify one savepoint.

        Each call produces a new savepoint on the running instance.

        Args:
            job_id: Running instance id.

        Returns:
            str: Existing savepoint path.

        Raises:
            JobControlError: Raised when the savepoint trigger fails.
            SavepointNotFoundError: Raised when no path is reported or the path does not exist.
            AmbiguousSavepointError: Raised when several paths are reported.
            SavepointStorageError: Raised when the existence check fails.
        """

        raw_output = self._job_control.job_control_trigger_savepoint(job_id)
        savepoint_path = job_savepoint_extract_path(raw_output)
        if not self._filesystem.fs_path_exists(savepoint_path):
            raise SavepointNotFoundError(f"savepoint path {savepoint_path} does not exist")

        logger.info("savepoint_created", job_id=job_id, savepoint_path=savepoint_path)
        return savepoint_path
