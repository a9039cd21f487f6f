"""Regression tests for savepoint location, extraction and creation."""

from __future__ import annotations

import pytest

from flink_deployer.domain import (
    AmbiguousSavepointError,
    FilesystemEntry,
    JobControlError,
    SavepointNotFoundError,
    SavepointStorageError,
)
from flink_deployer.jobs import SavepointCreator, SavepointLocator, job_savepoint_extract_path


class _FilesystemStub:
    """Filesystem stub returning fixed directory listings and existing paths."""

    def __init__(
        self,
        entries: list[FilesystemEntry] | None = None,
        existing_paths: set[str] | None = None,
        list_error: Exception | None = None,
        exists_error: Exception | None = None,
    ):
        """Initialize filesystem stub state.

        Args:
            entries: Entries returned for any listed directory.
            existing_paths: Paths reported as existing.
            list_error: Optional error raised by listing.
            exists_error: Optional error raised by existence checks.
        """

        self._entries = entries or []
        self._existing_paths = existing_paths or set()
        self._list_error = list_error
        self._exists_error = exists_error
        self.listed_directories: list[str] = []

    def fs_list_entries(self, directory: str) -> list[FilesystemEntry]:
        self.listed_directories.append(directory)
        if self._list_error is not None:
            raise self._list_error
        return list(self._entries)

    def fs_path_exists(self, path: str) -> bool:
        if self._exists_error is not None:
            raise self._exists_error
        return path in self._existing_paths


class _JobControlStub:
    """Job-control stub returning deterministic savepoint output."""

    def __init__(self, savepoint_output: str = "", savepoint_error: Exception | None = None):
        self._savepoint_output = savepoint_output
        self._savepoint_error = savepoint_error
        self.savepoint_calls: list[str] = []

    def job_control_source_name(self) -> str:
        return "stub"

    def job_control_list_running_job_ids(self, job_name: str) -> list[str]:
        _ = job_name
        return []

    def job_control_trigger_savepoint(self, job_id: str) -> str:
        self.savepoint_calls.append(job_id)
        if self._savepoint_error is not None:
            raise self._savepoint_error
        return self._savepoint_output

    def job_control_cancel(self, job_id: str) -> None:
        _ = job_id


def test_jobs_savepoint_locator_returns_newest_entry() -> None:
    """Return the entry with the greatest modification time.

    Returns:
        None: Assertions validate latest-savepoint selection.

    Raises:
        AssertionError: Raised when an older entry is selected.
    """

    filesystem = _FilesystemStub(
        entries=[
            FilesystemEntry(name="savepoint-a", modified_at_unix=100),
            FilesystemEntry(name="savepoint-c", modified_at_unix=300),
            FilesystemEntry(name="savepoint-b", modified_at_unix=200),
        ]
    )

    latest = SavepointLocator(filesystem=filesystem).job_savepoint_find_latest("/data/savepoints")

    assert latest is not None
    assert latest.path == "/data/savepoints/savepoint-c"
    assert latest.modified_at_unix == 300


def test_jobs_savepoint_locator_strips_trailing_separator() -> None:
    """List the normalized directory and build paths without doubled separators.

    Returns:
        None: Assertions validate path normalization.

    Raises:
        AssertionError: Raised when trailing separators leak into paths.
    """

    filesystem = _FilesystemStub(entries=[FilesystemEntry(name="savepoint-1", modified_at_unix=5)])

    latest = SavepointLocator(filesystem=filesystem).job_savepoint_find_latest("/data/savepoints/")

    assert filesystem.listed_directories == ["/data/savepoints"]
    assert latest is not None
    assert latest.path == "/data/savepoints/savepoint-1"


def test_jobs_savepoint_locator_returns_none_for_empty_directory() -> None:
    """Return None rather than failing when the directory has no entries.

    Returns:
        None: Assertions validate empty-directory handling.

    Raises:
        AssertionError: Raised when an empty directory yields a path.
    """

    assert SavepointLocator(filesystem=_FilesystemStub()).job_savepoint_find_latest("/empty") is None


def test_jobs_savepoint_locator_last_observed_wins_on_equal_timestamps() -> None:
    """Prefer the entry listed last among equal newest modification times.

    Returns:
        None: Assertions validate tie-break ordering.

    Raises:
        AssertionError: Raised when an earlier tied entry is selected.
    """

    filesystem = _FilesystemStub(
        entries=[
            FilesystemEntry(name="first", modified_at_unix=50),
            FilesystemEntry(name="second", modified_at_unix=50),
            FilesystemEntry(name="older", modified_at_unix=10),
        ]
    )

    latest = SavepointLocator(filesystem=filesystem).job_savepoint_find_latest("/sp")

    assert latest is not None
    assert latest.path == "/sp/second"


def test_jobs_savepoint_locator_propagates_storage_errors() -> None:
    """Propagate listing failures as storage errors.

    Returns:
        None: Assertions validate error propagation.

    Raises:
        AssertionError: Raised when listing failures are swallowed.
    """

    filesystem = _FilesystemStub(list_error=SavepointStorageError("listing failed"))

    with pytest.raises(SavepointStorageError):
        SavepointLocator(filesystem=filesystem).job_savepoint_find_latest("/sp")


def test_jobs_savepoint_extract_path_returns_single_match() -> None:
    """Extract the path from output with exactly one completion line.

    Returns:
        None: Assertions validate extracted path.

    Raises:
        AssertionError: Raised when extraction returns an unexpected path.
    """

    raw_output = (
        "Triggering savepoint for job 5c4d2d1e.\n"
        "Waiting for response...\n"
        "Savepoint completed. Path: file:/data/savepoints/savepoint-5c4d2d-1a2b3c\n"
        "You can resume your program from this savepoint with the run command.\n"
    )

    assert job_savepoint_extract_path(raw_output) == "/data/savepoints/savepoint-5c4d2d-1a2b3c"


def test_jobs_savepoint_extract_path_rejects_missing_marker() -> None:
    """Fail with not-found when no completion line is present.

    Returns:
        None: Assertions validate strict parsing.

    Raises:
        AssertionError: Raised when missing markers are accepted.
    """

    with pytest.raises(SavepointNotFoundError, match="could not extract savepoint path"):
        job_savepoint_extract_path("Triggering savepoint for job 5c4d2d1e.\nWaiting for response...\n")


def test_jobs_savepoint_extract_path_requires_line_break() -> None:
    """Reject a completion marker that is not terminated by a line break.

    Returns:
        None: Assertions validate strict parsing.

    Raises:
        AssertionError: Raised when an unterminated marker is accepted.
    """

    with pytest.raises(SavepointNotFoundError):
        job_savepoint_extract_path("Savepoint completed. Path: file:/sp/unterminated")


def test_jobs_savepoint_extract_path_rejects_multiple_matches() -> None:
    """Fail with ambiguity rather than choosing among several paths.

    Returns:
        None: Assertions validate ambiguity handling.

    Raises:
        AssertionError: Raised when one of several paths is picked.
    """

    raw_output = (
        "Savepoint completed. Path: file:/sp/one\n"
        "Savepoint completed. Path: file:/sp/two\n"
    )

    with pytest.raises(AmbiguousSavepointError, match="multiple matches"):
        job_savepoint_extract_path(raw_output)


def test_jobs_savepoint_creator_returns_existing_path() -> None:
    """Trigger, extract and verify the savepoint for one job id.

    Returns:
        None: Assertions validate creator flow.

    Raises:
        AssertionError: Raised when the creator returns an unexpected path.
    """

    job_control = _JobControlStub(savepoint_output="...\nSavepoint completed. Path: file:/sp/orders-1\n...")
    filesystem = _FilesystemStub(existing_paths={"/sp/orders-1"})

    savepoint_path = SavepointCreator(job_control=job_control, filesystem=filesystem).job_savepoint_create("jid-7")

    assert savepoint_path == "/sp/orders-1"
    assert job_control.savepoint_calls == ["jid-7"]


def test_jobs_savepoint_creator_rejects_missing_savepoint_path() -> None:
    """Fail when the reported savepoint does not exist in storage.

    Returns:
        None: Assertions validate existence verification.

    Raises:
        AssertionError: Raised when a missing path is returned.
    """

    job_control = _JobControlStub(savepoint_output="Savepoint completed. Path: file:/sp/gone\n")

    with pytest.raises(SavepointNotFoundError, match="/sp/gone"):
        SavepointCreator(job_control=job_control, filesystem=_FilesystemStub()).job_savepoint_create("jid-1")


def test_jobs_savepoint_creator_propagates_existence_check_failure() -> None:
    """Propagate the storage error raised by the existence check unchanged.

    Returns:
        None: Assertions validate error identity.

    Raises:
        AssertionError: Raised when the storage error is replaced.
    """

    storage_error = SavepointStorageError("permission denied")
    job_control = _JobControlStub(savepoint_output="Savepoint completed. Path: file:/sp/x\n")
    filesystem = _FilesystemStub(exists_error=storage_error)

    with pytest.raises(SavepointStorageError) as raised:
        SavepointCreator(job_control=job_control, filesystem=filesystem).job_savepoint_create("jid-1")

    assert raised.value is storage_error


def test_jobs_savepoint_creator_propagates_trigger_failure() -> None:
    """Propagate job-control failures from the savepoint trigger.

    Returns:
        None: Assertions validate error propagation.

    Raises:
        AssertionError: Raised when trigger failures are swallowed.
    """

    job_control = _JobControlStub(savepoint_error=JobControlError("flink savepoint exited with code 1"))

    with pytest.raises(JobControlError):
        SavepointCreator(job_control=job_control, filesystem=_FilesystemStub()).job_savepoint_create("jid-1")
