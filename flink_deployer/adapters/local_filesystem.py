"""Local filesystem adapter for savepoint storage inspection."""

from __future__ import annotations

import os

from flink_deployer.domain import FilesystemEntry, SavepointStorageError

from .interfaces import FilesystemPort


class LocalFilesystemAdapter(FilesystemPort):
    """Filesystem port backed by the local (or locally mounted) filesystem."""

    _FILE_URI_PREFIX = "file:"

    def fs_list_entries(self, directory: str) -> list[FilesystemEntry]:
        """List immediate directory entries with their modification times.

        Args:
            directory: Directory path.

        Returns:
            list[FilesystemEntry]: Entries in `os.scandir` order.

        Raises:
            SavepointStorageError: Raised when listing or stat fails.
        """

        local_directory = self._fs_strip_uri_prefix(directory)
        entries: list[FilesystemEntry] = []
        try:
            with os.scandir(local_directory) as directory_iterator:
                for directory_entry in directory_iterator:
                    modified_at = directory_entry.stat().st_mtime
                    entries.append(FilesystemEntry(name=directory_entry.name, modified_at_unix=int(modified_at)))
        except OSError as error:
            raise SavepointStorageError(f"listing savepoint directory {directory} failed: {error}") from error
        return entries

    def fs_path_exists(self, path: str) -> bool:
        """Return whether the path exists.

        Args:
            path: Local path or `file:` URI.

        Returns:
            bool: True when the path exists.

        Raises:
            SavepointStorageError: Raised for stat failures other than a missing path.
        """

        try:
            os.stat(self._fs_strip_uri_prefix(path))
        except FileNotFoundError:
            return False
        except OSError as error:
            raise SavepointStorageError(f"checking savepoint path {path} failed: {error}") from error
        return True

    def _fs_strip_uri_prefix(self, path: str) -> str:
        if path.startswith(self._FILE_URI_PREFIX):
            return path[len(self._FILE_URI_PREFIX):]
        return path
