"""Remote job artifact download over HTTP."""

from __future__ import annotations

import contextlib
import os
import tempfile
from typing import Final, Iterator
from urllib.parse import urlparse

import httpx

from flink_deployer.domain import DeploymentError, InvalidArgumentError


class HttpArtifactFetcher:
    """Download remote job artifacts into a local directory."""

    _USER_AGENT: Final[str] = "flink-deployer/1.0 (Python/httpx)"

    def __init__(
        self,
        download_directory: str,
        request_timeout_seconds: float = 30.0,
        client: httpx.Client | None = None,
    ):
        """Initialize artifact fetcher.

        Args:
            download_directory: Directory receiving downloaded artifacts.
            request_timeout_seconds: HTTP request timeout in seconds.
            client: Optional preconfigured HTTP client owned by the caller.

        Raises:
            ValueError: Raised when config values are invalid.
        """

        normalized_download_directory = download_directory.strip()
        if not normalized_download_directory:
            raise ValueError("download_directory must not be blank")
        if request_timeout_seconds <= 0:
            raise ValueError("request_timeout_seconds must be > 0")

        self._download_directory = normalized_download_directory
        self._request_timeout_seconds = request_timeout_seconds
        self._client = client

    def artifact_fetch(self, remote_url: str, api_token: str = "") -> str:
        """Download one artifact and return its local path.

        The artifact is written to a temporary file in the download directory
        and moved into place only once fully written.

        Args:
            remote_url: Artifact URL.
            api_token: Optional bearer token for the artifact host.

        Returns:
            str: Local path of the downloaded artifact.

        Raises:
            InvalidArgumentError: Raised when the URL has no file name.
            DeploymentError: Raised for transport failures, non-success HTTP status and write failures.
        """

        normalized_url = remote_url.strip()
        artifact_name = os.path.basename(urlparse(normalized_url).path)
        if not artifact_name:
            raise InvalidArgumentError(f"remote_filename has no file name: {remote_url}")

        headers: dict[str, str] = {}
        if api_token.strip():
            headers["Authorization"] = f"Bearer {api_token.strip()}"

        try:
            with self._artifact_client() as client:
                response = client.get(normalized_url, headers=headers)
        except httpx.HTTPError as error:
            raise DeploymentError(f"downloading artifact {normalized_url} failed: {error}") from error
        if response.status_code >= 400:
            raise DeploymentError(f"downloading artifact {normalized_url} returned HTTP {response.status_code}")

        local_path = os.path.join(self._download_directory, artifact_name)
        try:
            self._artifact_write_atomically(local_path, response.content)
        except OSError as error:
            raise DeploymentError(f"storing artifact {artifact_name} failed: {error}") from error
        return local_path

    @contextlib.contextmanager
    def _artifact_client(self) -> Iterator[httpx.Client]:
        if self._client is not None:
            yield self._client
            return
        with httpx.Client(
            timeout=self._request_timeout_seconds,
            follow_redirects=True,
            headers={"User-Agent": self._USER_AGENT},
        ) as client:
            yield client

    def _artifact_write_atomically(self, local_path: str, content: bytes) -> None:
        os.makedirs(self._download_directory, exist_ok=True)
        file_descriptor, partial_path = tempfile.mkstemp(
            dir=self._download_directory,
            prefix=f".{os.path.basename(local_path)}.",
            suffix=".part",
        )
        try:
            with os.fdopen(file_descriptor, "wb") as artifact_file:
                artifact_file.write(content)
            os.replace(partial_path, local_path)
        except OSError:
            with contextlib.suppress(FileNotFoundError):
                os.remove(partial_path)
            raise
