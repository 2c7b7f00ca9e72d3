"""
GitHub release index client.

Queries the GitHub REST API for the newest qualifying release of a
repository and materializes one of its assets on disk. The download is
staged next to its destination and only renamed into place once the
archive has been fully extracted, so a failed install never leaves a
directory that looks complete.
"""

import logging
import os
import shutil
import tempfile
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, List, Optional

import requests
from requests.exceptions import RequestException

from ..core.download import DownloadProgress, download_file
from ..core.exceptions import DownloadError, ReleaseIndexError
from ..core.filesystem import (
    FilesystemError,
    extract_archive,
    make_executable,
    safe_unlink,
)
from ..core.platform import PlatformInfo, detect_platform

logger = logging.getLogger(__name__)

GITHUB_API_URL = "https://api.github.com"


class DownloadedFileType(Enum):
    """How a downloaded asset is materialized."""

    ZIP = "zip"
    GZIP_TAR = "tar.gz"
    UNCOMPRESSED = "uncompressed"


@dataclass
class ReleaseAsset:
    """A downloadable file attached to a release."""

    name: str
    download_url: str


@dataclass
class Release:
    """A published release and its assets."""

    version: str
    assets: List[ReleaseAsset] = field(default_factory=list)

    def find_asset(self, name: str) -> Optional[ReleaseAsset]:
        """Return the asset whose name equals `name` exactly."""
        for asset in self.assets:
            if asset.name == name:
                return asset
        return None


class GitHubReleaseClient:
    """
    Release index backed by the GitHub REST API.

    Attributes:
        api_url: Base URL of the API
        timeout: Request timeout in seconds
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        api_url: str = GITHUB_API_URL,
        token: Optional[str] = None,
        timeout: int = 30,
        progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
    ):
        """
        Initialize the client.

        Args:
            session: requests session to use (a new one if None)
            api_url: GitHub API base URL
            token: Optional token sent as a bearer credential
            timeout: Request timeout in seconds
            progress_callback: Optional callback for download progress
        """
        self.session = session or requests.Session()
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.progress_callback = progress_callback

        self.session.headers["Accept"] = "application/vnd.github+json"
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"

    def current_platform(self) -> PlatformInfo:
        """Platform the client downloads for."""
        return detect_platform()

    def latest_release(
        self, repo: str, require_assets: bool = True, pre_release: bool = False
    ) -> Release:
        """
        Get the newest release of a repository that matches the filters.

        Args:
            repo: Repository coordinate ("owner/name")
            require_assets: Skip releases without assets
            pre_release: Accept pre-releases

        Returns:
            The newest qualifying Release

        Raises:
            ReleaseIndexError: If the query fails or nothing qualifies
        """
        url = f"{self.api_url}/repos/{repo}/releases"
        logger.debug(f"Querying releases: {url}")

        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
        except RequestException as e:
            raise ReleaseIndexError(
                f"Failed to fetch latest release of {repo}: {e}"
            ) from e

        # requests' JSONDecodeError derives from both ValueError and RequestException
        try:
            data = response.json()
        except ValueError as e:
            raise ReleaseIndexError(
                f"Invalid release index response for {repo}: {e}"
            ) from e

        if not isinstance(data, list):
            raise ReleaseIndexError(
                f"Invalid release index response for {repo}: expected a list"
            )

        for entry in data:
            release = self._qualifying_release(entry, require_assets, pre_release)
            if release is not None:
                logger.debug(f"Latest release of {repo}: {release.version}")
                return release

        raise ReleaseIndexError(f"No qualifying release found for {repo}")

    @staticmethod
    def _qualifying_release(
        entry: Any, require_assets: bool, pre_release: bool
    ) -> Optional[Release]:
        if not isinstance(entry, dict) or entry.get("draft"):
            return None
        if entry.get("prerelease") and not pre_release:
            return None

        version = entry.get("tag_name")
        if not version:
            return None

        assets = [
            ReleaseAsset(name=a["name"], download_url=a["browser_download_url"])
            for a in entry.get("assets") or []
            if isinstance(a, dict) and "name" in a and "browser_download_url" in a
        ]
        if require_assets and not assets:
            return None

        return Release(version=version, assets=assets)

    def download(
        self,
        url: str,
        destination: Path,
        file_type: DownloadedFileType = DownloadedFileType.ZIP,
    ) -> Path:
        """
        Download an asset and materialize it at `destination`.

        For archives, `destination` becomes the directory holding the
        extracted contents. For UNCOMPRESSED assets it is the file itself.

        Args:
            url: Asset download URL
            destination: Final path of the extracted directory (or file)
            file_type: Archive format of the asset

        Returns:
            destination

        Raises:
            DownloadError: If the transfer or extraction fails
        """
        destination = Path(destination)
        parent = destination.parent
        parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(
            prefix=".download-", suffix=f".{file_type.value}", dir=parent
        )
        os.close(fd)
        archive_path = Path(tmp_name)
        staging_dir = Path(tempfile.mkdtemp(prefix=".staging-", dir=parent))

        try:
            download_file(
                url,
                archive_path,
                progress_callback=self.progress_callback,
                timeout=self.timeout,
                session=self.session,
            )

            if file_type is DownloadedFileType.UNCOMPRESSED:
                make_executable(archive_path)
                os.replace(archive_path, destination)
            else:
                extract_archive(archive_path, staging_dir)
                for extracted in staging_dir.rglob("*"):
                    if extracted.is_file():
                        make_executable(extracted)
                staging_dir.rename(destination)

            logger.info(f"Installed {url} into {destination}")
            return destination

        except (FilesystemError, OSError) as e:
            raise DownloadError(f"Failed to install {url} into {destination}: {e}") from e
        finally:
            safe_unlink(archive_path)
            if staging_dir.exists():
                shutil.rmtree(staging_dir, ignore_errors=True)


__all__ = [
    "DownloadedFileType",
    "ReleaseAsset",
    "Release",
    "GitHubReleaseClient",
    "GITHUB_API_URL",
]
