"""
Self-managed installation of the latest release.

An AutoInstaller session is created once per resolution. It asks the
release index for the newest release, returns the cached binary when
that version is already present, and otherwise replaces the cache
contents with the new release.

Usage:
    installer = AutoInstaller.try_new(DPRINT_INSTALLER, cache_root, client)
    binary = installer.ensure_installed()
"""

import logging
from pathlib import Path
from typing import Callable, Optional

from ..core.exceptions import AssetNotFoundError
from ..core.interfaces import InstallationStatus, InstallationStatusObserver
from ..core.locking import LockManager
from ..core.platform import PlatformInfo
from .assets import AutoInstallerConfig
from .cache import VersionedCacheManager
from .index import DownloadedFileType, GitHubReleaseClient, Release

logger = logging.getLogger(__name__)


class LoggingStatusObserver(InstallationStatusObserver):
    """Reports status transitions through the module logger."""

    def on_status(self, status: InstallationStatus) -> None:
        if status is InstallationStatus.DOWNLOADING:
            logger.info("Downloading dprint...")
        else:
            logger.debug("Checking for dprint updates...")


class CallbackStatusObserver(InstallationStatusObserver):
    """Forwards status transitions to a plain callable."""

    def __init__(self, callback: Callable[[InstallationStatus], None]):
        self._callback = callback

    def on_status(self, status: InstallationStatus) -> None:
        self._callback(status)


class AutoInstaller:
    """
    One installer session bound to a release and a cache root.

    Attributes:
        config: Installer configuration
        latest_release: Release resolved when the session was created
        platform: Platform the binary is installed for
        cache: Cache manager for the cache root
        binary_path: Where the binary of latest_release lives
    """

    def __init__(
        self,
        config: AutoInstallerConfig,
        latest_release: Release,
        platform: PlatformInfo,
        cache: VersionedCacheManager,
        client: GitHubReleaseClient,
        observer: Optional[InstallationStatusObserver] = None,
        lock_manager: Optional[LockManager] = None,
    ):
        self.config = config
        self.latest_release = latest_release
        self.platform = platform
        self.cache = cache
        self.client = client
        self.observer = observer or LoggingStatusObserver()
        self.lock_manager = lock_manager
        self.binary_path = cache.binary_path(latest_release.version)

    @classmethod
    def try_new(
        cls,
        config: AutoInstallerConfig,
        cache_root: Path,
        client: GitHubReleaseClient,
        observer: Optional[InstallationStatusObserver] = None,
        platform: Optional[PlatformInfo] = None,
        lock_manager: Optional[LockManager] = None,
    ) -> "AutoInstaller":
        """
        Query the release index and open a session for its newest release.

        Raises:
            ReleaseIndexError: If the latest release cannot be determined
        """
        latest_release = client.latest_release(
            config.github_repo, require_assets=True, pre_release=False
        )
        platform = platform or client.current_platform()
        cache = VersionedCacheManager(cache_root, config, platform)

        return cls(
            config,
            latest_release,
            platform,
            cache,
            client,
            observer=observer,
            lock_manager=lock_manager,
        )

    @property
    def version(self) -> str:
        return self.latest_release.version

    def is_latest_release_installed(self) -> bool:
        return self.cache.is_version_installed(self.version)

    def ensure_installed(self) -> Path:
        """
        Make sure the latest release is installed.

        Returns:
            Path of the binary. Its existence is not re-checked after a
            fresh install.

        Raises:
            CacheError: If old releases cannot be removed
            UnsupportedArchitectureError: If no archive exists for this CPU
            AssetNotFoundError: If the release lacks the platform archive
            DownloadError: If transfer or extraction fails
        """
        self._notify(InstallationStatus.CHECKING_FOR_UPDATE)

        if self.is_latest_release_installed():
            logger.debug(f"dprint {self.version} already installed: {self.binary_path}")
            return self.binary_path

        if self.lock_manager is None:
            self._install()
            return self.binary_path

        with self.lock_manager.install_lock():
            # Another process may have finished the same install while we waited
            if self.is_latest_release_installed():
                logger.info(f"dprint {self.version} installed by another process")
                return self.binary_path
            self._install()

        return self.binary_path

    def _install(self) -> None:
        self.remove_old_releases()
        self.download_new_release()

    def remove_old_releases(self) -> None:
        removed = self.cache.purge_other_versions()
        if removed:
            logger.info(f"Removed {len(removed)} old release(s)")

    def download_new_release(self) -> None:
        self._notify(InstallationStatus.DOWNLOADING)

        asset_name = self.config.asset_name(self.platform.arch, self.platform.os)
        asset = self.latest_release.find_asset(asset_name)
        if asset is None:
            raise AssetNotFoundError(asset_name, self.version)

        logger.info(f"Installing dprint {self.version} ({asset_name})")
        self.client.download(
            asset.download_url,
            self.cache.release_dir(self.version),
            DownloadedFileType.ZIP,
        )

    def _notify(self, status: InstallationStatus) -> None:
        # Status reporting must never change the outcome of an install
        try:
            self.observer.on_status(status)
        except Exception as e:
            logger.warning(f"Status observer failed on {status.value}: {e}")


__all__ = [
    "AutoInstaller",
    "LoggingStatusObserver",
    "CallbackStatusObserver",
]
