"""
Release download and cache management.

This package resolves release archives for the current platform, talks to
the GitHub release index and keeps the local cache at a single version.
"""

from .assets import AutoInstallerConfig, DPRINT_INSTALLER
from .cache import CacheEntry, VersionedCacheManager
from .index import (
    DownloadedFileType,
    GitHubReleaseClient,
    Release,
    ReleaseAsset,
)
from .installer import AutoInstaller, CallbackStatusObserver, LoggingStatusObserver

__all__ = [
    "AutoInstallerConfig",
    "DPRINT_INSTALLER",
    "CacheEntry",
    "VersionedCacheManager",
    "DownloadedFileType",
    "GitHubReleaseClient",
    "Release",
    "ReleaseAsset",
    "AutoInstaller",
    "CallbackStatusObserver",
    "LoggingStatusObserver",
]
