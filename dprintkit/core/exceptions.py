"""
Centralized exception hierarchy for DprintKit.

Every error raised by the resolver and installer derives from
DprintKitError so hosts can report failures with a single handler.
"""

from pathlib import Path
from typing import Optional


# ============================================================================
# Base Exceptions
# ============================================================================


class DprintKitError(Exception):
    """Base exception for all DprintKit errors."""

    pass


# ============================================================================
# Installer Exceptions
# ============================================================================


class InstallerError(DprintKitError):
    """Base exception for self-install (cache tier) failures."""

    pass


class UnsupportedPlatformError(InstallerError):
    """Raised when the host operating system has no release artifact."""

    pass


class UnsupportedArchitectureError(InstallerError):
    """
    Raised when no release artifact exists for the CPU architecture.

    This is terminal: retrying will not help, the tool has to be
    installed manually.
    """

    def __init__(self, architecture: str, tool_name: str = "dprint"):
        self.architecture = architecture
        super().__init__(
            f"Unsupported architecture: {architecture}. "
            f"Consider manually installing {tool_name} on your machine "
            "or worktree instead."
        )


class ReleaseIndexError(InstallerError):
    """Raised when the latest release cannot be queried."""

    pass


class AssetNotFoundError(InstallerError):
    """Raised when a release has no asset for the current platform."""

    def __init__(self, asset_name: str, version: str = ""):
        self.asset_name = asset_name
        self.version = version
        msg = f"No compatible asset found for {asset_name!r}"
        if version:
            msg += f" in release {version}"
        super().__init__(msg + ".")


class DownloadError(InstallerError):
    """Raised when transferring or extracting a release archive fails."""

    pass


class CacheError(InstallerError):
    """Raised when listing or pruning the release cache fails."""

    def __init__(self, message: str, path: Optional[Path] = None):
        self.path = path
        super().__init__(message)


# ============================================================================
# Configuration Exceptions
# ============================================================================


class ManifestReadError(DprintKitError):
    """
    Raised when a project manifest cannot be read or parsed.

    The resolver treats this as "dependency not declared".
    """

    def __init__(self, path: str, reason: str):
        self.path = path
        super().__init__(f"Could not read json file {path}: {reason}")


class SettingsError(DprintKitError):
    """Raised when the settings file is malformed."""

    pass
