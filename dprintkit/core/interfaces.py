"""
Core interfaces for DprintKit.

This module defines the abstract interfaces the resolver depends on, so
each resolution tier and the status sink can be swapped or faked without
the core knowing their implementation.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional


class InstallationStatus(Enum):
    """Observable installer state transitions."""

    CHECKING_FOR_UPDATE = "checking-for-update"
    DOWNLOADING = "downloading"


class InstallationStatusObserver(ABC):
    """
    Receives installer status transitions.

    Notifications are advisory; implementations must not influence the
    installer's control flow.
    """

    @abstractmethod
    def on_status(self, status: InstallationStatus) -> None:
        """
        Handle a status transition.

        Args:
            status: The state the installer just entered
        """
        pass


class BinarySource(ABC):
    """
    Abstract interface for one tier of the binary resolution chain.

    A source either yields a path to the executable or None, in which case
    resolution falls through to the next tier.
    """

    #: Short name used in logs and diagnostics
    name: str = "source"

    @abstractmethod
    def locate(self) -> Optional[str]:
        """
        Locate the executable.

        Returns:
            Path to the executable, or None if this tier does not apply
        """
        pass
