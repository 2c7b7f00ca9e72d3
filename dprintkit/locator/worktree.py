"""
Project worktree access.

The resolver only needs two things from a project: reading a text file
relative to its root, and looking an executable up on the search path.
"""

import logging
import os
import shutil
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)


class Worktree:
    """
    A project directory on the local filesystem.

    Attributes:
        root: Absolute project root
        path_env: Search path used by which() (default: $PATH)
    """

    def __init__(self, root: Union[str, Path], path_env: Optional[str] = None):
        self.root = Path(root).resolve()
        self.path_env = path_env

    def root_path(self) -> str:
        return str(self.root)

    def read_text_file(self, relative_path: str) -> str:
        """
        Read a file relative to the project root.

        Raises:
            OSError: If the file cannot be read
        """
        return (self.root / relative_path).read_text(encoding="utf-8")

    def which(self, binary_name: str) -> Optional[str]:
        """
        Resolve an executable name against the search path.

        Returns:
            Absolute path of the executable, or None if not found
        """
        path_env = self.path_env if self.path_env is not None else os.environ.get("PATH")
        found = shutil.which(binary_name, path=path_env)
        if found:
            logger.debug(f"Found {binary_name} on PATH: {found}")
        return found


__all__ = ["Worktree"]
