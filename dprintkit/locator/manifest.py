"""
Project manifest inspection.

Decides whether a project declares dprint as a dependency, either in
package.json (dependencies / devDependencies) or in deno.json (imports).
A manifest that is missing or malformed counts as "not declared".
"""

import json
import logging
from typing import Any, Dict

from ..core.exceptions import ManifestReadError
from .worktree import Worktree

logger = logging.getLogger(__name__)

PACKAGE_JSON = "package.json"
DENO_JSON = "deno.json"

NODE_PACKAGE_NAME = "dprint"


def read_json_file(worktree: Worktree, path: str) -> Dict[str, Any]:
    """
    Read and parse a JSON object from the worktree.

    Raises:
        ManifestReadError: If the file cannot be read or is not a JSON object
    """
    try:
        contents = worktree.read_text_file(path)
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestReadError(path, str(e)) from e

    # ValueError also covers oversized integer literals, RecursionError deep nesting
    try:
        data = json.loads(contents)
    except (ValueError, RecursionError) as e:
        raise ManifestReadError(path, str(e)) from e

    if not isinstance(data, dict):
        raise ManifestReadError(path, "top-level value is not an object")
    return data


def _declares(manifest: Dict[str, Any], section: str, package_name: str) -> bool:
    entries = manifest.get(section)
    return isinstance(entries, dict) and entries.get(package_name) is not None


def _load_or_empty(worktree: Worktree, path: str) -> Dict[str, Any]:
    try:
        return read_json_file(worktree, path)
    except ManifestReadError as e:
        logger.debug(f"Ignoring manifest: {e}")
        return {}


def is_declared_in_package_json(
    worktree: Worktree, package_name: str = NODE_PACKAGE_NAME
) -> bool:
    manifest = _load_or_empty(worktree, PACKAGE_JSON)
    return _declares(manifest, "dependencies", package_name) or _declares(
        manifest, "devDependencies", package_name
    )


def is_declared_in_deno_json(
    worktree: Worktree, package_name: str = NODE_PACKAGE_NAME
) -> bool:
    manifest = _load_or_empty(worktree, DENO_JSON)
    return _declares(manifest, "imports", package_name)


def is_dependency_declared(
    worktree: Worktree, package_name: str = NODE_PACKAGE_NAME
) -> bool:
    """True if either supported manifest declares `package_name`."""
    return is_declared_in_package_json(
        worktree, package_name
    ) or is_declared_in_deno_json(worktree, package_name)


__all__ = [
    "read_json_file",
    "is_declared_in_package_json",
    "is_declared_in_deno_json",
    "is_dependency_declared",
    "PACKAGE_JSON",
    "DENO_JSON",
    "NODE_PACKAGE_NAME",
]
