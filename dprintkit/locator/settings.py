"""
User settings for the resolver.

Settings are read from `dprintkit.yaml` in the project root:

    binary:
      path: /opt/dprint/bin/dprint
      arguments: ["lsp"]
    cache_dir: ~/.cache/dprintkit
    github_token: ghp_...

Every key is optional. Environment variables DPRINTKIT_CACHE_DIR and
GITHUB_TOKEN override the file.
"""

import logging
import os
import platform
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from ..core.exceptions import SettingsError

logger = logging.getLogger(__name__)

SETTINGS_FILE_NAME = "dprintkit.yaml"
CACHE_DIR_ENV = "DPRINTKIT_CACHE_DIR"
GITHUB_TOKEN_ENV = "GITHUB_TOKEN"


@dataclass
class BinarySettings:
    """Overrides for the executable and its arguments."""

    path: Optional[str] = None
    arguments: Optional[List[str]] = None


@dataclass
class Settings:
    """Resolved resolver settings."""

    binary: BinarySettings = field(default_factory=BinarySettings)
    cache_dir: Optional[Path] = None
    github_token: Optional[str] = None


def get_default_cache_dir() -> Path:
    """
    Get the default directory for downloaded releases.

    Returns:
        ~/.dprintkit/cache, or ~/AppData/Local/dprintkit/cache on Windows
    """
    if platform.system() == "Windows":
        base = Path.home() / "AppData" / "Local" / "dprintkit"
    else:
        base = Path.home() / ".dprintkit"

    return base / "cache"


def load_yaml_config(config_file: Path, required: bool = False) -> Dict[str, Any]:
    """
    Load and parse a YAML configuration file.

    Args:
        config_file: Path to YAML configuration file
        required: If True, raise error if file doesn't exist

    Returns:
        Configuration dictionary (empty dict if file doesn't exist and not required)

    Raises:
        SettingsError: If the file is required and missing, or is not valid YAML
    """
    if not config_file.exists():
        if required:
            raise SettingsError(f"Configuration file not found: {config_file}")
        logger.debug(f"Config file not found (optional): {config_file}")
        return {}

    logger.debug(f"Loading configuration from {config_file}")

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise SettingsError(f"Invalid YAML in {config_file}: {e}") from e

    config = config or {}
    if not isinstance(config, dict):
        raise SettingsError(f"Invalid configuration in {config_file}: expected a mapping")
    return config


def parse_settings(config: Dict[str, Any], source: str = "settings") -> Settings:
    """
    Validate a configuration mapping and build Settings.

    Raises:
        SettingsError: If a value has the wrong type
    """
    binary = config.get("binary") or {}
    if not isinstance(binary, dict):
        raise SettingsError(f"{source}: 'binary' must be a mapping")

    path = binary.get("path")
    if path is not None and not isinstance(path, str):
        raise SettingsError(f"{source}: 'binary.path' must be a string")

    arguments = binary.get("arguments")
    if arguments is not None:
        if not isinstance(arguments, list) or not all(
            isinstance(arg, str) for arg in arguments
        ):
            raise SettingsError(f"{source}: 'binary.arguments' must be a list of strings")

    cache_dir = config.get("cache_dir")
    if cache_dir is not None and not isinstance(cache_dir, str):
        raise SettingsError(f"{source}: 'cache_dir' must be a string")

    token = config.get("github_token")
    if token is not None and not isinstance(token, str):
        raise SettingsError(f"{source}: 'github_token' must be a string")

    return Settings(
        binary=BinarySettings(path=path, arguments=arguments),
        cache_dir=Path(cache_dir).expanduser() if cache_dir else None,
        github_token=token,
    )


def load_settings(
    project_root: Path, config_file: Optional[Path] = None
) -> Settings:
    """
    Load settings for a project.

    Args:
        project_root: Project root directory
        config_file: Explicit settings file (must exist if given)

    Returns:
        Settings with environment overrides applied
    """
    if config_file is not None:
        config = load_yaml_config(Path(config_file), required=True)
        source = str(config_file)
    else:
        default_file = Path(project_root) / SETTINGS_FILE_NAME
        config = load_yaml_config(default_file)
        source = str(default_file)

    settings = parse_settings(config, source)

    env_cache_dir = os.environ.get(CACHE_DIR_ENV)
    if env_cache_dir:
        settings.cache_dir = Path(env_cache_dir).expanduser()

    env_token = os.environ.get(GITHUB_TOKEN_ENV)
    if env_token:
        settings.github_token = env_token

    return settings


__all__ = [
    "BinarySettings",
    "Settings",
    "get_default_cache_dir",
    "load_yaml_config",
    "parse_settings",
    "load_settings",
    "SETTINGS_FILE_NAME",
]
