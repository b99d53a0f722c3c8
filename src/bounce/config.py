"""
Configuration file parsing.

Bounce reads up to three configuration files, later ones overriding earlier
ones: the machine-level file, the user-level file and the project file
(``.bounce-config.yml``, found by walking up from the working directory).
Command-line options override all of them.

Example project config::

    log_level: debug
    build_file: build/bounce_targets.py
    describe_tasks: false
    parameters:
      port: 8080
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import platformdirs
import yaml

from bounce.errors import ConfigurationError
from bounce.logging import LogLevel

__all__ = [
    "BounceConfig",
    "ConfigError",
    "PROJECT_CONFIG_FILE",
    "get_user_config_path",
    "get_machine_config_path",
    "find_project_config",
    "parse_config_file",
    "load_config",
]

PROJECT_CONFIG_FILE = ".bounce-config.yml"

_KNOWN_KEYS = {"log_level", "build_file", "describe_tasks", "parameters"}


class ConfigError(ConfigurationError):
    """Raised when a configuration file is invalid."""

    pass


@dataclass
class BounceConfig:
    """Settings read from configuration files. None means not set."""

    log_level: Optional[LogLevel] = None
    build_file: Optional[Path] = None
    describe_tasks: Optional[bool] = None
    parameters: dict[str, Any] = field(default_factory=dict)

    def merged_with(self, other: BounceConfig) -> BounceConfig:
        """Return a config where settings made in ``other`` take precedence."""
        return BounceConfig(
            log_level=other.log_level if other.log_level is not None else self.log_level,
            build_file=other.build_file if other.build_file is not None else self.build_file,
            describe_tasks=(
                other.describe_tasks if other.describe_tasks is not None else self.describe_tasks
            ),
            parameters={**self.parameters, **other.parameters},
        )


def get_machine_config_path() -> Path:
    """
    Get the path to the machine-level (system-wide) configuration file.

    Returns:
        Path to the machine config file (may not exist)
    """
    config_dir = Path(platformdirs.site_config_dir("bounce"))
    return config_dir / "config.yml"


def get_user_config_path() -> Path:
    """
    Get the path to the user-level configuration file.

    Returns:
        Path to the user config file (may not exist)
    """
    config_dir: Path = Path(platformdirs.user_config_dir("bounce"))
    return config_dir / "config.yml"


def find_project_config(start_dir: Path) -> Optional[Path]:
    """
    Walk up the directory tree from start_dir to find the project config file.

    Returns:
        Path to the project config if found, None otherwise
    """
    try:
        current = start_dir.resolve()
    except (OSError, RuntimeError):
        # resolve() raises OSError on invalid paths, RuntimeError on symlink loops
        return None

    max_depth = 100
    for _ in range(max_depth):
        try:
            config_path = current / PROJECT_CONFIG_FILE
            if config_path.exists():
                return config_path
        except OSError:
            # Unreadable directory, keep walking up
            pass

        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


def parse_config_file(path: Path) -> Optional[BounceConfig]:
    """
    Parse a Bounce configuration file.

    Empty files are valid. Relative ``build_file`` paths are resolved against
    the directory holding the config file.

    Returns:
        The parsed config, or None if the file doesn't exist or is empty

    Raises:
        ConfigError: If the file is unreadable, malformed, or has invalid values
    """
    if not path.exists():
        return None

    try:
        content = path.read_text()
    except OSError as e:
        raise ConfigError(f"Error reading config file '{path}': {e}") from e

    if not content.strip():
        return None

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(f"Error parsing YAML in config file '{path}': {e}") from e

    if data is None:
        return None

    if not isinstance(data, dict):
        raise ConfigError(f"Error in config file '{path}': top level must be a dictionary")

    unknown = sorted(set(data) - _KNOWN_KEYS)
    if unknown:
        raise ConfigError(
            f"Error in config file '{path}': unknown keys: {', '.join(unknown)}"
        )

    config = BounceConfig()

    log_level = data.get("log_level")
    if log_level is not None:
        if not isinstance(log_level, str):
            raise ConfigError(f"Error in config file '{path}': Field 'log_level' must be a string")
        try:
            config.log_level = LogLevel.parse(log_level)
        except ValueError as e:
            raise ConfigError(f"Error in config file '{path}': {e}") from e

    build_file = data.get("build_file")
    if build_file is not None:
        if not isinstance(build_file, str):
            raise ConfigError(f"Error in config file '{path}': Field 'build_file' must be a string")
        config.build_file = path.parent / build_file

    describe_tasks = data.get("describe_tasks")
    if describe_tasks is not None:
        if not isinstance(describe_tasks, bool):
            raise ConfigError(
                f"Error in config file '{path}': Field 'describe_tasks' must be a boolean"
            )
        config.describe_tasks = describe_tasks

    parameters = data.get("parameters", {})
    if not isinstance(parameters, dict):
        raise ConfigError(f"Error in config file '{path}': Field 'parameters' must be a dictionary")
    for name, value in parameters.items():
        if not isinstance(name, str) or not isinstance(value, (str, int, float, bool)):
            raise ConfigError(
                f"Error in config file '{path}': parameter '{name}' must have a scalar value"
            )
    config.parameters = dict(parameters)

    return config


def load_config(start_dir: Optional[Path] = None) -> BounceConfig:
    """
    Load and merge machine, user and project configuration.

    Args:
        start_dir: Directory to search for the project config from (defaults to cwd)

    Raises:
        ConfigError: If any of the files is invalid
    """
    if start_dir is None:
        start_dir = Path.cwd()

    paths = [get_machine_config_path(), get_user_config_path()]
    project_config = find_project_config(start_dir)
    if project_config is not None:
        paths.append(project_config)

    config = BounceConfig()
    for path in paths:
        parsed = parse_config_file(path)
        if parsed is not None:
            config = config.merged_with(parsed)
    return config
