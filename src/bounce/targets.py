"""Targets and build file loading.

A build file is a Python module defining ``get_targets(parameters)``, which
returns a mapping of target names to root tasks.
"""

from __future__ import annotations

import importlib.util
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from bounce.errors import BounceError, ConfigurationError
from bounce.parameters import Parameters
from bounce.task import Task

BUILD_FILE_NAMES = ["bounce_targets.py", "bouncefile.py"]


@dataclass(eq=False)
class Target:
    """A root task exposed for selection by name."""

    name: str
    task: Task


def find_build_file(start_dir: Path | None = None) -> Path | None:
    """Find a build file in the current or parent directories.

    Args:
        start_dir: Directory to start searching from (defaults to cwd)

    Returns:
        Path to the build file if found, None otherwise
    """
    if start_dir is None:
        start_dir = Path.cwd()

    current = start_dir.resolve()

    while True:
        for filename in BUILD_FILE_NAMES:
            build_file = current / filename
            if build_file.exists():
                return build_file

        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


def load_targets(build_file: Path, parameters: Optional[Parameters] = None) -> dict[str, Task]:
    """
    Import a build file and ask it for its targets.

    Args:
        build_file: Path to the build file
        parameters: Registry the build file declares its parameters in

    Returns:
        Mapping of target names to tasks, in the order the build file gave them

    Raises:
        ConfigurationError: If the file cannot be imported, has no
            get_targets function, or returns something other than a mapping
            of names to tasks
    """
    if parameters is None:
        parameters = Parameters()

    module_name = f"_bounce_build_{abs(hash(build_file.resolve()))}"
    spec = importlib.util.spec_from_file_location(module_name, build_file)
    if spec is None or spec.loader is None:
        raise ConfigurationError(f"Cannot load build file: {build_file}")

    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except FileNotFoundError as e:
        sys.modules.pop(module_name, None)
        raise ConfigurationError(f"Build file not found: {build_file}") from e
    except SyntaxError as e:
        sys.modules.pop(module_name, None)
        raise ConfigurationError(f"Syntax error in build file {build_file}: {e}") from e
    except Exception as e:
        sys.modules.pop(module_name, None)
        raise ConfigurationError(f"Cannot load build file {build_file}: {e}") from e

    get_targets = getattr(module, "get_targets", None)
    if not callable(get_targets):
        raise ConfigurationError(f"Build file {build_file} does not define get_targets(parameters)")

    try:
        targets = get_targets(parameters)
    except BounceError:
        raise
    except Exception as e:
        raise ConfigurationError(f"get_targets in {build_file} failed: {e}") from e
    if not isinstance(targets, dict):
        raise ConfigurationError(
            f"get_targets in {build_file} returned a {type(targets).__name__}, expected a dict"
        )

    for name, task in targets.items():
        if not isinstance(name, str) or not isinstance(task, Task):
            raise ConfigurationError(
                f"get_targets in {build_file} must map target names to tasks, "
                f"got {name!r}: {type(task).__name__}"
            )

    return targets
