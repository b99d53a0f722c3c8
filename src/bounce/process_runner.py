"""Process execution abstraction layer.

Tasks that shell out go through a ProcessRunner so that command output can be
controlled from the command line and replaced in tests.
"""

import subprocess
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any

from rich.markup import escape

from bounce.logging import Logger

__all__ = [
    "CommandOutput",
    "ProcessRunner",
    "PassthroughProcessRunner",
    "SilentProcessRunner",
    "make_process_runner",
]


class CommandOutput(Enum):
    """What to do with the output of commands run by tasks."""

    ALL = "all"
    NONE = "none"


class ProcessRunner(ABC):
    """Interface for running subprocess commands."""

    @abstractmethod
    def run(self, *args: Any, **kwargs: Any) -> subprocess.CompletedProcess[Any]:
        """
        Run a subprocess command.

        The signature matches subprocess.run().

        Raises:
        subprocess.CalledProcessError: If check=True and process exits non-zero
        """
        ...


class PassthroughProcessRunner(ProcessRunner):
    """Process runner that directly delegates to subprocess.run."""

    def __init__(self, logger: Logger) -> None:
        self._logger = logger

    def run(self, *args: Any, **kwargs: Any) -> subprocess.CompletedProcess[Any]:
        self._logger.trace(f"[dim]exec {_describe_command(args, kwargs)}[/dim]")
        return subprocess.run(*args, **kwargs)


class SilentProcessRunner(ProcessRunner):
    """Process runner that discards stdout and stderr of the subprocess."""

    def __init__(self, logger: Logger) -> None:
        self._logger = logger

    def run(self, *args: Any, **kwargs: Any) -> subprocess.CompletedProcess[Any]:
        self._logger.trace(f"[dim]exec {_describe_command(args, kwargs)}[/dim]")
        kwargs["stdout"] = subprocess.DEVNULL
        kwargs["stderr"] = subprocess.DEVNULL
        return subprocess.run(*args, **kwargs)


def make_process_runner(logger: Logger, output: CommandOutput = CommandOutput.ALL) -> ProcessRunner:
    """
    Create the process runner for an output mode.

    Raises:
    ValueError: If an invalid CommandOutput value is provided
    """
    match output:
        case CommandOutput.ALL:
            return PassthroughProcessRunner(logger)
        case CommandOutput.NONE:
            return SilentProcessRunner(logger)
        case _:
            raise ValueError(f"Invalid CommandOutput: {output}")


def _describe_command(args: tuple, kwargs: dict) -> str:
    return escape(str(args[0] if args else kwargs.get("args", "")))
