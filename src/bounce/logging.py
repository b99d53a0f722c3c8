"""Logging infrastructure for Bounce.

Provides the Logger interface used for dependency injection of diagnostic output.
"""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod


class LogLevel(enum.Enum):
    """Log verbosity levels for Bounce diagnostic messages.

    Lower numeric values represent higher severity / less verbosity.
    """
    FATAL = 0  # Only unrecoverable errors (bad build file, configuration errors)
    ERROR = 1  # Fatal errors plus task failures
    WARN = 2   # Errors plus warnings
    INFO = 3   # Warnings plus task results (default)
    DEBUG = 4  # Info plus task starts and skipped tasks
    TRACE = 5  # Debug plus dependency traversal

    @classmethod
    def parse(cls, name: str) -> LogLevel:
        """Look up a level by name, case-insensitively.

        Raises:
            ValueError: If no level has that name
        """
        try:
            return cls[name.strip().upper()]
        except KeyError:
            valid = ", ".join(level.name.lower() for level in cls)
            raise ValueError(f"Unknown log level '{name}', expected one of: {valid}") from None


class Logger(ABC):
    """Interface for leveled diagnostic output."""

    @abstractmethod
    def log(self, level: LogLevel = LogLevel.INFO, *args, **kwargs) -> None:
        ...

    @abstractmethod
    def push_level(self, level: LogLevel) -> None:
        ...

    @abstractmethod
    def pop_level(self) -> LogLevel:
        ...

    def fatal(self, *args, **kwargs) -> None:
        self.log(LogLevel.FATAL, *args, **kwargs)

    def error(self, *args, **kwargs) -> None:
        self.log(LogLevel.ERROR, *args, **kwargs)

    def warn(self, *args, **kwargs) -> None:
        self.log(LogLevel.WARN, *args, **kwargs)

    def info(self, *args, **kwargs) -> None:
        self.log(LogLevel.INFO, *args, **kwargs)

    def debug(self, *args, **kwargs) -> None:
        self.log(LogLevel.DEBUG, *args, **kwargs)

    def trace(self, *args, **kwargs) -> None:
        self.log(LogLevel.TRACE, *args, **kwargs)
