"""Error taxonomy for Bounce."""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence, TextIO

if TYPE_CHECKING:
    from bounce.task import Task


class BounceError(Exception):
    """
    Base class for every error raised by the Bounce core.

    Subclasses know how to explain themselves to the person running the build.
    """

    def explain(self, output: TextIO) -> None:
        """
        Write a human readable explanation of the error.

        Args:
        output: Text stream to write the explanation to
        """
        output.write(f"{self}\n")


class ConfigurationError(BounceError):
    """Raised when the build is configured incorrectly."""

    pass


class CycleError(BounceError):
    """
    Raised when a dependency cycle is detected during traversal.

    The cycle attribute lists the tasks on the cycle, starting and ending with
    the task that was found twice on the active path.
    """

    def __init__(self, cycle: Sequence[Task]):
        self.cycle = list(cycle)
        super().__init__(
            "Dependency cycle detected: " + " -> ".join(task_label(t) for t in self.cycle)
        )

    def explain(self, output: TextIO) -> None:
        output.write("dependency cycle detected between these tasks:\n")
        for task in self.cycle[:-1]:
            output.write(f"  {task_label(task)}\n")


class TaskExecutionError(BounceError):
    """Raised when a task's build or clean action fails."""

    def __init__(self, task: Task, command: object, message: str | None = None):
        self.task = task
        self.command = command
        if message is None:
            message = f"Task {task_label(task)} failed to {command}"
        super().__init__(message)

    def explain(self, output: TextIO) -> None:
        output.write(f"{self}\n")
        if self.__cause__ is not None:
            output.write(f"  caused by {type(self.__cause__).__name__}: {self.__cause__}\n")


class FutureNotResolvedError(RuntimeError):
    """Raised when a future is read before its producing task has built."""

    pass


def task_label(task: object) -> str:
    """Short identifying label for a task, used in error messages and logs."""
    name = getattr(task, "name", None)
    if isinstance(name, str) and name:
        return f"{type(task).__name__}({name})"
    return f"{type(task).__name__}@{id(task):x}"
