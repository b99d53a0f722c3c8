"""Dependency graph execution."""

from __future__ import annotations

from enum import Enum
from typing import Callable, Iterable

from rich.markup import escape

from bounce.context import BuildContext
from bounce.errors import BounceError, ConfigurationError, CycleError, TaskExecutionError, task_label
from bounce.task import Task


class Command(Enum):
    """Actions a task can perform."""

    BUILD = "build"
    CLEAN = "clean"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, name: str) -> Command:
        """
        Look up a command by name.

        Raises:
            ConfigurationError: If there is no command with that name
        """
        for command in cls:
            if command.value == name:
                return command
        raise ConfigurationError(f"no such command {name}, try build or clean")


class Executor:
    """
    Runs commands over the dependency graph of a set of root tasks.

    Every task runs a command at most once per executor, after all of its
    dependencies have run the same command. Build and clean are tracked
    separately. Tasks are told apart by identity, so two equal-looking tasks
    both run.
    """

    def __init__(self, context: BuildContext):
        """
        Initialize executor.

        Args:
            context: Build context passed to every task action
        """
        self.context = context
        self._executed: dict[Command, dict[int, Task]] = {command: {} for command in Command}
        self._path: list[Task] = []
        self._visiting: set[int] = set()

    def execute(self, command: Command, roots: Iterable[Task]) -> None:
        """
        Run a command on each root task and everything it depends on.

        Roots are processed in order. The first failure stops the traversal,
        so remaining roots are not processed.

        Args:
            command: Command to run
            roots: Tasks to run the command on

        Raises:
            CycleError: If a dependency cycle is found
            ConfigurationError: If a task declares an invalid dependency
            TaskExecutionError: If a task action fails
        """
        for root in roots:
            self._visit(root, command)

    def build(self, task: Task) -> None:
        self.execute(Command.BUILD, [task])

    def clean(self, task: Task) -> None:
        self.execute(Command.CLEAN, [task])

    def executed(self, command: Command) -> list[Task]:
        """Tasks that have completed ``command``, in completion order."""
        return list(self._executed[command].values())

    def _visit(self, task: Task, command: Command) -> None:
        done = self._executed[command]
        if id(task) in done:
            self.context.logger.debug(f"[dim]{command} {escape(task_label(task))} already done[/dim]")
            return

        if id(task) in self._visiting:
            start = next(i for i, t in enumerate(self._path) if t is task)
            raise CycleError(self._path[start:] + [task])

        self._path.append(task)
        self._visiting.add(id(task))
        try:
            deps = task.dependencies()
            self.context.logger.trace(
                f"[dim]{escape(task_label(task))} depends on "
                f"{escape(', '.join(task_label(d) for d in deps)) or 'nothing'}[/dim]"
            )
            for dep in deps:
                self._visit(dep, command)

            self._run(task, command)
        finally:
            self._visiting.discard(id(task))
            self._path.pop()

        done[id(task)] = task

    def _run(self, task: Task, command: Command) -> None:
        action = self._action(task, command)
        if not task.is_logged:
            self._invoke(action, task, command)
            return

        with self.context.task_scope(task, command) as scope:
            self._invoke(action, task, command)
            scope.succeeded()

    def _invoke(self, action: Callable[[BuildContext], None], task: Task, command: Command) -> None:
        try:
            action(self.context)
        except BounceError:
            raise
        except Exception as e:
            raise TaskExecutionError(task, command) from e

    @staticmethod
    def _action(task: Task, command: Command) -> Callable[[BuildContext], None]:
        match command:
            case Command.BUILD:
                return task.build
            case Command.CLEAN:
                return task.clean
            case _:
                raise ConfigurationError(f"no such command {command}, try build or clean")
