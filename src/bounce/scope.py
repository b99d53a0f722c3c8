"""Scopes tracking the outcome of each task execution."""

from __future__ import annotations

import io
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from rich.markup import escape

from bounce.cli_commands import get_action_failure_string, get_action_success_string
from bounce.errors import task_label
from bounce.logging import Logger

if TYPE_CHECKING:
    from bounce.executor import Command
    from bounce.task import Task


@dataclass
class ScopeRecord:
    """Outcome of one task executing one command."""

    task: Task
    command: Command
    name: str
    succeeded: bool
    duration: float = 0.0


@dataclass
class ScopeRecorder:
    """Collects scope records in the order the scopes closed."""

    records: list[ScopeRecord] = field(default_factory=list)

    def add(self, record: ScopeRecord) -> None:
        self.records.append(record)

    def succeeded(self) -> list[ScopeRecord]:
        return [r for r in self.records if r.succeeded]

    def failed(self) -> list[ScopeRecord]:
        return [r for r in self.records if not r.succeeded]


class TaskScope:
    """
    Tracks a single task executing a single command.

    Use as a context manager and call ``succeeded()`` once the action has
    returned normally. A scope that closes without being marked is recorded
    as failed. The scope only observes: exceptions always propagate.

    Example:
        with TaskScope(task, Command.BUILD, "compile", logger, recorder) as scope:
            task.build(context)
            scope.succeeded()
    """

    def __init__(
        self,
        task: Task,
        command: Command,
        name: Optional[str],
        logger: Logger,
        recorder: Optional[ScopeRecorder] = None,
        describe_tasks: bool = False,
    ):
        self.task = task
        self.command = command
        self.name = name or task_label(task)
        self._label = escape(self.name)
        self._logger = logger
        self._recorder = recorder
        self._describe_tasks = describe_tasks
        self._succeeded = False
        self._started = 0.0

    def __enter__(self) -> TaskScope:
        self._started = time.perf_counter()
        self._logger.debug(f"[cyan]{self.command}[/cyan] {self._label}")
        if self._describe_tasks:
            description = io.StringIO()
            self.task.describe(description)
            self._logger.info(description.getvalue().rstrip("\n"), markup=False)
        return self

    def succeeded(self) -> None:
        self._succeeded = True

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        record = ScopeRecord(
            task=self.task,
            command=self.command,
            name=self.name,
            succeeded=self._succeeded,
            duration=time.perf_counter() - self._started,
        )
        if self._recorder is not None:
            self._recorder.add(record)

        if record.succeeded:
            self._logger.info(
                f"[green]{get_action_success_string()} {self.command} {self._label}[/green]"
            )
        else:
            self._logger.error(
                f"[red]{get_action_failure_string()} {self.command} {self._label}[/red]"
            )
