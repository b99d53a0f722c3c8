"""Context handed to task actions."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from bounce.logging import Logger
from bounce.process_runner import ProcessRunner, make_process_runner
from bounce.scope import ScopeRecorder, TaskScope

if TYPE_CHECKING:
    from bounce.executor import Command
    from bounce.task import Task


class BuildContext:
    """
    Services available to a task while it builds or cleans.

    Attributes:
        logger: Logger for task output
        recorder: Records the outcome of every scope opened in this run
        describe_tasks: Whether scopes print task descriptions
        process_runner: Runs subprocesses for tasks that shell out
    """

    def __init__(
        self,
        logger: Logger,
        recorder: Optional[ScopeRecorder] = None,
        describe_tasks: bool = False,
        process_runner: Optional[ProcessRunner] = None,
    ):
        self.logger = logger
        self.recorder = recorder if recorder is not None else ScopeRecorder()
        self.describe_tasks = describe_tasks
        self.process_runner = process_runner or make_process_runner(logger)

    def task_scope(self, task: Task, command: Command, name: Optional[str] = None) -> TaskScope:
        """Open a scope tracking ``task`` executing ``command``."""
        return TaskScope(
            task,
            command,
            name,
            self.logger,
            self.recorder,
            describe_tasks=self.describe_tasks,
        )
