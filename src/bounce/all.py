"""Aggregate task that groups sibling tasks."""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Generic, Optional, TypeVar

from bounce.dependencies import Dependency
from bounce.task import DependentFuture, Task

if TYPE_CHECKING:
    from bounce.context import BuildContext

T = TypeVar("T")


class All(Task, Generic[T]):
    """
    Task that completes once every listed task has completed.

    When a result function is given, ``result`` is a future holding its return
    value, resolved when this task builds, i.e. after all listed tasks have
    built::

        version = All(read_major, read_minor, result=lambda: f"{major.value}.{minor.value}")
    """

    tasks = Dependency()

    def __init__(self, *tasks: Task, result: Optional[Callable[[], T]] = None):
        self.tasks = tasks
        self.result: Optional[DependentFuture[T]] = (
            DependentFuture(self, result) if result is not None else None
        )

    @property
    def is_logged(self) -> bool:
        return False

    def build(self, context: BuildContext) -> None:
        if self.result is not None:
            self.result.resolve()

    def clean(self, context: BuildContext) -> None:
        if self.result is not None:
            self.result.reset()
