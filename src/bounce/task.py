"""Task and future abstractions."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Callable, Generic, TextIO, TypeVar

from bounce.dependencies import Dependency, dependency_fields, dependencies
from bounce.errors import FutureNotResolvedError, task_label

if TYPE_CHECKING:
    from bounce.context import BuildContext

T = TypeVar("T")

_UNSET = object()


class Task:
    """
    Unit of work in a build.

    Subclasses declare their dependencies by marking members with
    ``Dependency()`` or ``@dependency``, and override ``build`` and ``clean``.
    Tasks are compared by identity: two tasks with identical members are still
    two different nodes of the graph.
    """

    def dependencies(self) -> list[Task]:
        """
        Tasks that must run before this one.

        Override to control the graph edges directly instead of relying on
        dependency-bearing members.
        """
        return dependencies(self)

    def build(self, context: BuildContext) -> None:
        pass

    def clean(self, context: BuildContext) -> None:
        pass

    @property
    def is_logged(self) -> bool:
        """Whether the executor tracks this task's actions in a scope."""
        return True

    def describe(self, output: TextIO) -> None:
        """Write a human description of this task."""
        output.write(f"{type(self).__name__}\n")
        for label in dependency_fields(self):
            output.write(f"  {label}\n")


class Future(Task, ABC, Generic[T]):
    """A task whose value can be read once it has been built."""

    @property
    @abstractmethod
    def value(self) -> T:
        ...

    @property
    def is_logged(self) -> bool:
        return False


class Immediate(Future[T]):
    """A future that is resolved from the start."""

    def __init__(self, value: T):
        self._value = value

    @property
    def value(self) -> T:
        return self._value

    def describe(self, output: TextIO) -> None:
        output.write(f"{self._value!r}\n")


class DependentFuture(Future[T]):
    """
    Single-assignment value cell bound to a source task.

    The cell is resolved by calling the producer, which must only happen once
    the source task has built. The executor guarantees this when the future is
    itself part of the graph, since the source is one of its dependencies.
    Reading the value while the cell is unset raises FutureNotResolvedError.
    """

    source = Dependency()

    def __init__(self, source: Task, producer: Callable[[], T]):
        self.source = source
        self._producer = producer
        self._value: object = _UNSET

    @property
    def resolved(self) -> bool:
        return self._value is not _UNSET

    def resolve(self) -> T:
        """Evaluate the producer and store its result, if not already resolved."""
        if self._value is _UNSET:
            self._value = self._producer()
        return self._value  # type: ignore[return-value]

    def reset(self) -> None:
        self._value = _UNSET

    @property
    def value(self) -> T:
        if self._value is _UNSET:
            raise FutureNotResolvedError(
                f"Value of {task_label(self)} read before {task_label(self.source)} was built"
            )
        return self._value  # type: ignore[return-value]

    def build(self, context: BuildContext) -> None:
        self.resolve()

    def clean(self, context: BuildContext) -> None:
        self.reset()
