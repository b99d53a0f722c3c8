"""Dependency declaration and introspection.

Tasks declare dependencies by marking their own members as dependency-bearing,
either with a ``Dependency()`` class attribute (a plain field) or with the
``@dependency`` property decorator (a computed member)::

    class Package(Task):
        compiled = Dependency()
        resources = Dependency()

        @dependency
        def config(self):
            return self._config_factory()

A member may hold a single task, ``None`` (no dependency), or an ordered
collection of tasks. The introspector reads every marked member at the time it
is asked, so computed members may depend on state set after construction.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Set
from typing import TYPE_CHECKING, Any, Union

from bounce.errors import ConfigurationError

if TYPE_CHECKING:
    from bounce.task import Task

__all__ = [
    "Dependency",
    "dependency",
    "dependency_members",
    "dependency_fields",
    "dependencies",
]


class Dependency:
    """
    Field-style dependency-bearing member.

    Values are stored on the instance. A one-shot iterator assigned to the field
    is materialised into a tuple so that repeated introspection sees the same
    elements.
    """

    def __init__(self, doc: str | None = None):
        self.name = ""
        self.__doc__ = doc

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def __get__(self, instance: Any, owner: type | None = None) -> Any:
        if instance is None:
            return self
        return instance.__dict__.get(self.name)

    def __set__(self, instance: Any, value: Any) -> None:
        if isinstance(value, Iterator):
            value = tuple(value)
        instance.__dict__[self.name] = value

    def __delete__(self, instance: Any) -> None:
        instance.__dict__.pop(self.name, None)

    def __repr__(self) -> str:
        return f"Dependency({self.name!r})"


class dependency(property):
    """Property-style dependency-bearing member, evaluated on every read."""

    pass


DependencyMember = Union[Dependency, dependency]


def dependency_members(task_type: type) -> list[tuple[str, DependencyMember]]:
    """
    List the dependency-bearing members declared on a task type.

    Members declared by base classes come first. A subclass that redefines a
    member keeps the base class position; a subclass that redefines it as a
    plain attribute removes it.

    Args:
        task_type: Task class to inspect

    Returns:
        List of (member name, member) pairs in declaration order
    """
    members: dict[str, DependencyMember] = {}
    for klass in reversed(task_type.__mro__):
        for name, attr in vars(klass).items():
            if isinstance(attr, (Dependency, dependency)):
                members[name] = attr
            elif name in members:
                del members[name]
    return list(members.items())


def dependency_fields(task: Task) -> dict[str, Task]:
    """
    Derive the labelled dependency mapping of a task.

    Singular members are labelled with the member name, elements of plural
    members with ``name[index]``.

    Args:
        task: Task instance to inspect

    Returns:
        Ordered mapping of labels to dependency tasks

    Raises:
        ConfigurationError: If a marked member holds something other than a
            task, None, or an ordered collection of tasks
    """
    fields: dict[str, Task] = {}
    for name, _ in dependency_members(type(task)):
        value = getattr(task, name)
        for label, dep in _member_entries(task, name, value):
            fields[label] = dep
    return fields


def dependencies(task: Task) -> list[Task]:
    """
    Derive the flattened dependency list of a task.

    Args:
        task: Task instance to inspect

    Returns:
        Every task referenced by the task's dependency-bearing members
    """
    return list(dependency_fields(task).values())


def _member_entries(task: Task, name: str, value: Any) -> list[tuple[str, Task]]:
    from bounce.task import Task

    if value is None:
        return []

    if isinstance(value, Task):
        return [(name, value)]

    if isinstance(value, (str, bytes, Mapping, Set)) or not isinstance(value, Iterable):
        raise ConfigurationError(
            f"Dependency '{name}' of {type(task).__name__} holds a "
            f"{type(value).__name__}, expected a task or an ordered collection of tasks"
        )

    entries = []
    for index, element in enumerate(value):
        if not isinstance(element, Task):
            raise ConfigurationError(
                f"Dependency '{name}[{index}]' of {type(task).__name__} holds a "
                f"{type(element).__name__}, expected a task"
            )
        entries.append((f"{name}[{index}]", element))
    return entries
