"""Build parameters supplied on the command line.

Build files declare parameters through the ``Parameters`` registry handed to
``get_targets``. A parameter is a future, so tasks take it as a dependency and
read ``.value`` while building::

    def get_targets(parameters):
        port = parameters.default("port", 8080)
        return {"serve": Serve(port=port)}

Values are given on the command line as ``name=value``.
"""

from __future__ import annotations

from typing import Any, Iterable, Iterator, Mapping, Optional, TypeVar

import click

from bounce.errors import ConfigurationError
from bounce.task import Future, Task

T = TypeVar("T")

_UNSET = object()


class Parameter(Future[T]):
    """A named build parameter whose value comes from the command line or a default."""

    def __init__(
        self,
        name: str,
        type: type = str,
        default: Any = _UNSET,
        required: bool = False,
        description: str = "",
    ):
        self.name = name
        self.type = type
        self.required = required
        self.description = description
        self._default = default
        self._value: Any = _UNSET

    @property
    def has_default(self) -> bool:
        return self._default is not _UNSET

    @property
    def default_value(self) -> Any:
        return None if self._default is _UNSET else self._default

    @property
    def has_value(self) -> bool:
        return self._value is not _UNSET or self._default is not _UNSET

    def set(self, raw: Any) -> None:
        """Set the value, converting strings to the parameter's type."""
        self._value = self._convert(raw)

    def set_default(self, raw: Any) -> None:
        self._default = self._convert(raw)

    @property
    def value(self) -> T:
        if self._value is not _UNSET:
            return self._value
        if self._default is not _UNSET:
            return self._default
        raise ConfigurationError(f"required parameter '{self.name}' has no value")

    def _convert(self, raw: Any) -> Any:
        if not isinstance(raw, str) or self.type is str:
            return raw
        try:
            return click.types.convert_type(self.type).convert(raw, None, None)
        except click.BadParameter as e:
            raise ConfigurationError(
                f"invalid value for parameter '{self.name}': {e.format_message()}"
            ) from e

    def __repr__(self) -> str:
        return f"Parameter({self.name!r})"


class Parameters:
    """Registry of the parameters declared by a build file."""

    def __init__(self) -> None:
        self._parameters: dict[str, Parameter] = {}

    def required(self, name: str, type: type = str, description: str = "") -> Parameter:
        """Declare a parameter that must be given on the command line."""
        return self._declare(Parameter(name, type, required=True, description=description))

    def default(self, name: str, value: Any, type: Optional[type] = None, description: str = "") -> Parameter:
        """Declare a parameter with a default value."""
        param_type = type if type is not None else builtin_type(value)
        return self._declare(Parameter(name, param_type, default=value, description=description))

    def _declare(self, parameter: Parameter) -> Parameter:
        existing = self._parameters.get(parameter.name)
        if existing is not None:
            if existing.type is not parameter.type:
                raise ConfigurationError(
                    f"parameter '{parameter.name}' declared as both "
                    f"{existing.type.__name__} and {parameter.type.__name__}"
                )
            return existing
        self._parameters[parameter.name] = parameter
        return parameter

    def __iter__(self) -> Iterator[Parameter]:
        return iter(self._parameters.values())

    def __len__(self) -> int:
        return len(self._parameters)

    def __contains__(self, name: object) -> bool:
        return name in self._parameters

    def __getitem__(self, name: str) -> Parameter:
        return self._parameters[name]

    def parse(self, assignments: Iterable[str]) -> None:
        """
        Apply ``name=value`` assignments from the command line.

        Raises:
            ConfigurationError: For malformed assignments, unknown names or
                values that do not convert to the parameter's type
        """
        for assignment in assignments:
            name, sep, raw = assignment.partition("=")
            if not sep or not name:
                raise ConfigurationError(f"expected name=value, got '{assignment}'")
            if name not in self._parameters:
                raise ConfigurationError(f"no such parameter '{name}'")
            self._parameters[name].set(raw)

    def apply_defaults(self, values: Mapping[str, Any]) -> list[str]:
        """
        Override parameter defaults, e.g. from a configuration file.

        Returns:
            Names in ``values`` that match no declared parameter
        """
        unknown = []
        for name, raw in values.items():
            if name in self._parameters:
                self._parameters[name].set_default(raw)
            else:
                unknown.append(name)
        return unknown


def builtin_type(value: Any) -> type:
    for candidate in (bool, int, float):
        if isinstance(value, candidate):
            return candidate
    return str


def find_parameters_in_task(task: Task) -> list[Parameter]:
    """
    Find every parameter reachable from a task's dependency graph.

    Returns:
        Parameters in depth-first discovery order, each listed once
    """
    found: dict[int, Parameter] = {}
    seen: set[int] = set()
    stack = [task]
    while stack:
        current = stack.pop()
        if id(current) in seen:
            continue
        seen.add(id(current))
        if isinstance(current, Parameter):
            found[id(current)] = current
        stack.extend(reversed(current.dependencies()))
    return list(found.values())


def ensure_required_parameters_have_values(parameters: Iterable[Parameter]) -> None:
    """
    Raises:
        ConfigurationError: Naming every required parameter without a value
    """
    missing = [p.name for p in parameters if p.required and not p.has_value]
    if missing:
        raise ConfigurationError(
            "required parameters not set: " + ", ".join(missing)
        )
