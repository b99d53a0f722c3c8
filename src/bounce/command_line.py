"""Parsing of build arguments into a command, targets and parameter assignments."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Optional, Sequence

from bounce.errors import ConfigurationError
from bounce.executor import Command
from bounce.targets import Target
from bounce.task import Task


@dataclass
class CommandAndTargets:
    """A command and the targets to run it on."""

    command: Optional[Command]
    targets: list[Target] = field(default_factory=list)


def split_parameter_assignments(args: Sequence[str]) -> tuple[list[str], list[str]]:
    """
    Separate ``name=value`` parameter assignments from the other arguments.

    Returns:
        Tuple of (remaining arguments, assignments), both in original order
    """
    remaining = []
    assignments = []
    for arg in args:
        if "=" in arg:
            assignments.append(arg)
        else:
            remaining.append(arg)
    return remaining, assignments


def parse_command_and_targets(args: Sequence[str], targets: Mapping[str, Task]) -> CommandAndTargets:
    """
    Parse ``command target...`` arguments.

    Args:
        args: Command name followed by target names
        targets: Available targets by name

    Returns:
        The command and selected targets; no command and no targets when
        args is empty

    Raises:
        ConfigurationError: If the command or a target name is unknown
    """
    if not args:
        return CommandAndTargets(command=None)

    command = Command.parse(args[0])

    selected = []
    for name in args[1:]:
        task = targets.get(name)
        if task is None:
            available = ", ".join(targets) or "none"
            raise ConfigurationError(f"no such target {name}, available targets: {available}")
        selected.append(Target(name=name, task=task))

    return CommandAndTargets(command=command, targets=selected)
