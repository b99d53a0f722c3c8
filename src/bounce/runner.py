"""Orchestration of a build run: argument interpretation, validation and target execution."""

from __future__ import annotations

from typing import Iterable, Mapping, Optional, Sequence

from bounce.cli_commands.list_targets import list_targets
from bounce.command_line import CommandAndTargets, parse_command_and_targets, split_parameter_assignments
from bounce.context import BuildContext
from bounce.errors import ConfigurationError
from bounce.executor import Command, Executor
from bounce.logging import Logger
from bounce.parameters import Parameters, ensure_required_parameters_have_values, find_parameters_in_task
from bounce.targets import Target
from bounce.task import Task

USAGE = "usage: bounce build|clean target-name"


class BounceRunner:
    """
    Runs the targets selected on the command line.

    One executor is shared by every target of the run, so a task reachable from
    several targets still runs once.
    """

    def __init__(self, logger: Logger, context: Optional[BuildContext] = None):
        self.logger = logger
        self.context = context if context is not None else BuildContext(logger)
        self.executor = Executor(self.context)

    def run(self, args: Sequence[str], targets: Mapping[str, Task], parameters: Parameters) -> Optional[Command]:
        """
        Interpret build arguments and run the selected targets.

        Args:
            args: Command, target names and name=value parameter assignments
            targets: Available targets by name
            parameters: Parameters declared by the build file

        Returns:
            The command that was run, or None if no targets were selected,
            in which case usage and the available targets have been printed

        Raises:
            ConfigurationError: For an unknown command, target or parameter,
                or a required parameter without a value
            CycleError: If a target's graph has a cycle
            TaskExecutionError: If a task fails
        """
        remaining, assignments = split_parameter_assignments(args)
        command_and_targets = parse_command_and_targets(remaining, targets)

        if not command_and_targets.targets:
            self.print_usage(targets)
            return None

        parameters.parse(assignments)
        self.ensure_required_parameters(command_and_targets.targets)
        self.build_targets(command_and_targets)
        return command_and_targets.command

    def ensure_required_parameters(self, targets: Iterable[Target]) -> None:
        for target in targets:
            ensure_required_parameters_have_values(find_parameters_in_task(target.task))

    def build_targets(self, command_and_targets: CommandAndTargets) -> None:
        """
        Run the command on each target in turn, stopping at the first failure.

        Raises:
            ConfigurationError: If no command was given
        """
        command = command_and_targets.command
        if command is None:
            raise ConfigurationError("no command given, try build or clean")
        for target in command_and_targets.targets:
            self.build_target(target, command)

    def build_target(self, target: Target, command: Command) -> None:
        with self.context.task_scope(target.task, command, target.name) as scope:
            self.executor.execute(command, [target.task])
            scope.succeeded()

    def print_usage(self, targets: Mapping[str, Task]) -> None:
        self.logger.info(USAGE)
        self.logger.info()
        list_targets(self.logger, targets)
