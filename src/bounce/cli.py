"""Command-line interface for Bounce."""

from __future__ import annotations

import io
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from bounce import __version__
from bounce.cli_commands import get_action_success_string
from bounce.cli_commands.list_targets import list_targets
from bounce.cli_commands.show_tree import show_tree
from bounce.config import BounceConfig, load_config
from bounce.console_logger import ConsoleLogger
from bounce.context import BuildContext
from bounce.errors import BounceError
from bounce.logging import Logger, LogLevel
from bounce.parameters import Parameters
from bounce.process_runner import CommandOutput, make_process_runner
from bounce.runner import BounceRunner
from bounce.targets import BUILD_FILE_NAMES, find_build_file, load_targets

app = typer.Typer(
    help="Bounce - a programmable build automation engine",
    add_completion=False,
    no_args_is_help=False,
)
console = Console()


@app.command()
def bounce(
    args: Optional[list[str]] = typer.Argument(
        None,
        help="Command (build or clean), target names and name=value parameters",
        show_default=False,
    ),
    build_file: Optional[str] = typer.Option(
        None, "--file", "-f", help="Build file to load (default: search for bounce_targets.py)"
    ),
    log_level: Optional[str] = typer.Option(
        None, "--log-level", "-L", help="Log verbosity: fatal, error, warn, info, debug, trace"
    ),
    describe_tasks: Optional[bool] = typer.Option(
        None, "--describe-tasks/--no-describe-tasks", help="Print a description of each task as it runs"
    ),
    command_output: str = typer.Option(
        "all", "--command-output", help="Output of commands run by tasks: all or none"
    ),
    list_opt: bool = typer.Option(False, "--list", "-l", help="List targets and their parameters"),
    tree: Optional[str] = typer.Option(None, "--tree", help="Show the dependency tree of a target"),
    version: bool = typer.Option(False, "--version", "-v", help="Show version"),
) -> None:
    """Run build or clean on the named targets."""
    if version:
        console.print(f"bounce version {__version__}")
        return

    logger = ConsoleLogger(console, LogLevel.INFO)

    try:
        config = load_config()
    except BounceError as e:
        _explain(logger, e)
        raise typer.Exit(1)

    logger.push_level(_resolve_log_level(logger, log_level, config))

    try:
        output = CommandOutput(command_output.lower())
    except ValueError:
        logger.error(f"[red]Invalid --command-output: {escape(command_output)}, expected all or none[/red]")
        raise typer.Exit(1)

    build_path = _resolve_build_file(build_file, config)
    if build_path is None:
        logger.error(f"[red]No build file found ({' or '.join(BUILD_FILE_NAMES)})[/red]")
        raise typer.Exit(1)

    context = BuildContext(
        logger,
        describe_tasks=describe_tasks if describe_tasks is not None else bool(config.describe_tasks),
        process_runner=make_process_runner(logger, output),
    )

    try:
        parameters = Parameters()
        targets = load_targets(build_path, parameters)
        for name in parameters.apply_defaults(config.parameters):
            logger.warn(f"[yellow]Configured parameter '{escape(name)}' is not used by the build[/yellow]")

        if list_opt:
            list_targets(logger, targets)
            return

        if tree is not None:
            show_tree(logger, targets, tree)
            return

        runner = BounceRunner(logger, context)
        command = runner.run(args or [], targets, parameters)
        if command is None:
            raise typer.Exit(1)
    except BounceError as e:
        _explain(logger, e)
        raise typer.Exit(1)

    logger.info(
        f"[green]{get_action_success_string()} {command.value.capitalize()} completed successfully[/green]"
    )


def _resolve_log_level(logger: Logger, log_level: Optional[str], config: BounceConfig) -> LogLevel:
    if log_level is None:
        return config.log_level or LogLevel.INFO
    try:
        return LogLevel.parse(log_level)
    except ValueError as e:
        logger.error(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)


def _resolve_build_file(build_file: Optional[str], config: BounceConfig) -> Optional[Path]:
    if build_file:
        return Path(build_file)
    if config.build_file is not None:
        return config.build_file
    return find_build_file()


def _explain(logger: Logger, error: BounceError) -> None:
    explanation = io.StringIO()
    error.explain(explanation)
    logger.fatal(f"[red]{escape(explanation.getvalue().rstrip())}[/red]")


def main() -> None:
    """Entry point for the bounce command."""
    app()


if __name__ == "__main__":
    main()
