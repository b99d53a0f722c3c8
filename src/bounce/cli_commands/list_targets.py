from __future__ import annotations

from typing import Mapping

from rich.markup import escape
from rich.table import Table

from bounce.logging import Logger
from bounce.parameters import Parameter, find_parameters_in_task
from bounce.task import Task


def list_targets(logger: Logger, targets: Mapping[str, Task]) -> None:
    """
    List available targets with the parameters each one uses.
    """
    logger.info("[bold]targets:[/bold]")

    if not targets:
        logger.info("  (none)")
        return

    table = Table(show_edge=False, show_header=False, box=None, padding=(0, 2))
    table.add_column("Target", style="bold cyan", no_wrap=True)
    table.add_column("Parameters", style="white")

    for name, task in targets.items():
        parameters = find_parameters_in_task(task)
        table.add_row(escape(name), _format_parameters(parameters))

    logger.info(table)


def _format_parameters(parameters: list[Parameter]) -> str:
    """
    Format parameters for display in list output.

    Examples:
    [required port:int] -> "port:int [dim]required[/dim]"
    [env="dev"] -> "env:str [dim]default: dev[/dim]"
    """
    formatted = []
    for parameter in parameters:
        part = f"{escape(parameter.name)}[dim]:{parameter.type.__name__}[/dim]"
        if parameter.required:
            part += " [dim]required[/dim]"
        if parameter.has_default:
            part += f" [dim]default: {escape(str(parameter.default_value))}[/dim]"
        formatted.append(part)
    return "\n".join(formatted)
