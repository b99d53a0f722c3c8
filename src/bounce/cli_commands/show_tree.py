from __future__ import annotations

from typing import Mapping

import typer
from rich.markup import escape
from rich.tree import Tree

from bounce.dependencies import dependency_fields
from bounce.errors import task_label
from bounce.logging import Logger
from bounce.task import Task


def show_tree(logger: Logger, targets: Mapping[str, Task], target_name: str) -> None:
    """
    Show the labelled dependency tree of a target.
    """
    task = targets.get(target_name)
    if task is None:
        logger.error(f"[red]Target not found: {escape(target_name)}[/red]")
        raise typer.Exit(1)

    logger.info(build_rich_tree(target_name, task))


def build_rich_tree(label: str, task: Task) -> Tree:
    """
    Build a Rich Tree of a task's dependency fields.

    Each node shows the member label that declares the dependency. A task
    found again on its own path is shown once more, marked as a cycle, and
    not expanded.
    """
    root = Tree(f"[bold cyan]{escape(label)}[/bold cyan] {escape(task_label(task))}")
    _add_children(root, task, [id(task)])
    return root


def _add_children(node: Tree, task: Task, path: list[int]) -> None:
    for label, dep in _labelled_dependencies(task).items():
        text = f"{escape(label)}: {escape(task_label(dep))}"
        if id(dep) in path:
            node.add(f"{text} [red](cycle)[/red]")
            continue
        child = node.add(text)
        _add_children(child, dep, path + [id(dep)])


def _labelled_dependencies(task: Task) -> dict[str, Task]:
    if type(task).dependencies is Task.dependencies:
        return dependency_fields(task)
    return {f"dependencies[{i}]": dep for i, dep in enumerate(task.dependencies())}
