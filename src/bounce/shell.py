"""Task that runs shell commands."""

from __future__ import annotations

import platform
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Sequence, TextIO

from bounce.dependencies import Dependency
from bounce.task import Task

if TYPE_CHECKING:
    from bounce.context import BuildContext


def platform_default_shell() -> tuple[str, list[str]]:
    """
    Get default shell and args for current platform.

    Returns:
        Tuple of (shell, args) for platform default
    """
    if platform.system() == "Windows":
        return ("cmd", ["/c"])
    return ("bash", ["-c"])


class ShellTask(Task):
    """
    Runs a shell command on build and, optionally, another one on clean.

    A non-zero exit status raises subprocess.CalledProcessError, which the
    executor reports as a failure of this task.
    """

    depends_on = Dependency()

    def __init__(
        self,
        name: str,
        cmd: str,
        clean_cmd: Optional[str] = None,
        working_dir: Optional[Path | str] = None,
        depends_on: Sequence[Task] = (),
        desc: str = "",
    ):
        self.name = name
        self.cmd = cmd
        self.clean_cmd = clean_cmd
        self.working_dir = Path(working_dir) if working_dir is not None else None
        self.depends_on = list(depends_on)
        self.desc = desc

    def build(self, context: BuildContext) -> None:
        self._run(context, self.cmd)

    def clean(self, context: BuildContext) -> None:
        if self.clean_cmd:
            self._run(context, self.clean_cmd)

    def describe(self, output: TextIO) -> None:
        output.write(f"{self.name}: {self.desc}\n" if self.desc else f"{self.name}\n")
        output.write(f"  build: {self.cmd}\n")
        if self.clean_cmd:
            output.write(f"  clean: {self.clean_cmd}\n")

    def _run(self, context: BuildContext, cmd: str) -> None:
        shell, shell_args = platform_default_shell()
        context.process_runner.run(
            [shell, *shell_args, cmd],
            cwd=self.working_dir,
            check=True,
        )
