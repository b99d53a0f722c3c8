"""Tests for shell command tasks."""

import io
import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from bounce.dependencies import dependency_fields
from bounce.executor import Command, Executor
from bounce.shell import ShellTask, platform_default_shell
from bounce.task import Task


def test_default_shell_on_linux():
    with patch("bounce.shell.platform.system", return_value="Linux"):
        assert platform_default_shell() == ("bash", ["-c"])


def test_default_shell_on_windows():
    with patch("bounce.shell.platform.system", return_value="Windows"):
        assert platform_default_shell() == ("cmd", ["/c"])


def test_build_runs_command(build_context):
    task = ShellTask("compile", "make all", working_dir="/src")
    shell, shell_args = platform_default_shell()

    task.build(build_context)

    [(args, kwargs)] = build_context.process_runner.calls
    assert args[0] == [shell, *shell_args, "make all"]
    assert kwargs["cwd"] == Path("/src")
    assert kwargs["check"] is True


def test_clean_without_clean_command_does_nothing(build_context):
    ShellTask("compile", "make all").clean(build_context)

    assert build_context.process_runner.calls == []


def test_clean_runs_clean_command(build_context):
    ShellTask("compile", "make all", clean_cmd="make clean").clean(build_context)

    assert build_context.process_runner.commands[0][-1] == "make clean"


def test_depends_on_is_a_plural_dependency():
    first, second = Task(), Task()
    task = ShellTask("package", "tar czf out.tgz build", depends_on=[first, second])

    assert dependency_fields(task) == {"depends_on[0]": first, "depends_on[1]": second}


def test_executor_runs_dependencies_first(build_context):
    compile = ShellTask("compile", "make")
    package = ShellTask("package", "make dist", depends_on=[compile])

    Executor(build_context).execute(Command.BUILD, [package])

    assert [cmd[-1] for cmd in build_context.process_runner.commands] == ["make", "make dist"]


def test_failing_command_raises(build_context):
    build_context.process_runner.exit_code = 2

    with pytest.raises(subprocess.CalledProcessError):
        ShellTask("compile", "make").build(build_context)


def test_describe():
    output = io.StringIO()

    ShellTask("compile", "make", clean_cmd="make clean", desc="Compile sources").describe(output)

    assert output.getvalue() == (
        "compile: Compile sources\n"
        "  build: make\n"
        "  clean: make clean\n"
    )
