"""Bounce - a programmable build automation engine with implicit task dependencies."""

__version__ = "0.1.0"

from bounce.all import All
from bounce.context import BuildContext
from bounce.dependencies import Dependency, dependencies, dependency, dependency_fields
from bounce.errors import (
    BounceError,
    ConfigurationError,
    CycleError,
    FutureNotResolvedError,
    TaskExecutionError,
)
from bounce.executor import Command, Executor
from bounce.parameters import Parameter, Parameters
from bounce.scope import ScopeRecord, ScopeRecorder, TaskScope
from bounce.shell import ShellTask
from bounce.targets import Target
from bounce.task import DependentFuture, Future, Immediate, Task

__all__ = [
    "__version__",
    "All",
    "BuildContext",
    "Dependency",
    "dependency",
    "dependencies",
    "dependency_fields",
    "BounceError",
    "ConfigurationError",
    "CycleError",
    "FutureNotResolvedError",
    "TaskExecutionError",
    "Command",
    "Executor",
    "Parameter",
    "Parameters",
    "ScopeRecord",
    "ScopeRecorder",
    "TaskScope",
    "ShellTask",
    "Target",
    "DependentFuture",
    "Future",
    "Immediate",
    "Task",
]
