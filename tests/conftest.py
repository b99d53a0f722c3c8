"""Pytest fixtures for Bounce tests."""

import pytest

from bounce.context import BuildContext
from bounce.scope import ScopeRecorder
from helpers.logging import logger_stub
from helpers.process_runner import MockProcessRunner


@pytest.fixture
def build_context() -> BuildContext:
    """Provide a build context that discards log output and records scopes."""
    return BuildContext(logger_stub, ScopeRecorder(), process_runner=MockProcessRunner())
