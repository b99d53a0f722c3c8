"""CLI command implementations and shared utilities."""

from __future__ import annotations

import os
import sys


def _supports_unicode() -> bool:
    """
    Check if the terminal supports Unicode characters.

    Returns:
    True if terminal supports UTF-8, False otherwise
    """
    # Classic Windows console (conhost)
    if os.name == "nt" and "WT_SESSION" not in os.environ:
        return False

    encoding = sys.stdout.encoding
    if not encoding:
        return False

    try:
        "✓✗".encode(encoding)
        return True
    except UnicodeEncodeError:
        return False


def get_action_success_string() -> str:
    """Tick symbol (✓) if the terminal supports it, otherwise "[ OK ]"."""
    return "✓" if _supports_unicode() else "[ OK ]"


def get_action_failure_string() -> str:
    """Cross symbol (✗) if the terminal supports it, otherwise "[ FAIL ]"."""
    return "✗" if _supports_unicode() else "[ FAIL ]"
