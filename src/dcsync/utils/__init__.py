"""Utility modules for dcsync."""

from .console import console
from .subprocess_utils import run_git_command

__all__ = ["console", "run_git_command"]
