"""Command executors."""

from dotboot.executors.base import CommandExecutor, RunResult, format_command
from dotboot.executors.local import LocalExecutor

__all__ = ["CommandExecutor", "LocalExecutor", "RunResult", "format_command"]
