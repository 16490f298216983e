"""
Dotboot Command Executor Base Class

The narrow capability steps use to touch the system: run a command, find a
program on PATH, check a path. Steps never spawn processes themselves, so a
recording executor can stand in for the real one in tests.
"""

import os
import shlex
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence


@dataclass
class RunResult:
    """Result of running a command."""

    rc: int
    stdout: str
    stderr: str

    @property
    def success(self) -> bool:
        return self.rc == 0


def format_command(argv: Sequence[str]) -> str:
    """Render argv the way a user would type it."""
    return " ".join(shlex.quote(str(a)) for a in argv)


class CommandExecutor(ABC):
    """
    Abstract base class for command executors.

    The executor owns the PATH it searches and hands to child processes.
    ``prepend_path`` is how a freshly installed package manager becomes
    visible to the steps that follow it.
    """

    def __init__(self, verbose: bool = False, path: Optional[str] = None):
        self.verbose = verbose
        self._path: List[str] = [
            p for p in (path if path is not None else os.environ.get("PATH", "")).split(os.pathsep) if p
        ]

    @property
    def search_path(self) -> str:
        return os.pathsep.join(self._path)

    def prepend_path(self, *directories: str) -> None:
        """Put directories at the front of PATH, dropping earlier copies."""
        new = [d for d in directories if d]
        self._path = new + [p for p in self._path if p not in new]

    def environment(self, extra: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
        """Child process environment: ours, our PATH, then extra."""
        env = dict(os.environ)
        env["PATH"] = self.search_path
        if extra:
            env.update(extra)
        return env

    @abstractmethod
    async def run(
        self,
        argv: Sequence[str],
        *,
        environment: Optional[Mapping[str, str]] = None,
        cwd: Optional[str] = None,
        timeout: Optional[float] = None,
        capture: bool = False,
    ) -> RunResult:
        """
        Run a command without a shell.

        Args:
            argv: Program and arguments
            environment: Extra environment variables
            cwd: Working directory
            timeout: Optional timeout in seconds
            capture: Always capture output, even when verbose (for probes)

        Returns:
            RunResult with rc, stdout, stderr
        """
        pass

    @abstractmethod
    async def run_shell(
        self,
        command: str,
        *,
        environment: Optional[Mapping[str, str]] = None,
        timeout: Optional[float] = None,
        capture: bool = False,
    ) -> RunResult:
        """Run a command line through /bin/sh."""
        pass

    @abstractmethod
    def which(self, program: str) -> Optional[str]:
        """Find program on the executor's PATH, or None."""
        pass

    @abstractmethod
    def exists(self, path: str) -> bool:
        """Check whether a file or directory exists."""
        pass

    @property
    def executor_type(self) -> str:
        """Return the executor type name."""
        return self.__class__.__name__.replace('Executor', '').lower()
