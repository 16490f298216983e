"""
Dotboot Reporter

Human-readable progress output. Nothing here decides anything: the runner
and steps call these primitives and tests swap in NullReporter.
"""

import sys
from typing import Optional, TextIO

from dotboot.platform.tty import supports_color

RULE_WIDTH = 64

GREEN = "\033[32m"
YELLOW = "\033[33m"
BLUE = "\033[34m"
MAGENTA = "\033[35m"
CYAN = "\033[36m"
RED = "\033[31m"
RESET = "\033[0m"


class Reporter:
    """Base reporter: every primitive is a no-op."""

    def announce_start(self, title: str) -> None:
        pass

    def step(self, message: str) -> None:
        pass

    def success(self, message: str) -> None:
        pass

    def info(self, message: str) -> None:
        pass

    def warning(self, message: str) -> None:
        pass

    def error(self, message: str) -> None:
        pass

    def separator(self) -> None:
        pass


class NullReporter(Reporter):
    """Reporter for tests and non-interactive use."""


class ConsoleReporter(Reporter):
    """Prints progress lines to a terminal stream."""

    def __init__(self, stream: Optional[TextIO] = None, color: Optional[bool] = None):
        self.stream = stream if stream is not None else sys.stdout
        self.color = supports_color(self.stream) if color is None else color

    def _paint(self, color: str, text: str) -> str:
        if not self.color:
            return text
        return f"{color}{text}{RESET}"

    def _emit(self, line: str) -> None:
        print(line, file=self.stream, flush=True)

    def announce_start(self, title: str) -> None:
        rule = "=" * RULE_WIDTH
        self._emit(self._paint(CYAN, rule))
        self._emit(self._paint(MAGENTA, title.center(RULE_WIDTH)))
        self._emit(self._paint(CYAN, rule))

    def step(self, message: str) -> None:
        self._emit(f"{self._paint(BLUE, '▶')} {message}")

    def success(self, message: str) -> None:
        self._emit(f"{self._paint(GREEN, '✓')} {message}")

    def info(self, message: str) -> None:
        self._emit(f"{self._paint(YELLOW, 'ℹ')} {message}")

    def warning(self, message: str) -> None:
        self._emit(f"{self._paint(YELLOW, '!')} {message}")

    def error(self, message: str) -> None:
        self._emit(f"{self._paint(RED, '✗')} {message}")

    def separator(self) -> None:
        self._emit(self._paint(CYAN, "─" * RULE_WIDTH))
