"""
Shared fixtures: a recording executor and step contexts.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union

import pytest

from dotboot.config import BootstrapConfig
from dotboot.engine.reporter import Reporter
from dotboot.executors.base import CommandExecutor, RunResult
from dotboot.platform.detect import Platform
from dotboot.steps.base import StepContext

BASE_PATH = "/usr/bin:/bin"


@dataclass
class Call:
    argv: Tuple[str, ...]
    capture: bool
    environment: Optional[Dict[str, str]] = None
    shell: bool = False


@dataclass
class Rule:
    match: Union[Tuple[str, ...], str]
    rc: int = 0
    stdout: str = ""
    stderr: str = ""
    creates: List[str] = field(default_factory=list)
    provides: Dict[str, str] = field(default_factory=dict)

    def matches(self, argv: Tuple[str, ...], shell: bool) -> bool:
        if isinstance(self.match, str):
            return shell and self.match in argv[-1]
        return not shell and argv[:len(self.match)] == self.match


class FakeExecutor(CommandExecutor):
    """
    Executor that records every call instead of touching the system.

    Responses come from rules registered with on(); the newest matching
    rule wins, anything unmatched succeeds. A rule can mark paths as
    existing or programs as installed, to model what a real install does.
    """

    def __init__(self, programs: Optional[Mapping[str, str]] = None, paths: Sequence[str] = ()):
        super().__init__(verbose=False, path=BASE_PATH)
        self.programs: Dict[str, str] = dict(programs or {})
        self.paths = set(paths)
        self.calls: List[Call] = []
        self._rules: List[Rule] = []
        # Optional callable(argv, shell) -> RunResult or None, consulted before the rules
        self.handler: Optional[Callable[[Tuple[str, ...], bool], Optional[RunResult]]] = None

    def on(self, match, rc=0, stdout="", stderr="", creates=(), provides=None) -> "FakeExecutor":
        if isinstance(match, (list, tuple)):
            match = tuple(match)
        self._rules.append(Rule(match, rc, stdout, stderr, list(creates), dict(provides or {})))
        return self

    def _respond(self, argv: Tuple[str, ...], shell: bool) -> RunResult:
        if self.handler is not None:
            handled = self.handler(argv, shell)
            if handled is not None:
                return handled
        for rule in reversed(self._rules):
            if rule.matches(argv, shell):
                if rule.rc == 0:
                    self.paths.update(rule.creates)
                    self.programs.update(rule.provides)
                return RunResult(rc=rule.rc, stdout=rule.stdout, stderr=rule.stderr)
        return RunResult(rc=0, stdout="", stderr="")

    async def run(self, argv, *, environment=None, cwd=None, timeout=None, capture=False):
        argv = tuple(str(a) for a in argv)
        self.calls.append(Call(argv, capture, dict(environment) if environment else None))
        return self._respond(argv, shell=False)

    async def run_shell(self, command, *, environment=None, timeout=None, capture=False):
        argv = ("sh", "-c", command)
        self.calls.append(Call(argv, capture, dict(environment) if environment else None, shell=True))
        return self._respond(argv, shell=True)

    def which(self, program: str) -> Optional[str]:
        directory = self.programs.get(program)
        if directory is not None and directory in self._path:
            return f"{directory}/{program}"
        return None

    def exists(self, path: str) -> bool:
        return str(path) in self.paths

    @property
    def commands(self) -> List[Tuple[str, ...]]:
        return [c.argv for c in self.calls]

    @property
    def mutations(self) -> List[Tuple[str, ...]]:
        """Calls that were not read-only probes."""
        return [c.argv for c in self.calls if not c.capture]


class RecordingReporter(Reporter):
    """Keeps (kind, message) pairs."""

    def __init__(self):
        self.events: List[Tuple[str, str]] = []

    def announce_start(self, title): self.events.append(("start", title))
    def step(self, message): self.events.append(("step", message))
    def success(self, message): self.events.append(("success", message))
    def info(self, message): self.events.append(("info", message))
    def warning(self, message): self.events.append(("warning", message))
    def error(self, message): self.events.append(("error", message))
    def separator(self): self.events.append(("separator", ""))

    def messages(self, kind: str) -> List[str]:
        return [m for k, m in self.events if k == kind]


def build_config(tmp_path: Path, platform: Platform = Platform.DEBIAN, **overrides) -> BootstrapConfig:
    home = tmp_path / "home"
    home.mkdir(exist_ok=True)
    source_dir = tmp_path / "bundle"
    source_dir.mkdir(exist_ok=True)
    values = dict(
        platform=platform,
        home=home,
        user="tester",
        source_dir=source_dir,
        zsh_custom=home / ".oh-my-zsh" / "custom",
        log_file=tmp_path / "dotboot.log",
        is_root=False,
    )
    values.update(overrides)
    return BootstrapConfig(**values)


@pytest.fixture
def executor() -> FakeExecutor:
    return FakeExecutor()


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()


@pytest.fixture
def make_config(tmp_path):
    def factory(platform: Platform = Platform.DEBIAN, **overrides) -> BootstrapConfig:
        return build_config(tmp_path, platform, **overrides)
    return factory


@pytest.fixture
def make_context(make_config, executor, reporter):
    def factory(platform: Platform = Platform.DEBIAN, **overrides) -> StepContext:
        return StepContext(
            config=make_config(platform, **overrides),
            executor=executor,
            reporter=reporter,
        )
    return factory


@pytest.fixture
def make_executor():
    return FakeExecutor
