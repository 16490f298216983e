"""
Dotboot Result Classes

Data structures for step and run results.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from enum import Enum
import json

from dotboot.engine.errors import ExitCode


class StepStatus(Enum):
    """Status of a step execution."""
    ALREADY_SATISFIED = "ok"
    APPLIED = "changed"
    SKIPPED_UNSUPPORTED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class StepResult:
    """Outcome of running a single provisioning step."""

    step: str
    status: StepStatus
    msg: str = ""
    rc: int = 0
    stdout: str = ""
    stderr: str = ""
    # A fatal result stops the runner; exit_code is what the process returns
    fatal: bool = False
    exit_code: int = ExitCode.SUCCESS
    details: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON output."""
        result: Dict[str, Any] = {
            "step": self.step,
            "status": self.status.value,
            "rc": self.rc,
        }
        if self.msg:
            result["msg"] = self.msg
        if self.stderr:
            result["stderr"] = self.stderr
        if self.fatal:
            result["fatal"] = True
            result["exit_code"] = int(self.exit_code)
        if self.details:
            result["details"] = self.details
        return result

    @property
    def failed(self) -> bool:
        return self.status == StepStatus.FAILED

    @property
    def ok(self) -> bool:
        """Check if the step left the system in its goal state."""
        return self.status in (StepStatus.ALREADY_SATISFIED, StepStatus.APPLIED)


@dataclass
class StepOutcome:
    """What a step's apply() reports back."""

    changed: bool = True
    failed: bool = False
    msg: str = ""
    rc: int = 0
    stdout: str = ""
    stderr: str = ""
    details: Dict[str, Any] = field(default_factory=dict)

    def to_step_result(self, step: str) -> StepResult:
        """Convert to StepResult."""
        if self.failed:
            status = StepStatus.FAILED
        elif self.changed:
            status = StepStatus.APPLIED
        else:
            status = StepStatus.ALREADY_SATISFIED

        return StepResult(
            step=step,
            status=status,
            msg=self.msg,
            rc=self.rc,
            stdout=self.stdout,
            stderr=self.stderr,
            exit_code=ExitCode.STEP_FAILED if self.failed else ExitCode.SUCCESS,
            details=self.details,
        )


@dataclass
class RunStats:
    """Per-status counts across a run."""

    ok: int = 0
    changed: int = 0
    skipped: int = 0
    failed: int = 0

    def record(self, status: StepStatus) -> None:
        """Record a step result status."""
        if status == StepStatus.ALREADY_SATISFIED:
            self.ok += 1
        elif status == StepStatus.APPLIED:
            self.changed += 1
        elif status == StepStatus.SKIPPED_UNSUPPORTED:
            self.skipped += 1
        elif status == StepStatus.FAILED:
            self.failed += 1

    def to_dict(self) -> Dict[str, int]:
        return {
            "ok": self.ok,
            "changed": self.changed,
            "skipped": self.skipped,
            "failed": self.failed,
        }


@dataclass
class RunReport:
    """Ordered results of one provisioning run."""

    results: List[StepResult] = field(default_factory=list)
    stats: RunStats = field(default_factory=RunStats)

    def add_result(self, result: StepResult) -> None:
        """Add a step result."""
        self.results.append(result)
        self.stats.record(result.status)

    @property
    def fatal_result(self) -> Optional[StepResult]:
        """The result that aborted the run, if any."""
        for result in self.results:
            if result.fatal:
                return result
        return None

    @property
    def aborted(self) -> bool:
        return self.fatal_result is not None

    @property
    def has_failures(self) -> bool:
        return any(r.failed for r in self.results)

    @property
    def success(self) -> bool:
        """Check if every step ended satisfied, applied or skipped."""
        return not self.aborted and not self.has_failures

    @property
    def exit_code(self) -> int:
        """Get appropriate exit code."""
        fatal = self.fatal_result
        if fatal is not None:
            return int(fatal.exit_code)
        if self.has_failures:
            return int(ExitCode.STEP_FAILED)
        return int(ExitCode.SUCCESS)

    def statuses(self) -> List[StepStatus]:
        return [r.status for r in self.results]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON output."""
        return {
            "steps": [r.to_dict() for r in self.results],
            "stats": self.stats.to_dict(),
            "aborted": self.aborted,
            "exit_code": self.exit_code,
        }

    def to_json(self, indent: int = 2) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)
