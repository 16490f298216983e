"""
Dotboot Engine Module

Results, errors, templating and reporting. The manifest loader and the
runner import the step registry and live in their own modules.
"""

from dotboot.engine.errors import (
    DotbootError,
    ConfigError,
    CommandError,
    FatalStepError,
    PackageManagerError,
    UnsupportedPlatformError,
    ExitCode,
)
from dotboot.engine.results import StepStatus, StepResult, StepOutcome, RunReport
from dotboot.engine.templating import TemplateEngine
from dotboot.engine.reporter import Reporter, ConsoleReporter, NullReporter

__all__ = [
    "DotbootError",
    "ConfigError",
    "CommandError",
    "FatalStepError",
    "PackageManagerError",
    "UnsupportedPlatformError",
    "ExitCode",
    "StepStatus",
    "StepResult",
    "StepOutcome",
    "RunReport",
    "TemplateEngine",
    "Reporter",
    "ConsoleReporter",
    "NullReporter",
]
