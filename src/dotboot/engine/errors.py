# Copyright (c) 2024 Dotboot Contributors
# MIT License

"""
Dotboot Error Classes.

All custom exceptions for clear error handling and exit codes.
Fatal errors stop the whole run; everything else is recorded against the
step that raised it and the run carries on.
"""

from __future__ import annotations

import enum


class ExitCode(enum.IntEnum):
    """Process exit codes."""

    SUCCESS = 0
    GENERIC_ERROR = 1
    STEP_FAILED = 2
    CONFIG_ERROR = 3
    UNSUPPORTED_PLATFORM = 4
    PROVISIONING_ABORTED = 5
    KEYBOARD_INTERRUPT = 130


class DotbootError(Exception):
    """Base exception for all Dotboot errors."""

    exit_code: int = ExitCode.GENERIC_ERROR
    fatal: bool = False

    def __init__(self, message: str, details: str | None = None) -> None:
        self.message = message
        self.details = details
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}\n  Details: {self.details}"
        return self.message


class ConfigError(DotbootError):
    """Error in the manifest or the environment configuration."""

    exit_code: int = ExitCode.CONFIG_ERROR

    def __init__(
        self,
        message: str,
        file_path: str | None = None,
        details: str | None = None,
    ) -> None:
        self.file_path = file_path
        location = f" in {file_path}" if file_path else ""
        super().__init__(f"Configuration error{location}: {message}", details)


class TemplateError(ConfigError):
    """Error rendering a Jinja2 template in the manifest."""

    def __init__(
        self,
        message: str,
        template: str | None = None,
        variable: str | None = None,
    ) -> None:
        self.template = template
        self.variable = variable

        details = None
        if template:
            truncated = template[:100] + "..." if len(template) > 100 else template
            details = f"Template: {truncated}"

        super().__init__(f"Template error: {message}", details=details)


class CommandError(DotbootError):
    """An external command exited non-zero."""

    exit_code: int = ExitCode.STEP_FAILED

    def __init__(
        self,
        command: str,
        message: str,
        rc: int | None = None,
        stdout: str | None = None,
        stderr: str | None = None,
    ) -> None:
        self.command = command
        self.rc = rc
        self.stdout = stdout
        self.stderr = stderr

        details_parts = []
        if rc is not None:
            details_parts.append(f"rc={rc}")
        if stderr:
            details_parts.append(f"stderr: {stderr.strip()[:200]}")

        super().__init__(
            f"{message} ({command})",
            "; ".join(details_parts) if details_parts else None,
        )


class FatalStepError(DotbootError):
    """A step cannot continue and nothing after it may run."""

    exit_code: int = ExitCode.PROVISIONING_ABORTED
    fatal: bool = True


class PackageManagerError(FatalStepError):
    """The package manager could not be put on PATH."""

    def __init__(self, manager: str, message: str, details: str | None = None) -> None:
        self.manager = manager
        super().__init__(f"{manager}: {message}", details)


class UnsupportedPlatformError(FatalStepError):
    """The detected platform is not one the step knows how to handle."""

    exit_code: int = ExitCode.UNSUPPORTED_PLATFORM

    def __init__(self, platform: str, step: str | None = None) -> None:
        self.platform = platform
        self.step = step
        where = f" for step '{step}'" if step else ""
        super().__init__(
            f"Unsupported operating system '{platform}'{where}. "
            "Supported: Ubuntu/Debian, Fedora/RHEL/CentOS and macOS."
        )
