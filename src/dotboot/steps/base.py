"""
Dotboot Step Base

Base class and registry for all provisioning steps.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Optional, Sequence, Type

from dotboot.config import BootstrapConfig
from dotboot.engine.errors import CommandError, DotbootError, ExitCode, UnsupportedPlatformError
from dotboot.engine.reporter import NullReporter, Reporter
from dotboot.engine.results import StepOutcome, StepResult, StepStatus
from dotboot.executors.base import CommandExecutor, RunResult, format_command
from dotboot.platform.detect import Platform

logger = logging.getLogger(__name__)

KNOWN_PLATFORMS: FrozenSet[Platform] = frozenset(
    {Platform.MACOS, Platform.DEBIAN, Platform.REDHAT}
)


@dataclass
class StepContext:
    """What every step gets to work with during a run."""

    config: BootstrapConfig
    executor: CommandExecutor
    reporter: Reporter = field(default_factory=NullReporter)

    @property
    def platform(self) -> Platform:
        return self.config.platform


class ProvisioningStep(ABC):
    """
    Base class for all provisioning steps.

    A step brings one property of the system into its goal state. run()
    holds the contract every step follows:

    1. is_satisfied() is true -> ALREADY_SATISFIED, nothing else happens.
    2. The platform is not supported -> fatal result when
       fatal_if_unsupported, SKIPPED_UNSUPPORTED otherwise.
    3. apply(); a DotbootError from it becomes FAILED (fatal if the error
       says so).
    """

    # Step type (used for registration and in the manifest)
    type_name: str = ""

    # Required arguments
    required_args: List[str] = []

    # Optional arguments with defaults
    optional_args: Dict[str, Any] = {}

    # None means every platform, UNKNOWN included
    supported_platforms: Optional[FrozenSet[Platform]] = None

    fatal_if_unsupported: bool = False

    def __init__(self, args: Dict[str, Any], context: StepContext):
        self.args = dict(args)
        self.context = context
        self.config = context.config
        self.executor = context.executor
        self.reporter = context.reporter
        self.name = str(self.args.get("name") or self.default_name())

    def default_name(self) -> str:
        return self.type_name

    def satisfied_message(self) -> str:
        return f"{self.name} is already in place"

    @classmethod
    def expand(cls, args: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Split one manifest entry into the arguments of one or more steps."""
        return [args]

    def validate_args(self) -> Optional[str]:
        """
        Validate step arguments.

        Returns:
            Error message if validation fails, None otherwise
        """
        for required in self.required_args:
            if required not in self.args:
                return f"Missing required argument: {required}"
        return None

    def get_arg(self, name: str, default: Any = None) -> Any:
        """Get an argument value with optional default."""
        if name in self.args:
            return self.args[name]
        if name in self.optional_args:
            return self.optional_args[name]
        return default

    def platform_args(self) -> Dict[str, Any]:
        """Arguments under the current platform's key (``debian:`` etc.)."""
        return self.args.get(self.platform.value) or {}

    @property
    def platform(self) -> Platform:
        return self.context.platform

    def supports(self, platform: Platform) -> bool:
        if self.supported_platforms is None:
            return True
        return platform in self.supported_platforms

    def privileged(self, argv: Sequence[str]) -> List[str]:
        """Prefix a command with sudo unless already running as root."""
        if self.config.is_root:
            return list(argv)
        return ["sudo", *argv]

    async def probe(self, argv: Sequence[str]) -> bool:
        """Run a read-only query; True when it exits 0."""
        result = await self.executor.run(argv, capture=True)
        return result.success

    async def run_command(
        self,
        argv: Sequence[str],
        *,
        environment: Optional[Dict[str, str]] = None,
        message: str = "Command failed",
    ) -> RunResult:
        """Run a mutating command; raise CommandError if it fails."""
        result = await self.executor.run(argv, environment=environment)
        if not result.success:
            raise CommandError(
                format_command(argv),
                message,
                rc=result.rc,
                stdout=result.stdout,
                stderr=result.stderr,
            )
        return result

    async def run_shell(
        self,
        command: str,
        *,
        environment: Optional[Dict[str, str]] = None,
        message: str = "Command failed",
    ) -> RunResult:
        result = await self.executor.run_shell(command, environment=environment)
        if not result.success:
            raise CommandError(
                command,
                message,
                rc=result.rc,
                stdout=result.stdout,
                stderr=result.stderr,
            )
        return result

    @abstractmethod
    async def is_satisfied(self) -> bool:
        """Check whether the goal state already holds. Must not mutate."""
        pass

    @abstractmethod
    async def apply(self) -> StepOutcome:
        """Bring the system into the goal state."""
        pass

    async def run(self) -> StepResult:
        """Execute the step."""
        platform = self.platform

        if await self.is_satisfied():
            logger.info("Step %s already satisfied", self.name)
            return StepResult(
                step=self.name,
                status=StepStatus.ALREADY_SATISFIED,
                msg=self.satisfied_message(),
            )

        if not self.supports(platform):
            error = UnsupportedPlatformError(platform.value, self.name)
            logger.warning("Step %s does not support %s", self.name, platform.value)
            return StepResult(
                step=self.name,
                status=StepStatus.SKIPPED_UNSUPPORTED,
                msg=str(error),
                fatal=self.fatal_if_unsupported,
                exit_code=error.exit_code,
            )

        try:
            outcome = await self.apply()
        except DotbootError as e:
            logger.info("Step %s failed: %s", self.name, e)
            rc = getattr(e, "rc", None)
            return StepResult(
                step=self.name,
                status=StepStatus.FAILED,
                msg=str(e),
                rc=rc if rc is not None else 1,
                stderr=getattr(e, "stderr", None) or "",
                fatal=e.fatal,
                exit_code=e.exit_code if e.fatal else ExitCode.STEP_FAILED,
            )

        return outcome.to_step_result(self.name)


# Step registry
_steps: Dict[str, Type[ProvisioningStep]] = {}
_steps_imported = False


def register_step(cls: Type[ProvisioningStep]) -> Type[ProvisioningStep]:
    """Decorator to register a step class."""
    _steps[cls.type_name] = cls
    return cls


def get_step_type(name: str) -> Optional[Type[ProvisioningStep]]:
    """Get a step class by type name."""
    _ensure_steps_imported()
    return _steps.get(name)


def list_step_types() -> List[str]:
    """List all registered step type names."""
    _ensure_steps_imported()
    return list(_steps.keys())


def _ensure_steps_imported() -> None:
    """Ensure all built-in steps have been imported."""
    global _steps_imported
    if not _steps_imported:
        _import_builtin_steps()
        _steps_imported = True


def _import_builtin_steps() -> None:
    """Import all built-in steps to register them."""
    # These imports trigger the @register_step decorators
    from dotboot.steps import toolchain
    from dotboot.steps import package_manager
    from dotboot.steps import packages
    from dotboot.steps import command
    from dotboot.steps import shell_framework
    from dotboot.steps import plugins
    from dotboot.steps import dotfiles
