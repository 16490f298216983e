"""
Dotboot Provisioning Runner

Loads the manifest, builds the steps and runs them one after another.
"""

import asyncio
import logging
from pathlib import Path
from typing import List, Optional, Sequence, Union

from dotboot.config import BootstrapConfig
from dotboot.engine.errors import ConfigError, DotbootError, ExitCode
from dotboot.engine.manifest import Manifest
from dotboot.engine.reporter import ConsoleReporter, Reporter
from dotboot.engine.results import RunReport, StepResult, StepStatus
from dotboot.engine.templating import TemplateEngine
from dotboot.executors.base import CommandExecutor
from dotboot.executors.local import LocalExecutor
from dotboot.steps.base import ProvisioningStep, StepContext

logger = logging.getLogger(__name__)

BANNER_TITLE = "DOTFILES INSTALLER"


class ProvisioningRunner:
    """
    High-level provisioning runner.

    Steps run strictly in order. A failed step is recorded and the run
    moves on; a fatal result ends the run on the spot. Verbosity only
    changes what is shown, never which steps run or how results are
    classified.
    """

    def __init__(
        self,
        config: BootstrapConfig,
        executor: Optional[CommandExecutor] = None,
        reporter: Optional[Reporter] = None,
        manifest_path: Optional[Union[str, Path]] = None,
    ):
        self.config = config
        self.executor = executor or LocalExecutor(verbose=config.verbose)
        self.reporter = reporter or ConsoleReporter()
        self.manifest_path = manifest_path or config.manifest_path
        self.template_engine = TemplateEngine()
        self.context = StepContext(
            config=config,
            executor=self.executor,
            reporter=self.reporter,
        )

    def run(self) -> int:
        """
        Run the manifest synchronously.

        Returns:
            Exit code (0=success, 2=step failures, 3=config error,
            4=unsupported platform, 5=aborted, 130=interrupted)
        """
        try:
            report = asyncio.run(self.run_async())
        except ConfigError as e:
            logger.error("%s", e)
            self.reporter.error(str(e))
            return int(e.exit_code)
        except DotbootError as e:
            logger.error("%s", e)
            self.reporter.error(f"Error: {e}")
            return int(e.exit_code)
        except KeyboardInterrupt:
            self.reporter.error("Interrupted")
            return int(ExitCode.KEYBOARD_INTERRUPT)

        return report.exit_code

    async def run_async(self) -> RunReport:
        """Load the manifest and run its steps."""
        self.reporter.announce_start(BANNER_TITLE)
        self.reporter.step(f"Detected OS: {self.config.platform.label}")
        self.reporter.step(f"Current user: {self.config.user}")
        self.reporter.separator()

        manifest = Manifest.load(self.manifest_path)
        logger.info("Loaded manifest %s (%d entries)", manifest.path, len(manifest.entries))
        steps = manifest.build_steps(self.context, self.template_engine)

        logger.info("Running %d steps with the %s executor", len(steps), self.executor.executor_type)
        report = await self.execute(steps)
        logger.debug("Run report: %s", report.to_json())
        self._print_recap(report)
        return report

    async def execute(self, steps: Sequence[ProvisioningStep]) -> RunReport:
        """Run steps in order and collect their results."""
        report = RunReport()

        for step in steps:
            self.reporter.step(f"Checking {step.name}...")
            logger.info("Running step %s (%s)", step.name, step.type_name)

            result = await self._run_step(step)
            report.add_result(result)
            self._print_result(result)
            self.reporter.separator()

            if result.fatal:
                logger.error("Step %s is fatal, stopping: %s", step.name, result.msg)
                break

        return report

    async def _run_step(self, step: ProvisioningStep) -> StepResult:
        try:
            return await step.run()
        except Exception as e:
            logger.exception("Step %s raised", step.name)
            return StepResult(
                step=step.name,
                status=StepStatus.FAILED,
                msg=str(e) or type(e).__name__,
                rc=1,
                exit_code=ExitCode.STEP_FAILED,
            )

    def _print_result(self, result: StepResult) -> None:
        if result.status == StepStatus.APPLIED:
            self.reporter.success(result.msg or f"{result.step} done")
        elif result.status == StepStatus.ALREADY_SATISFIED:
            self.reporter.info(result.msg or f"{result.step} is already in place")
        elif result.status == StepStatus.SKIPPED_UNSUPPORTED and not result.fatal:
            self.reporter.warning(f"Skipped: {result.msg}")
        else:
            self.reporter.error(result.msg or f"{result.step} failed")
            if self.config.verbose and result.stderr:
                self.reporter.error(f"  stderr: {result.stderr.strip()[:500]}")

    def _print_recap(self, report: RunReport) -> None:
        stats = report.stats
        self.reporter.info(
            f"ok={stats.ok} changed={stats.changed} "
            f"skipped={stats.skipped} failed={stats.failed}"
        )

        fatal = report.fatal_result
        if fatal is not None:
            self.reporter.error(f"Stopped at {fatal.step}: {fatal.msg}")
            return

        if report.has_failures:
            failed: List[str] = [r.step for r in report.results if r.failed]
            self.reporter.error(f"Completed with failures: {', '.join(failed)}")
            return

        self.reporter.success("Dotfiles installation completed successfully!")
        self.reporter.announce_start("Installation complete! Please restart your terminal.")
