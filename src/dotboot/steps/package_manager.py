"""
Dotboot package manager step

Bootstrap Homebrew and put it on PATH for the steps that follow.
"""

import logging
import os
import shlex
from typing import List, Optional

from dotboot.engine.errors import PackageManagerError
from dotboot.engine.results import StepOutcome
from dotboot.steps.base import KNOWN_PLATFORMS, ProvisioningStep, register_step

logger = logging.getLogger(__name__)


@register_step
class PackageManagerStep(ProvisioningStep):
    """
    Make sure the third-party package manager is reachable on PATH.

    If it is missing from PATH but already installed at one of the
    platform's known locations, only PATH is fixed. Otherwise the official
    installer is fetched and run non-interactively first. Every later
    package step depends on this one, so failing to end up with the
    manager on PATH is fatal.
    """

    type_name = "package_manager"
    required_args = ["installer_url"]
    optional_args = {
        "manager": "brew",
        "environment": {"NONINTERACTIVE": "1"},
    }
    supported_platforms = KNOWN_PLATFORMS
    fatal_if_unsupported = True

    def default_name(self) -> str:
        return "Homebrew"

    @property
    def manager(self) -> str:
        return self.get_arg("manager", "brew")

    def candidates(self) -> List[str]:
        return [str(c) for c in self.platform_args().get("candidates") or []]

    async def is_satisfied(self) -> bool:
        return self.executor.which(self.manager) is not None

    async def apply(self) -> StepOutcome:
        installed = False
        location = self._locate()

        if location is None:
            self.reporter.step(f"Installing {self.name}...")
            await self._run_installer()
            installed = True
            location = self._locate()

        if location is None:
            raise PackageManagerError(
                self.manager,
                "not found after installation",
                f"Looked in: {', '.join(self.candidates()) or '(no candidates)'}. "
                "Restart your terminal and re-run dotboot.",
            )

        bin_dir = os.path.dirname(location)
        prefix = os.path.dirname(bin_dir)
        self.executor.prepend_path(bin_dir, os.path.join(prefix, "sbin"))
        logger.info("Added %s to PATH", bin_dir)

        if self.executor.which(self.manager) is None:
            raise PackageManagerError(
                self.manager,
                f"{location} exists but is not runnable from PATH",
                "Restart your terminal and re-run dotboot.",
            )

        return StepOutcome(
            changed=True,
            msg=f"{self.name} installed" if installed else f"{self.name} added to PATH",
            details={"path": location, "installed": installed},
        )

    def _locate(self) -> Optional[str]:
        for candidate in self.candidates():
            if self.executor.exists(candidate):
                return candidate
        return None

    async def _run_installer(self) -> None:
        url = self.args["installer_url"]
        command = f'/bin/bash -c "$(curl -fsSL {shlex.quote(url)})"'
        result = await self.executor.run_shell(
            command,
            environment=dict(self.get_arg("environment") or {}),
        )
        # Whether the install worked is decided by looking for the binary
        if not result.success:
            logger.warning("Installer exited with %s: %s", result.rc, result.stderr.strip())
