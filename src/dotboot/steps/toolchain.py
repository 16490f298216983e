"""
Dotboot toolchain step

Compiler toolchain and baseline utilities from the system package manager.
"""

from dotboot.engine.errors import FatalStepError
from dotboot.engine.results import StepOutcome
from dotboot.platform.detect import Platform
from dotboot.steps.base import KNOWN_PLATFORMS, ProvisioningStep, register_step


@register_step
class ToolchainStep(ProvisioningStep):
    """
    Ensure a compiler toolchain, git and an HTTP fetch tool are installed.

    Manifest arguments are keyed by platform::

        debian: {probe: build-essential, packages: [...]}
        redhat: {probe: gcc, groups: ["Development Tools"], packages: [...]}

    macOS needs no arguments: the Xcode Command Line Tools are probed with
    ``xcode-select -p``. Their installer is a GUI dialog, so after starting
    it the run stops and asks to be re-run.
    """

    type_name = "toolchain"
    supported_platforms = KNOWN_PLATFORMS
    fatal_if_unsupported = True

    def default_name(self) -> str:
        return "Essential toolchain"

    async def is_satisfied(self) -> bool:
        options = self.platform_args()
        if self.platform == Platform.DEBIAN:
            return await self.probe(["dpkg", "-s", options.get("probe", "build-essential")])
        if self.platform == Platform.REDHAT:
            return await self.probe(["rpm", "-q", options.get("probe", "gcc")])
        if self.platform == Platform.MACOS:
            return await self.probe(["xcode-select", "-p"])
        return False

    async def apply(self) -> StepOutcome:
        if self.platform == Platform.DEBIAN:
            return await self._apply_debian()
        if self.platform == Platform.REDHAT:
            return await self._apply_redhat()
        return await self._apply_macos()

    async def _apply_debian(self) -> StepOutcome:
        packages = list(self.platform_args().get("packages") or [])
        self.reporter.step("Installing essential packages for Ubuntu/Debian...")

        await self.run_command(
            self.privileged(["apt-get", "update"]),
            message="apt-get update failed",
        )
        if packages:
            await self.run_command(
                self.privileged(["apt-get", "install", "-y", *packages]),
                message="apt-get install failed",
            )

        return StepOutcome(
            changed=True,
            msg=f"Installed {len(packages)} essential packages",
            details={"packages": packages},
        )

    async def _apply_redhat(self) -> StepOutcome:
        options = self.platform_args()
        groups = list(options.get("groups") or [])
        packages = list(options.get("packages") or [])
        self.reporter.step("Installing essential packages for Fedora/RHEL...")

        if groups:
            await self.run_command(
                self.privileged(["dnf", "groupinstall", "-y", *groups]),
                message="dnf groupinstall failed",
            )
        if packages:
            await self.run_command(
                self.privileged(["dnf", "install", "-y", *packages]),
                message="dnf install failed",
            )

        return StepOutcome(
            changed=True,
            msg=f"Installed {len(groups)} package groups and {len(packages)} packages",
            details={"groups": groups, "packages": packages},
        )

    async def _apply_macos(self) -> StepOutcome:
        self.reporter.step("Installing Xcode Command Line Tools...")
        await self.run_command(
            ["xcode-select", "--install"],
            message="Could not start the Xcode Command Line Tools installer",
        )
        raise FatalStepError(
            "Xcode Command Line Tools installation started",
            "Complete the installation and re-run dotboot.",
        )
