"""
Dotboot packages step

Bulk install through the third-party package manager.
"""

from typing import List, Optional

from dotboot.engine.results import StepOutcome
from dotboot.steps.base import ProvisioningStep, register_step


@register_step
class PackagesStep(ProvisioningStep):
    """
    Install a fixed, ordered set of packages.

    Missing packages go to the package manager in one batch. If the batch
    fails, each package is retried on its own (skipping whatever is present
    by then) so one bad package does not cost all the others.
    """

    type_name = "packages"
    required_args = ["packages"]
    optional_args = {
        "manager": "brew",
    }

    def __init__(self, args, context):
        super().__init__(args, context)
        self._pending: Optional[List[str]] = None

    def default_name(self) -> str:
        return "Packages"

    @property
    def manager(self) -> str:
        return self.get_arg("manager", "brew")

    @property
    def packages(self) -> List[str]:
        seen = set()
        ordered = []
        for package in self.args.get("packages") or []:
            package = str(package)
            if package not in seen:
                seen.add(package)
                ordered.append(package)
        return ordered

    def validate_args(self) -> Optional[str]:
        error = super().validate_args()
        if error:
            return error
        if not isinstance(self.args["packages"], list):
            return "'packages' must be a list"
        return None

    async def is_installed(self, package: str) -> bool:
        return await self.probe([self.manager, "list", package])

    async def missing_packages(self) -> List[str]:
        return [p for p in self.packages if not await self.is_installed(p)]

    async def is_satisfied(self) -> bool:
        self._pending = await self.missing_packages()
        return not self._pending

    async def apply(self) -> StepOutcome:
        missing = self._pending if self._pending is not None else await self.missing_packages()
        self._pending = None

        if not missing:
            return StepOutcome(changed=False, msg="All packages already installed")

        self.reporter.step(f"Installing {len(missing)} packages: {' '.join(missing)}")
        batch = await self.executor.run([self.manager, "install", *missing])
        if batch.success:
            return StepOutcome(
                changed=True,
                msg=f"Installed {len(missing)} packages",
                details={"installed": missing, "failed": []},
            )

        self.reporter.error("Some packages failed to install. Trying individual installation...")
        return await self._install_individually(missing)

    async def _install_individually(self, packages: List[str]) -> StepOutcome:
        installed: List[str] = []
        failed: List[str] = []

        for package in packages:
            if await self.is_installed(package):
                continue
            self.reporter.step(f"Installing {package}...")
            result = await self.executor.run([self.manager, "install", package])
            if result.success:
                installed.append(package)
            else:
                failed.append(package)
                self.reporter.error(f"{package} failed to install")

        details = {"installed": installed, "failed": failed}
        if failed:
            return StepOutcome(
                failed=True,
                rc=1,
                msg=f"Failed to install: {', '.join(failed)}",
                details=details,
            )
        return StepOutcome(
            changed=True,
            msg=f"Installed {len(installed)} packages individually",
            details=details,
        )
