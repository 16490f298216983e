"""
Dotboot command step

Make a single program available on PATH.
"""

from dotboot.engine.results import StepOutcome
from dotboot.steps.base import ProvisioningStep, register_step


@register_step
class CommandStep(ProvisioningStep):
    """Install ``package`` when ``command`` is not on PATH."""

    type_name = "command"
    required_args = ["command"]
    optional_args = {
        "package": None,     # defaults to the command name
        "manager": "brew",
    }

    def default_name(self) -> str:
        return str(self.args.get("command", self.type_name))

    async def is_satisfied(self) -> bool:
        return self.executor.which(self.args["command"]) is not None

    async def apply(self) -> StepOutcome:
        package = self.get_arg("package") or self.args["command"]
        manager = self.get_arg("manager", "brew")

        self.reporter.step(f"Installing {package}...")
        await self.run_command(
            [manager, "install", package],
            message=f"Could not install {package}",
        )
        return StepOutcome(
            changed=True,
            msg=f"{package} installed",
            details={"package": package},
        )
