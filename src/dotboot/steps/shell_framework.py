"""
Dotboot shell framework step

Install a shell framework (Oh My Zsh) from its official installer script.
"""

import shlex

from dotboot.engine.results import StepOutcome
from dotboot.steps.base import ProvisioningStep, register_step


@register_step
class ShellFrameworkStep(ProvisioningStep):
    """
    Ensure the framework directory exists; run the installer if it does not.

    The installer is told where to install through ``ZSH`` and runs with
    ``--unattended`` so it neither changes the login shell nor starts a new
    one in the middle of the run.
    """

    type_name = "shell_framework"
    required_args = ["dest", "installer_url"]
    optional_args = {
        "installer_args": ["--unattended"],
        "environment": {},
    }

    def default_name(self) -> str:
        return "Oh My Zsh"

    @property
    def dest(self) -> str:
        return str(self.args["dest"])

    async def is_satisfied(self) -> bool:
        return self.executor.exists(self.dest)

    async def apply(self) -> StepOutcome:
        url = self.args["installer_url"]
        installer_args = " ".join(shlex.quote(str(a)) for a in self.get_arg("installer_args") or [])
        command = f'sh -c "$(curl -fsSL {shlex.quote(url)})" "" {installer_args}'.rstrip()

        environment = {"ZSH": self.dest}
        environment.update(self.get_arg("environment") or {})

        self.reporter.step(f"Installing {self.name}...")
        await self.run_shell(
            command,
            environment=environment,
            message=f"{self.name} installer failed",
        )

        if not self.executor.exists(self.dest):
            return StepOutcome(
                failed=True,
                rc=1,
                msg=f"Installer finished but {self.dest} does not exist",
            )

        return StepOutcome(
            changed=True,
            msg=f"{self.name} installed",
            details={"dest": self.dest},
        )
