"""
Dotboot plugin step

Clone shell framework plugins into the custom plugins directory.
"""

import os
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from dotboot.engine.errors import ConfigError
from dotboot.engine.results import StepOutcome
from dotboot.steps.base import ProvisioningStep, register_step


@dataclass(frozen=True)
class PluginSpec:
    """A plugin checkout: directory name and where to clone it from."""

    name: str
    source: str

    @classmethod
    def from_dict(cls, data: Any) -> "PluginSpec":
        if not isinstance(data, dict) or "name" not in data or "source" not in data:
            raise ConfigError(f"Plugin entries need 'name' and 'source', got: {data!r}")
        name = str(data["name"])
        if not name or name in (".", "..") or "/" in name or os.sep in name:
            raise ConfigError(f"Invalid plugin name: {name!r}")
        return cls(name=name, source=str(data["source"]))


@register_step
class PluginStep(ProvisioningStep):
    """
    One plugin checkout.

    A manifest entry may list several plugins under ``plugins:``; it is
    expanded into one step per plugin, in order.
    """

    type_name = "plugin"
    required_args = ["plugin", "source"]
    optional_args = {
        "plugins_dir": None,    # defaults to $ZSH_CUSTOM/plugins
    }

    @classmethod
    def expand(cls, args: Dict[str, Any]) -> List[Dict[str, Any]]:
        if "plugins" not in args:
            return [args]
        records = args["plugins"]
        if not isinstance(records, list):
            raise ConfigError("'plugins' must be a list of {name, source} records")
        shared = {k: v for k, v in args.items() if k not in ("plugins", "name")}
        expanded = []
        for record in records:
            spec = PluginSpec.from_dict(record)
            expanded.append({**shared, "plugin": spec.name, "source": spec.source})
        return expanded

    def default_name(self) -> str:
        return f"plugin {self.args.get('plugin', '')}".strip()

    def validate_args(self) -> Optional[str]:
        error = super().validate_args()
        if error:
            return error
        try:
            self.spec
        except ConfigError as e:
            return e.message
        return None

    @property
    def spec(self) -> PluginSpec:
        return PluginSpec.from_dict({"name": self.args["plugin"], "source": self.args["source"]})

    @property
    def dest(self) -> str:
        plugins_dir = self.get_arg("plugins_dir") or str(self.config.plugins_dir)
        return os.path.join(str(plugins_dir), self.spec.name)

    async def is_satisfied(self) -> bool:
        return self.executor.exists(self.dest)

    async def apply(self) -> StepOutcome:
        spec = self.spec
        self.reporter.step(f"Installing {spec.name}...")
        await self.run_command(
            ["git", "clone", spec.source, self.dest],
            message=f"git clone of {spec.name} failed",
        )
        return StepOutcome(
            changed=True,
            msg=f"{spec.name} installed",
            details={"source": spec.source, "dest": self.dest},
        )
