"""
Dotboot Manifest

Loads the YAML manifest that lists provisioning steps and turns it into
step objects. The manifest is data only: package names, URLs, paths.

    vars:
      bundle: "{{ source_dir }}"
    steps:
      - type: packages
        name: CLI tools
        packages: [bat, fd]
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from dotboot.engine.errors import ConfigError
from dotboot.engine.templating import TemplateEngine
from dotboot.steps.base import ProvisioningStep, StepContext, get_step_type

DEFAULT_MANIFEST = Path(__file__).resolve().parent.parent / "data" / "manifest.yml"


@dataclass
class StepEntry:
    """One entry of the manifest's ``steps`` list."""

    type: str
    args: Dict[str, Any] = field(default_factory=dict)


@dataclass
class Manifest:
    """A parsed manifest."""

    path: str
    entries: List[StepEntry] = field(default_factory=list)
    vars: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def load(cls, path: Optional[Union[str, Path]] = None) -> "Manifest":
        """
        Parse a manifest file.

        Args:
            path: Manifest location; the packaged default when None

        Raises:
            ConfigError: If the file is missing, not YAML, or malformed
        """
        manifest_path = Path(path) if path is not None else DEFAULT_MANIFEST

        if not manifest_path.is_file():
            raise ConfigError("Manifest not found", file_path=str(manifest_path))

        try:
            data = yaml.safe_load(manifest_path.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML: {e}", file_path=str(manifest_path))

        return cls.from_data(data, str(manifest_path))

    @classmethod
    def from_data(cls, data: Any, path: str = "<memory>") -> "Manifest":
        if not isinstance(data, dict):
            raise ConfigError("Manifest must be a mapping", file_path=path)

        variables = data.get("vars") or {}
        if not isinstance(variables, dict):
            raise ConfigError("'vars' must be a mapping", file_path=path)

        steps = data.get("steps")
        if not isinstance(steps, list) or not steps:
            raise ConfigError("'steps' must be a non-empty list", file_path=path)

        entries = []
        for index, raw in enumerate(steps, start=1):
            if not isinstance(raw, dict):
                raise ConfigError(f"Step #{index} must be a mapping", file_path=path)
            step_type = raw.get("type")
            if not step_type:
                raise ConfigError(f"Step #{index} has no 'type'", file_path=path)
            args = {k: v for k, v in raw.items() if k != "type"}
            entries.append(StepEntry(type=str(step_type), args=args))

        return cls(path=path, entries=entries, vars=dict(variables))

    def template_vars(self, context: StepContext, engine: TemplateEngine) -> Dict[str, Any]:
        """Config variables plus the manifest's own ``vars`` (rendered)."""
        variables = context.config.template_vars()
        for name, value in self.vars.items():
            variables[name] = engine.render_recursive(value, variables)
        return variables

    def build_steps(
        self,
        context: StepContext,
        engine: Optional[TemplateEngine] = None,
    ) -> List[ProvisioningStep]:
        """
        Instantiate the manifest's steps, in order.

        Raises:
            ConfigError: Unknown step type, bad arguments or bad templates
        """
        engine = engine or TemplateEngine()
        variables = self.template_vars(context, engine)

        steps: List[ProvisioningStep] = []
        for entry in self.entries:
            step_class = get_step_type(entry.type)
            if step_class is None:
                raise ConfigError(f"Unknown step type: {entry.type}", file_path=self.path)

            args = engine.render_recursive(entry.args, variables)
            for step_args in step_class.expand(args):
                step = step_class(step_args, context)
                error = step.validate_args()
                if error:
                    raise ConfigError(f"Step '{step.name}': {error}", file_path=self.path)
                steps.append(step)

        return steps
