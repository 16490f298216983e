"""
Dotboot dotfiles step

Copy configuration files from the bundle into the home directory.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional

from dotboot.engine.errors import ConfigError
from dotboot.engine.results import StepOutcome
from dotboot.platform import fs
from dotboot.steps.base import ProvisioningStep, register_step

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DotfileSpec:
    """A source in the bundle and where it goes."""

    src: Path
    dest: Path

    @property
    def present(self) -> bool:
        return self.src.exists()

    def deployed(self) -> bool:
        if self.src.is_dir():
            return fs.tree_matches(self.src, self.dest)
        return fs.files_match(self.src, self.dest)


@register_step
class DotfilesStep(ProvisioningStep):
    """
    Deploy files and directories.

    Relative sources resolve against the bundle directory. Directories are
    merged into the destination recursively, files overwrite theirs. A
    source that is not in the bundle is skipped with a note, never a
    failure.
    """

    type_name = "dotfiles"
    required_args = ["files"]

    def default_name(self) -> str:
        return "Dotfiles"

    def validate_args(self) -> Optional[str]:
        error = super().validate_args()
        if error:
            return error
        try:
            self.specs()
        except ConfigError as e:
            return e.message
        return None

    def specs(self) -> List[DotfileSpec]:
        entries = self.args["files"]
        if not isinstance(entries, list):
            raise ConfigError("'files' must be a list of {src, dest} records")
        return [self._spec(entry) for entry in entries]

    def _spec(self, entry: Any) -> DotfileSpec:
        if not isinstance(entry, dict) or "src" not in entry or "dest" not in entry:
            raise ConfigError(f"Dotfile entries need 'src' and 'dest', got: {entry!r}")
        src = Path(str(entry["src"])).expanduser()
        if not src.is_absolute():
            src = self.config.source_dir / src
        dest = Path(str(entry["dest"])).expanduser()
        if not dest.is_absolute():
            dest = self.config.home / dest
        return DotfileSpec(src=src, dest=dest)

    def missing_sources(self) -> List[DotfileSpec]:
        return [spec for spec in self.specs() if not spec.present]

    def satisfied_message(self) -> str:
        missing = self.missing_sources()
        if missing:
            names = ", ".join(str(spec.src) for spec in missing)
            return f"{self.name} up to date (not in bundle: {names})"
        return f"{self.name} up to date"

    async def is_satisfied(self) -> bool:
        satisfied = True
        for spec in self.specs():
            if not spec.present:
                self.reporter.info(f"{spec.src} not found, skipping")
                continue
            if not spec.deployed():
                satisfied = False
        return satisfied

    async def apply(self) -> StepOutcome:
        copied: List[str] = []
        skipped: List[str] = []
        failed: List[str] = []

        for spec in self.specs():
            if not spec.present:
                skipped.append(str(spec.src))
                continue
            if spec.deployed():
                continue
            try:
                if spec.src.is_dir():
                    fs.copy_tree(spec.src, spec.dest)
                else:
                    fs.copy_file(spec.src, spec.dest)
            except OSError as e:
                logger.info("Copy %s -> %s failed: %s", spec.src, spec.dest, e)
                self.reporter.error(f"Could not copy {spec.src} to {spec.dest}: {e}")
                failed.append(str(spec.dest))
                continue
            logger.info("Copied %s -> %s", spec.src, spec.dest)
            copied.append(str(spec.dest))

        details = {"copied": copied, "skipped": skipped, "failed": failed}
        if failed:
            return StepOutcome(
                failed=True,
                rc=1,
                msg=f"Could not deploy: {', '.join(failed)}",
                details=details,
            )
        return StepOutcome(
            changed=bool(copied),
            msg=f"Deployed {len(copied)} of {len(copied) + len(skipped)} entries",
            details=details,
        )
