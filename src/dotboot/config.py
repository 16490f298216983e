"""
Run configuration.

Everything a step may need to know about the host and the user is resolved
once at startup into an immutable BootstrapConfig and handed to each step.
Behaviour is controlled by environment variables only:

    DOTBOOT_VERBOSE     stream command output and debug logging (default off)
    ZSH_CUSTOM          Oh My Zsh custom dir (default ~/.oh-my-zsh/custom)
    DOTBOOT_SOURCE_DIR  directory holding the configuration bundle (default cwd)
    DOTBOOT_MANIFEST    alternative manifest file (default: packaged manifest)
    DOTBOOT_LOG_FILE    debug log file (default ~/.cache/dotboot/dotboot.log)
"""

import os
import pwd
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from dotboot.platform.detect import Platform, detect

TRUE_VALUES = frozenset({"1", "true", "yes", "on"})

ENV_VERBOSE = "DOTBOOT_VERBOSE"
ENV_ZSH_CUSTOM = "ZSH_CUSTOM"
ENV_SOURCE_DIR = "DOTBOOT_SOURCE_DIR"
ENV_MANIFEST = "DOTBOOT_MANIFEST"
ENV_LOG_FILE = "DOTBOOT_LOG_FILE"


def parse_bool(value: Optional[str], default: bool = False) -> bool:
    """Interpret a boolean-like environment value."""
    if value is None or not value.strip():
        return default
    return value.strip().lower() in TRUE_VALUES


def _current_user(environ: Mapping[str, str]) -> str:
    try:
        return pwd.getpwuid(os.geteuid()).pw_name
    except KeyError:
        return environ.get("USER") or environ.get("LOGNAME") or "unknown"


@dataclass(frozen=True)
class BootstrapConfig:
    """Immutable settings for one provisioning run."""

    platform: Platform
    home: Path
    user: str
    source_dir: Path
    zsh_custom: Path
    verbose: bool = False
    manifest_path: Optional[Path] = None
    log_file: Optional[Path] = None
    is_root: bool = False

    @property
    def plugins_dir(self) -> Path:
        return self.zsh_custom / "plugins"

    def template_vars(self) -> Dict[str, Any]:
        """Variables available to manifest templates."""
        variables: Dict[str, Any] = {
            "home": str(self.home),
            "user": self.user,
            "platform": self.platform.value,
            "source_dir": str(self.source_dir),
            "zsh_custom": str(self.zsh_custom),
            "plugins_dir": str(self.plugins_dir),
        }
        return variables

    @classmethod
    def from_environment(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        platform: Optional[Platform] = None,
    ) -> "BootstrapConfig":
        """
        Build the configuration from environment variables.

        Args:
            environ: Environment to read (defaults to os.environ)
            platform: Detected platform; detected here when omitted
        """
        if environ is None:
            environ = os.environ
        if platform is None:
            platform = detect()

        home = Path(environ.get("HOME") or Path.home())

        zsh_custom_value = environ.get(ENV_ZSH_CUSTOM)
        if zsh_custom_value:
            zsh_custom = Path(os.path.expanduser(zsh_custom_value))
        else:
            zsh_custom = home / ".oh-my-zsh" / "custom"

        source_value = environ.get(ENV_SOURCE_DIR)
        source_dir = Path(os.path.expanduser(source_value)) if source_value else Path.cwd()

        manifest_value = environ.get(ENV_MANIFEST)
        manifest_path = Path(os.path.expanduser(manifest_value)) if manifest_value else None

        log_value = environ.get(ENV_LOG_FILE)
        if log_value:
            log_file = Path(os.path.expanduser(log_value))
        else:
            log_file = home / ".cache" / "dotboot" / "dotboot.log"

        return cls(
            platform=platform,
            home=home,
            user=_current_user(environ),
            source_dir=source_dir.resolve(),
            zsh_custom=zsh_custom,
            verbose=parse_bool(environ.get(ENV_VERBOSE)),
            manifest_path=manifest_path,
            log_file=log_file,
            is_root=os.geteuid() == 0,
        )
