"""
Host platform detection.

Classifies the machine into one of the platform families dotboot knows how
to provision. Detection never fails: anything unrecognised is UNKNOWN and
it is up to the steps to decide whether that is fatal.
"""

import logging
import platform as _platform
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, Optional, Union

logger = logging.getLogger(__name__)

OS_RELEASE_PATH = "/etc/os-release"

DEBIAN_IDS = frozenset({"ubuntu", "debian"})
REDHAT_IDS = frozenset({"fedora", "rhel", "centos"})


class Platform(Enum):
    """Platform family."""
    MACOS = "macos"
    DEBIAN = "debian"
    REDHAT = "redhat"
    UNKNOWN = "unknown"

    @property
    def known(self) -> bool:
        return self is not Platform.UNKNOWN

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS = {
    Platform.MACOS: "macOS",
    Platform.DEBIAN: "Ubuntu/Debian",
    Platform.REDHAT: "Fedora/RHEL",
    Platform.UNKNOWN: "unknown",
}


@dataclass(frozen=True)
class HostFacts:
    """Facts gathered about the local host."""

    platform: Platform
    system: str
    distribution: str = ""
    distribution_version: str = ""
    distribution_pretty: str = ""
    architecture: str = ""

    def describe(self) -> str:
        if self.distribution_pretty:
            return f"{self.platform.value} ({self.distribution_pretty})"
        if self.distribution:
            return f"{self.platform.value} ({self.distribution})"
        return self.platform.value


def parse_os_release(content: str) -> Dict[str, str]:
    """Parse /etc/os-release content into a dict of KEY -> value."""
    fields: Dict[str, str] = {}
    for line in content.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        fields[key.strip()] = value.strip().strip('"\'')
    return fields


def _read_os_release(path: Union[str, Path]) -> Optional[Dict[str, str]]:
    try:
        content = Path(path).read_text(encoding="utf-8", errors="replace")
    except OSError:
        return None
    return parse_os_release(content)


def classify(system: str, os_release: Optional[Dict[str, str]]) -> Platform:
    """Map kernel name and os-release fields to a platform family."""
    if "darwin" in system.lower():
        return Platform.MACOS

    if os_release is None:
        return Platform.UNKNOWN

    dist_id = os_release.get("ID", "").lower()
    if dist_id in DEBIAN_IDS:
        return Platform.DEBIAN
    if dist_id in REDHAT_IDS:
        return Platform.REDHAT
    return Platform.UNKNOWN


def gather_facts(
    system: Optional[str] = None,
    os_release_path: Union[str, Path] = OS_RELEASE_PATH,
) -> HostFacts:
    """
    Gather minimal facts about the local host.

    Args:
        system: Kernel name override (defaults to ``uname -s``)
        os_release_path: Location of the distribution id file

    Returns:
        HostFacts; platform is UNKNOWN when nothing matches
    """
    if system is None:
        system = _platform.system()

    os_release = None
    if "darwin" not in system.lower():
        os_release = _read_os_release(os_release_path)

    platform = classify(system, os_release)
    fields = os_release or {}
    facts = HostFacts(
        platform=platform,
        system=system,
        distribution=fields.get("ID", ""),
        distribution_version=fields.get("VERSION_ID", ""),
        distribution_pretty=fields.get("PRETTY_NAME", ""),
        architecture=_platform.machine(),
    )
    logger.debug("Gathered host facts: %s", facts)
    return facts


def detect(
    system: Optional[str] = None,
    os_release_path: Union[str, Path] = OS_RELEASE_PATH,
) -> Platform:
    """Detect the host platform family."""
    return gather_facts(system=system, os_release_path=os_release_path).platform
