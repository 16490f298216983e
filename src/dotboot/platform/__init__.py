"""
Platform layer: host detection, filesystem helpers and terminal handling.
"""

from .detect import HostFacts, Platform, detect, gather_facts, parse_os_release

__all__ = [
    "HostFacts",
    "Platform",
    "detect",
    "gather_facts",
    "parse_os_release",
]
