# Copyright (c) 2024 Dotboot Contributors
# MIT License

"""
Dotboot: personal environment bootstrap.

Brings a fresh macOS, Debian-family or RedHat-family machine to a known
working state by running an ordered list of idempotent provisioning steps.

Features:
    - OS detection (macOS, Debian/Ubuntu, Fedora/RHEL/CentOS)
    - Essential toolchain via the system package manager
    - Homebrew bootstrap and bulk package install with per-package fallback
    - Oh My Zsh and plugin checkout
    - Dotfile deployment into the home directory

This package exposes the main CLI entry point and release metadata.
"""

from __future__ import annotations

from dotboot.release import __version__, __author__, __codename__

__all__ = [
    "__version__",
    "__author__",
    "__codename__",
]
