# Copyright (c) 2024 Dotboot Contributors
# MIT License

"""Dotboot release metadata."""

from __future__ import annotations

__version__ = "0.3.0"
__author__ = "Dotboot Contributors"
__codename__ = "Homecoming"
