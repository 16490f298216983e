"""Provisioning steps."""

from dotboot.steps.base import (
    ProvisioningStep,
    StepContext,
    get_step_type,
    list_step_types,
    register_step,
)

__all__ = [
    "ProvisioningStep",
    "StepContext",
    "get_step_type",
    "list_step_types",
    "register_step",
]
