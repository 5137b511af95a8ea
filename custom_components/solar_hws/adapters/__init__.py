"""Adapters between Home Assistant entities and the control engine."""

from .state_adapter import HassStateAdapter

__all__ = ["HassStateAdapter"]
