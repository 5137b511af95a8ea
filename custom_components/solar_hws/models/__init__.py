"""Typed data shapes for the Solar Hot Water integration."""

from .types import SetpointLogRecordDict, SolarHWSConfigDict

__all__ = ["SetpointLogRecordDict", "SolarHWSConfigDict"]
