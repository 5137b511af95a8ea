"""Controller state and per-invocation inputs.

ControlState is the only thing the controller remembers between passes. It is
injected by the caller (the coordinator owns one per config entry) so every
pass is a function of (message, input state, control state, now).
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from math import isfinite
from typing import TYPE_CHECKING, Any, Protocol

from ..const import PAYLOAD_S2, PAYLOAD_S3, PAYLOAD_S4, PAYLOAD_TIME, ControlMode

if TYPE_CHECKING:
    from .setpoint_logger import SetpointLogRecord

_LOGGER = logging.getLogger(__name__)


class InputStore(Protocol):
    """Read-only view of the process-wide input state.

    Written by external collaborators (energy management, weather pipeline,
    manual overrides). A plain dict satisfies this protocol.
    """

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value stored under key, or default."""


@dataclass
class ControlState:
    """State carried across controller passes for the process lifetime.

    All fields are read and written together within one pass. Callers that
    can invoke the controller concurrently must serialize passes.
    """

    last_run_timestamp: datetime | None = None
    last_element_switch_timestamp: datetime | None = None
    last_control_mode: ControlMode = ControlMode.AUTO_CONTROL
    last_logged_setpoint_record: SetpointLogRecord | None = None


@dataclass(frozen=True)
class SensorReading:
    """Validated tank temperatures (°C) and controller uptime (s)."""

    s2: float
    s3: float
    s4: float
    uptime_seconds: float | None = None


def is_number(value: Any) -> bool:
    """Check for a real, finite number (bools are not temperatures)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return isfinite(value)


def parse_sensor_reading(payload: Mapping[str, Any] | None) -> SensorReading | None:
    """Validate the inbound message.

    Returns None if any of S2/S3/S4 is missing or non-numeric. A missing or
    invalid uptime is not fatal: it only blocks switch-on.
    """
    if not payload:
        return None

    s2 = payload.get(PAYLOAD_S2)
    s3 = payload.get(PAYLOAD_S3)
    s4 = payload.get(PAYLOAD_S4)
    if not (is_number(s2) and is_number(s3) and is_number(s4)):
        return None

    uptime = payload.get(PAYLOAD_TIME)
    return SensorReading(
        s2=float(s2),
        s3=float(s3),
        s4=float(s4),
        uptime_seconds=float(uptime) if is_number(uptime) else None,
    )


def read_flag(inputs: InputStore, key: str) -> bool:
    """Read a 0/1 flag from the input state. Absent means off."""
    value = inputs.get(key)
    if isinstance(value, str):
        return value.strip().lower() in ("1", "on", "true")
    if value is None:
        return False
    try:
        return int(value) == 1
    except (TypeError, ValueError):
        _LOGGER.debug("Cannot interpret %s=%r as a flag, treating as off", key, value)
        return False


def read_bool(inputs: InputStore, key: str) -> bool:
    """Read a boolean from the input state. Any truthy value is on."""
    value = inputs.get(key)
    if isinstance(value, str):
        return value.strip().lower() not in ("", "0", "off", "false")
    return bool(value)
