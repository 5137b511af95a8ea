"""Switch decision engine for the heating element.

Two observable states, ELEMENT_OFF and ELEMENT_ON. The authoritative relay
state is external and read each pass; the engine does not track it.

Evaluation order per pass:
1. Disabled guard - auto control disabled, no command
2. Input guard - invalid S2/S3/S4, no command (never act on untrusted data)
3. ON -> OFF when S3 > switch_off_temp
4. OFF -> ON when uptime > min_time AND S3 < switch_on_temp AND S4 < switch_on_s4_temp
5. Otherwise no command

Steps 3 and 4 pass through the anti-cycling gate. ON and OFF share a single
last-switch timestamp, so they cool down against each other.

"No command" means leave the relay alone. It is NOT "command the current state".
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from math import ceil, floor

from ..const import ControlMode, SwitchAction
from ..utils.time_utils import minutes_since
from .config import ThresholdSet
from .state import ControlState, SensorReading

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class SwitchDecision:
    """Tagged result of a switch evaluation."""

    action: SwitchAction
    reason: str

    @property
    def command(self) -> int | None:
        """Element command for the relay: 1 (ON), 0 (OFF) or None (leave alone)."""
        if self.action == SwitchAction.TURN_ON:
            return 1
        if self.action == SwitchAction.TURN_OFF:
            return 0
        return None

    @property
    def has_command(self) -> bool:
        """Check whether the relay should be driven this pass."""
        return self.action != SwitchAction.NO_ACTION


def no_action(reason: str) -> SwitchDecision:
    """Build a NO_ACTION decision."""
    return SwitchDecision(action=SwitchAction.NO_ACTION, reason=reason)


class SwitchEngine:
    """Evaluate switch-on/switch-off conditions under anti-cycling limits."""

    def __init__(self, min_time_seconds: float, min_switch_interval_minutes: float):
        """Initialize switch engine.

        Args:
            min_time_seconds: Controller uptime required before any switch-on
            min_switch_interval_minutes: Minimum dwell between element changes
        """
        self.min_time_seconds = min_time_seconds
        self.min_switch_interval_minutes = min_switch_interval_minutes

    def evaluate(
        self,
        reading: SensorReading | None,
        thresholds: ThresholdSet | None,
        element_on: bool,
        disable_auto_control: bool,
        control_mode: ControlMode,
        state: ControlState,
        now: datetime,
    ) -> SwitchDecision:
        """Decide whether to switch the element this pass.

        Args:
            reading: Validated sensor reading, or None if the message was invalid
            thresholds: Resolved thresholds for the current mode
            element_on: Current relay state
            disable_auto_control: Auto control disabled by an external authority
            control_mode: Current control authority (for the disabled reason)
            state: Control state (last switch timestamp stamped on a switch)
            now: Current time

        Returns:
            SwitchDecision (NO_ACTION when nothing should change)
        """
        if disable_auto_control:
            if control_mode == ControlMode.ENERGY_MGMT:
                reason = "Auto control disabled - energy management is controlling HWS"
            else:
                reason = "Auto control disabled - manual control active"
            _LOGGER.debug(reason)
            return no_action(reason)

        if reading is None or thresholds is None:
            return no_action("Invalid sensor data")

        if element_on:
            if reading.s3 > thresholds.switch_off_temp:
                return self._switch(
                    SwitchAction.TURN_OFF,
                    f"S3 {reading.s3:.1f}°C > {thresholds.switch_off_temp:.1f}°C",
                    state,
                    now,
                )
            return no_action("Element ON, S3 below switch-off threshold")

        uptime_ok = (
            reading.uptime_seconds is not None and reading.uptime_seconds > self.min_time_seconds
        )
        s3_low = reading.s3 < thresholds.switch_on_temp
        s4_low = reading.s4 < thresholds.switch_on_s4_temp

        _LOGGER.debug(
            "Switch-on check: s3=%.1f < %.1f? %s, s4=%.1f < %.1f? %s, time=%s > %s? %s",
            reading.s3,
            thresholds.switch_on_temp,
            s3_low,
            reading.s4,
            thresholds.switch_on_s4_temp,
            s4_low,
            reading.uptime_seconds,
            self.min_time_seconds,
            uptime_ok,
        )

        if uptime_ok and s3_low and s4_low:
            return self._switch(
                SwitchAction.TURN_ON,
                f"S3 {reading.s3:.1f}°C < {thresholds.switch_on_temp:.1f}°C "
                f"AND S4 {reading.s4:.1f}°C < {thresholds.switch_on_s4_temp:.1f}°C",
                state,
                now,
            )

        return no_action("Element OFF, switch-on conditions not met")

    def _switch(
        self,
        action: SwitchAction,
        condition: str,
        state: ControlState,
        now: datetime,
    ) -> SwitchDecision:
        """Apply the anti-cycling gate and stamp the switch time on success."""
        label = "on" if action == SwitchAction.TURN_ON else "off"
        elapsed = minutes_since(state.last_element_switch_timestamp, now)

        if elapsed < self.min_switch_interval_minutes:
            wait = ceil(self.min_switch_interval_minutes - elapsed)
            reason = (
                f"Switch-{label} blocked: only {floor(elapsed)}min since last switch, "
                f"need {wait}min more"
            )
            _LOGGER.debug(reason)
            return no_action(reason)

        state.last_element_switch_timestamp = now
        _LOGGER.info("Switching %s: %s", label.upper(), condition)
        return SwitchDecision(action=action, reason=condition)
