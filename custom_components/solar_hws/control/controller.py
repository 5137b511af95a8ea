"""Solar hot water controller - one pass per inbound sensor message.

Pass order:
1. Rate limit (skipped passes do nothing at all)
2. Control authority monitoring
3. Mode, weather and threshold resolution
4. Switch decision (disabled guard, input guard, OFF/ON under anti-cycling)
5. Setpoint log record (independent of whether a command was issued)

All failures are local. The worst case is no action this pass; the next
sensor message is the natural retry.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from ..const import (
    PAYLOAD_S2,
    PAYLOAD_S3,
    PAYLOAD_S4,
    STATE_HOT_WATER_ELEMENT,
    STATE_SUPER_HEAT,
)
from .config import ControllerConfig
from .control_monitor import ControlStatus, monitor_control_state
from .hot_water import estimate_hot_water_level
from .mode_resolver import ModeResolution, resolve_mode
from .rate_limiter import should_run
from .setpoint_logger import SetpointLogger, SetpointLogRecord
from .state import ControlState, InputStore, parse_sensor_reading, read_flag
from .switch_engine import SwitchDecision, SwitchEngine, no_action
from .weather import WeatherAssessment, assess_weather

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ControllerResult:
    """Outputs of one controller pass."""

    ran: bool
    decision: SwitchDecision
    log_record: SetpointLogRecord | None = None
    status: ControlStatus | None = None
    resolution: ModeResolution | None = None
    weather: WeatherAssessment | None = None
    hot_water_level: int | None = None

    @property
    def command(self) -> int | None:
        """Element command: 1, 0 or None (leave relay alone)."""
        return self.decision.command


RATE_LIMITED = ControllerResult(ran=False, decision=no_action("Rate limited"))


class SolarHotWaterController:
    """Rule-based setpoint controller for a solar-assisted electric hot water tank."""

    def __init__(self, config: ControllerConfig):
        """Initialize controller.

        Args:
            config: Validated controller configuration
        """
        self.config = config
        self.engine = SwitchEngine(
            min_time_seconds=config.min_time_seconds,
            min_switch_interval_minutes=config.min_switch_interval_minutes,
        )
        self.setpoint_logger = SetpointLogger(config.logging, config.usable_temp)

    def run(
        self,
        payload: Mapping[str, Any] | None,
        inputs: InputStore,
        state: ControlState,
        now: datetime,
    ) -> ControllerResult:
        """Run one controller pass.

        Args:
            payload: Inbound message with s2, s3, s4 (°C) and time (uptime s)
            inputs: Process-wide input state (flags, relay state, weather)
            state: Control state, mutated in place
            now: Current wall-clock time (local, drives the time bands)

        Returns:
            ControllerResult with the switch decision and optional log record
        """
        if not should_run(state, now, self.config.controller_interval_seconds):
            return RATE_LIMITED

        status = monitor_control_state(inputs, state)

        reading = parse_sensor_reading(payload)
        if reading is None:
            _LOGGER.debug(
                "Invalid sensor data: S2=%s, S3=%s, S4=%s - skipping control logic",
                *((payload or {}).get(key) for key in (PAYLOAD_S2, PAYLOAD_S3, PAYLOAD_S4)),
            )

        weather = assess_weather(inputs, self.config.weather)
        resolution = resolve_mode(
            hour=now.hour,
            super_heat=read_flag(inputs, STATE_SUPER_HEAT),
            poor_solar=weather.poor_solar,
            config=self.config,
        )

        hot_water_level = None
        if reading is not None:
            hot_water_level = estimate_hot_water_level(
                reading.s2, reading.s3, reading.s4, self.config.usable_temp
            )
            _LOGGER.debug(
                "Mode: %s, Hot water: %d%%, S2:%.1f°C S3:%.1f°C S4:%.1f°C",
                resolution.mode,
                hot_water_level,
                reading.s2,
                reading.s3,
                reading.s4,
            )

        decision = self.engine.evaluate(
            reading=reading,
            thresholds=resolution.thresholds,
            element_on=read_flag(inputs, STATE_HOT_WATER_ELEMENT),
            disable_auto_control=status.disable_auto_control,
            control_mode=status.control_mode,
            state=state,
            now=now,
        )

        log_record = self.setpoint_logger.log_setpoints(
            reading=reading,
            resolution=resolution,
            weather=weather,
            status=status,
            state=state,
            now=now,
        )

        return ControllerResult(
            ran=True,
            decision=decision,
            log_record=log_record,
            status=status,
            resolution=resolution,
            weather=weather,
            hot_water_level=hot_water_level,
        )
