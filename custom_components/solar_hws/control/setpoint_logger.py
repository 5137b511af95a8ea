"""Setpoint analytics records.

Every pass that proceeds past the rate limiter builds a record of the decision
context (mode, thresholds, weather, tank state, control authority), whether or
not a switch command was issued. The record is handed to a time-series
logging collaborator under SETPOINT_LOG_TOPIC.

With log_on_change_only, a record is emitted only when the mode, a threshold
or the poor weather flag differs from the last emitted record.
"""

import logging
from dataclasses import asdict, dataclass
from datetime import datetime

from ..const import ControlMode
from ..models.types import SetpointLogRecordDict
from ..utils.time_utils import epoch_millis
from .config import LoggingConfig
from .control_monitor import ControlStatus
from .hot_water import estimate_hot_water_level
from .mode_resolver import ModeResolution
from .state import ControlState, SensorReading
from .weather import WeatherAssessment

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class SetpointLogRecord:
    """Decision context snapshot for one controller pass."""

    # Core setpoints
    mode: str
    switch_off_temp: float
    switch_on_temp: float
    switch_on_s4_temp: float

    # Current status
    hot_water_level_pct: int

    # Weather (None when weather logging is disabled)
    cloud_cover_pct: float | None
    solar_irradiance: float | None
    weather_forecast: str | None
    poor_weather_mode: bool

    # Sensor readings
    s2_current: float
    s3_current: float
    s4_current: float

    # Trigger margins: negative on-margin = above switch-on, negative off-margin = safe
    margin_to_switch_on: float
    margin_to_switch_off: float

    # Time context
    hour_of_day: int
    timestamp: int  # epoch ms

    # Control authority
    control_state: ControlMode
    energy_mgmt_active: bool
    disable_auto_control: int

    def as_dict(self) -> SetpointLogRecordDict:
        """Convert to the outbound payload."""
        data = asdict(self)
        data["control_state"] = str(self.control_state)
        return data  # type: ignore[return-value]

    def setpoints_key(self) -> tuple[str, float, float, float, bool]:
        """Fields compared by log-on-change-only."""
        return (
            self.mode,
            self.switch_off_temp,
            self.switch_on_temp,
            self.switch_on_s4_temp,
            self.poor_weather_mode,
        )


class SetpointLogger:
    """Build setpoint records and apply the change-only filter."""

    def __init__(self, config: LoggingConfig, usable_temp: float):
        """Initialize setpoint logger.

        Args:
            config: Logging toggles
            usable_temp: Usable hot water temperature for the level estimate
        """
        self.config = config
        self.usable_temp = usable_temp

    def build_record(
        self,
        reading: SensorReading,
        resolution: ModeResolution,
        weather: WeatherAssessment,
        status: ControlStatus,
        now: datetime,
    ) -> SetpointLogRecord:
        """Create the record for this pass."""
        thresholds = resolution.thresholds
        include_weather = self.config.log_weather_data

        return SetpointLogRecord(
            mode=resolution.mode,
            switch_off_temp=thresholds.switch_off_temp,
            switch_on_temp=thresholds.switch_on_temp,
            switch_on_s4_temp=thresholds.switch_on_s4_temp,
            hot_water_level_pct=estimate_hot_water_level(
                reading.s2, reading.s3, reading.s4, self.usable_temp
            ),
            cloud_cover_pct=weather.cloud_cover if include_weather else None,
            solar_irradiance=weather.irradiance if include_weather else None,
            weather_forecast=weather.forecast if include_weather else None,
            poor_weather_mode=weather.poor_solar,
            s2_current=reading.s2,
            s3_current=reading.s3,
            s4_current=reading.s4,
            margin_to_switch_on=thresholds.switch_on_temp - reading.s3,
            margin_to_switch_off=reading.s3 - thresholds.switch_off_temp,
            hour_of_day=now.hour,
            timestamp=epoch_millis(now),
            control_state=status.control_mode,
            energy_mgmt_active=status.energy_mgmt_active,
            disable_auto_control=int(status.disable_auto_control),
        )

    def should_emit(self, record: SetpointLogRecord, state: ControlState) -> bool:
        """Apply log-on-change-only against the last emitted record.

        Only updates the stored snapshot when the record is emitted.
        """
        if not self.config.log_on_change_only:
            return True

        last = state.last_logged_setpoint_record
        if last is not None and last.setpoints_key() == record.setpoints_key():
            return False

        state.last_logged_setpoint_record = record
        return True

    def log_setpoints(
        self,
        reading: SensorReading | None,
        resolution: ModeResolution | None,
        weather: WeatherAssessment,
        status: ControlStatus,
        state: ControlState,
        now: datetime,
    ) -> SetpointLogRecord | None:
        """Build and filter the record for this pass.

        Returns:
            Record to emit, or None if logging is off, the reading is invalid
            or the setpoints are unchanged in change-only mode
        """
        if not self.config.log_setpoints:
            return None

        if reading is None or resolution is None:
            _LOGGER.debug("Skipping setpoint logging due to invalid sensor data")
            return None

        record = self.build_record(reading, resolution, weather, status, now)
        if not self.should_emit(record, state):
            return None

        _LOGGER.debug(
            "Logging setpoints: mode=%s, switch_on=%.1f°C, switch_off=%.1f°C, control=%s",
            record.mode,
            record.switch_on_temp,
            record.switch_off_temp,
            record.control_state,
        )
        return record
