"""Control engine for the Solar Hot Water integration.

Pure Python control logic independent of Home Assistant: mode and threshold
resolution, weather classification, anti-cycling switch decisions and
setpoint analytics records.
"""

from .config import (
    ControllerConfig,
    LoggingConfig,
    ModeConfig,
    ThresholdSet,
    TimeBand,
    WeatherRule,
)
from .control_monitor import ControlStatus, monitor_control_state
from .controller import ControllerResult, SolarHotWaterController
from .hot_water import estimate_hot_water_level
from .mode_resolver import ModeResolution, get_time_based_mode, resolve_mode
from .rate_limiter import should_run
from .setpoint_logger import SetpointLogger, SetpointLogRecord
from .state import ControlState, InputStore, SensorReading, parse_sensor_reading
from .switch_engine import SwitchDecision, SwitchEngine
from .weather import WeatherAssessment, assess_weather

__all__ = [
    "ControlState",
    "ControlStatus",
    "ControllerConfig",
    "ControllerResult",
    "InputStore",
    "LoggingConfig",
    "ModeConfig",
    "ModeResolution",
    "SensorReading",
    "SetpointLogRecord",
    "SetpointLogger",
    "SolarHotWaterController",
    "SwitchDecision",
    "SwitchEngine",
    "ThresholdSet",
    "TimeBand",
    "WeatherAssessment",
    "WeatherRule",
    "assess_weather",
    "estimate_hot_water_level",
    "get_time_based_mode",
    "monitor_control_state",
    "parse_sensor_reading",
    "resolve_mode",
    "should_run",
]
