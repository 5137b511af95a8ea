"""Constants for the Solar Hot Water integration."""

from enum import StrEnum
from typing import Any, Final

# Domain
DOMAIN: Final = "solar_hws"

# Configuration keys - entities (config flow)
CONF_S2_ENTITY: Final = "s2_entity"  # Bottom tank sensor
CONF_S3_ENTITY: Final = "s3_entity"  # Middle tank sensor (primary control)
CONF_S4_ENTITY: Final = "s4_entity"  # Top tank sensor (safety interlock)
CONF_ELEMENT_ENTITY: Final = "element_entity"  # switch.* driving the element relay
CONF_UPTIME_ENTITY: Final = "uptime_entity"  # Optional: controller uptime in seconds
CONF_DISABLE_AUTO_CONTROL_ENTITY: Final = "disable_auto_control_entity"  # Optional
CONF_SUPER_HEAT_ENTITY: Final = "super_heat_entity"  # Optional
CONF_ENERGY_MGMT_ENTITY: Final = "energy_management_entity"  # Optional
CONF_CLOUD_COVER_ENTITY: Final = "cloud_cover_entity"  # Optional: 0-100 %
CONF_SOLAR_IRRADIANCE_ENTITY: Final = "solar_irradiance_entity"  # Optional: W/m²
CONF_FORECAST_ENTITY: Final = "forecast_entity"  # Optional: next 6h label

# Configuration keys - tunables (options flow)
CONF_MIN_TIME_SECONDS: Final = "min_time_seconds"
CONF_MIN_SWITCH_INTERVAL_MINUTES: Final = "min_switch_interval_minutes"
CONF_CONTROLLER_INTERVAL_SECONDS: Final = "controller_interval_seconds"
CONF_LOG_SETPOINTS: Final = "log_setpoints"
CONF_LOG_ON_CHANGE_ONLY: Final = "log_on_change_only"
CONF_LOG_WEATHER_DATA: Final = "log_weather_data"
CONF_CLOUD_COVER_THRESHOLD: Final = "cloud_cover_threshold"
CONF_IRRADIANCE_THRESHOLD: Final = "irradiance_threshold"

# Keys of the process-wide input state (written by external collaborators)
STATE_DISABLE_AUTO_CONTROL: Final = "disable_auto_control"
STATE_HOT_WATER_ELEMENT: Final = "hot_water_element"
STATE_SUPER_HEAT: Final = "super_heat"
STATE_ENERGY_MGMT_ACTIVE: Final = "energy_management_hws_active"
STATE_WEATHER_CLOUD_COVER: Final = "weather_cloud_cover"
STATE_WEATHER_SOLAR_IRRADIANCE: Final = "weather_solar_irradiance"
STATE_WEATHER_FORECAST: Final = "weather_forecast_next_6h"

# Inbound message fields
PAYLOAD_S2: Final = "s2"
PAYLOAD_S3: Final = "s3"
PAYLOAD_S4: Final = "s4"
PAYLOAD_TIME: Final = "time"

# Mode names
MODE_MORNING: Final = "morning"
MODE_DAYTIME: Final = "daytime"
MODE_MIDDAY: Final = "midday"
MODE_EVENING_PREP: Final = "evening_prep"
MODE_EVENING_NIGHT: Final = "evening_night"
MODE_SUPER_HEAT: Final = "super_heat"

# Timing defaults
DEFAULT_MIN_TIME_SECONDS: Final = 600  # Controller uptime before first switch-on
DEFAULT_MIN_SWITCH_INTERVAL_MINUTES: Final = 15  # Anti-cycling dwell time
DEFAULT_CONTROLLER_INTERVAL_SECONDS: Final = 30  # Rate limit between passes

# Logging defaults
DEFAULT_LOG_SETPOINTS: Final = True
DEFAULT_LOG_ON_CHANGE_ONLY: Final = False
DEFAULT_LOG_WEATHER_DATA: Final = True

# Weather classification
# Poor = (cloud > threshold AND irradiance < threshold) OR forecast == overcast
# Tuned for a sub-tropical climate: only VERY cloudy skies count
DEFAULT_CLOUD_COVER_THRESHOLD: Final = 95.0  # %
DEFAULT_IRRADIANCE_THRESHOLD: Final = 50.0  # W/m²
FORECAST_OVERCAST: Final = "overcast"
FORECAST_UNKNOWN: Final = "unknown"

# Hot water level estimate (coarse stratification heuristic, not a volume)
HOT_WATER_USABLE_TEMP: Final = 40.0  # °C
HOT_WATER_SHARE_S2: Final = 34  # % contributed by the bottom sensor
HOT_WATER_SHARE_S3: Final = 33  # % contributed by the middle sensor
HOT_WATER_SHARE_S4: Final = 33  # % contributed by the top sensor

# Outbound setpoint log
SETPOINT_LOG_TOPIC: Final = "solarHW_setpoints"
EVENT_SETPOINT_LOG: Final = "solar_hws_setpoints"

# Entity states treated as "no reading"
UNAVAILABLE_STATES: Final = ("unknown", "unavailable")


class ControlMode(StrEnum):
    """Which authority currently owns the heating element."""

    AUTO_CONTROL = "AUTO_CONTROL"
    ENERGY_MGMT = "ENERGY_MGMT"


class SwitchAction(StrEnum):
    """Outcome of one switch evaluation."""

    NO_ACTION = "no_action"
    TURN_ON = "turn_on"
    TURN_OFF = "turn_off"


# Reference mode table (°C). switch_on_temp < switch_off_temp within each variant.
DEFAULT_MODES: Final[dict[str, dict[str, Any]]] = {
    # Early morning - rely on solar unless the weather is poor
    MODE_MORNING: {
        "switch_off_temp": 44,
        "switch_on_temp": 35,
        "switch_on_s4_temp": 40,
        "poor_weather": {
            "switch_off_temp": 44,
            "switch_on_temp": 36,
            "switch_on_s4_temp": 42,
        },
    },
    # Shoulder hours either side of midday - minimal electrical heating
    MODE_DAYTIME: {
        "switch_off_temp": 40,
        "switch_on_temp": 28,
        "switch_on_s4_temp": 34,
        "poor_weather": {
            "switch_off_temp": 40,
            "switch_on_temp": 30,
            "switch_on_s4_temp": 38,
        },
    },
    # Peak solar - emergency heating only
    MODE_MIDDAY: {
        "switch_off_temp": 40,
        "switch_on_temp": 25,
        "switch_on_s4_temp": 32,
        "poor_weather": {
            "switch_off_temp": 40,
            "switch_on_temp": 25,
            "switch_on_s4_temp": 42,
        },
    },
    # Prepare for evening usage
    MODE_EVENING_PREP: {
        "switch_off_temp": 48,
        "switch_on_temp": 40,
        "switch_on_s4_temp": 42,
    },
    # Ensure adequate hot water overnight
    MODE_EVENING_NIGHT: {
        "switch_off_temp": 42,
        "switch_on_temp": 35,
        "switch_on_s4_temp": 38,
    },
    # Manual override
    MODE_SUPER_HEAT: {
        "switch_off_temp": 60,
        "switch_on_temp": 58,
        "switch_on_s4_temp": 58,
    },
}

# Time-of-day partition. end_hour is exclusive; a band may wrap past midnight.
DEFAULT_TIME_BANDS: Final[list[dict[str, Any]]] = [
    {"start_hour": 5, "end_hour": 8, "mode": MODE_MORNING},
    {"start_hour": 8, "end_hour": 10, "mode": MODE_DAYTIME},
    {"start_hour": 10, "end_hour": 14, "mode": MODE_MIDDAY},
    {"start_hour": 14, "end_hour": 16, "mode": MODE_DAYTIME},
    {"start_hour": 16, "end_hour": 20, "mode": MODE_EVENING_PREP},
    {"start_hour": 20, "end_hour": 5, "mode": MODE_EVENING_NIGHT},
]

# Modes whose thresholds switch to the poor_weather variant on poor solar
DEFAULT_WEATHER_SENSITIVE_MODES: Final[tuple[str, ...]] = (
    MODE_MORNING,
    MODE_DAYTIME,
    MODE_MIDDAY,
)
