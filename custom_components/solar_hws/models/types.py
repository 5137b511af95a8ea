"""Type definitions for the Solar Hot Water integration.

TypedDicts for configuration and outbound payload dictionaries to avoid
using Any type.
"""

from typing import TypedDict


class SolarHWSConfigDict(TypedDict, total=False):
    """Configuration entry data and options.

    total=False: optional entities and tunables may be missing, readers
    handle missing keys with .get().
    """

    # Required entity IDs (from config flow)
    s2_entity: str
    s3_entity: str
    s4_entity: str
    element_entity: str

    # Optional entity IDs
    uptime_entity: str
    disable_auto_control_entity: str
    super_heat_entity: str
    energy_management_entity: str
    cloud_cover_entity: str
    solar_irradiance_entity: str
    forecast_entity: str

    # Tunables (options flow)
    min_time_seconds: int
    min_switch_interval_minutes: float
    controller_interval_seconds: float
    cloud_cover_threshold: float
    irradiance_threshold: float
    log_setpoints: bool
    log_on_change_only: bool
    log_weather_data: bool


class SetpointLogRecordDict(TypedDict):
    """Outbound setpoint log payload (topic solarHW_setpoints)."""

    mode: str
    switch_off_temp: float
    switch_on_temp: float
    switch_on_s4_temp: float
    hot_water_level_pct: int
    cloud_cover_pct: float | None
    solar_irradiance: float | None
    weather_forecast: str | None
    poor_weather_mode: bool
    s2_current: float
    s3_current: float
    s4_current: float
    margin_to_switch_on: float
    margin_to_switch_off: float
    hour_of_day: int
    timestamp: int
    control_state: str
    energy_mgmt_active: bool
    disable_auto_control: int
