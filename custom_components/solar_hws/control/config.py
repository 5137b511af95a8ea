"""Controller configuration for the solar hot water controller.

The mode table, time-of-day partition and tunables arrive as plain dicts
(defaults from const.py, merged with options from the options flow). They are
validated once with a voluptuous schema and frozen into dataclasses, so the
rest of the controller never sees an untyped config dict.

Hard errors (raise vol.Invalid):
- Time band or weather-sensitive set references an unknown mode
- Super-heat mode missing from the mode table
- Time bands do not cover every hour exactly once

Soft invariant (warning only):
- switch_on_temp >= switch_off_temp causes oscillation, not a crash
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import voluptuous as vol

from ..const import (
    CONF_CLOUD_COVER_THRESHOLD,
    CONF_CONTROLLER_INTERVAL_SECONDS,
    CONF_IRRADIANCE_THRESHOLD,
    CONF_LOG_ON_CHANGE_ONLY,
    CONF_LOG_SETPOINTS,
    CONF_LOG_WEATHER_DATA,
    CONF_MIN_SWITCH_INTERVAL_MINUTES,
    CONF_MIN_TIME_SECONDS,
    DEFAULT_CLOUD_COVER_THRESHOLD,
    DEFAULT_CONTROLLER_INTERVAL_SECONDS,
    DEFAULT_IRRADIANCE_THRESHOLD,
    DEFAULT_LOG_ON_CHANGE_ONLY,
    DEFAULT_LOG_SETPOINTS,
    DEFAULT_LOG_WEATHER_DATA,
    DEFAULT_MIN_SWITCH_INTERVAL_MINUTES,
    DEFAULT_MIN_TIME_SECONDS,
    DEFAULT_MODES,
    DEFAULT_TIME_BANDS,
    DEFAULT_WEATHER_SENSITIVE_MODES,
    FORECAST_OVERCAST,
    HOT_WATER_USABLE_TEMP,
    MODE_SUPER_HEAT,
)

_LOGGER = logging.getLogger(__name__)

HOURS_PER_DAY = 24

HOUR = vol.All(vol.Coerce(int), vol.Range(min=0, max=HOURS_PER_DAY - 1))

THRESHOLD_SCHEMA = vol.Schema(
    {
        vol.Required("switch_off_temp"): vol.Coerce(float),
        vol.Required("switch_on_temp"): vol.Coerce(float),
        vol.Required("switch_on_s4_temp"): vol.Coerce(float),
    }
)

MODE_SCHEMA = THRESHOLD_SCHEMA.extend({vol.Optional("poor_weather"): THRESHOLD_SCHEMA})

TIME_BAND_SCHEMA = vol.Schema(
    {
        vol.Required("start_hour"): HOUR,
        vol.Required("end_hour"): HOUR,
        vol.Required("mode"): str,
    }
)

WEATHER_SCHEMA = vol.Schema(
    {
        vol.Optional("cloud_cover_threshold", default=DEFAULT_CLOUD_COVER_THRESHOLD): vol.All(
            vol.Coerce(float), vol.Range(min=0, max=100)
        ),
        vol.Optional("irradiance_threshold", default=DEFAULT_IRRADIANCE_THRESHOLD): vol.All(
            vol.Coerce(float), vol.Range(min=0)
        ),
        vol.Optional("overcast_label", default=FORECAST_OVERCAST): str,
        vol.Optional("sensitive_modes", default=list(DEFAULT_WEATHER_SENSITIVE_MODES)): [str],
    }
)

LOGGING_SCHEMA = vol.Schema(
    {
        vol.Optional("log_setpoints", default=DEFAULT_LOG_SETPOINTS): bool,
        vol.Optional("log_on_change_only", default=DEFAULT_LOG_ON_CHANGE_ONLY): bool,
        vol.Optional("log_weather_data", default=DEFAULT_LOG_WEATHER_DATA): bool,
    }
)

CONFIG_SCHEMA = vol.Schema(
    {
        vol.Optional("modes", default=DEFAULT_MODES): vol.All(
            {str: MODE_SCHEMA}, vol.Length(min=1)
        ),
        vol.Optional("time_bands", default=DEFAULT_TIME_BANDS): vol.All(
            [TIME_BAND_SCHEMA], vol.Length(min=1)
        ),
        vol.Optional("weather", default={}): WEATHER_SCHEMA,
        vol.Optional("logging", default={}): LOGGING_SCHEMA,
        vol.Optional("min_time_seconds", default=DEFAULT_MIN_TIME_SECONDS): vol.All(
            vol.Coerce(int), vol.Range(min=0)
        ),
        vol.Optional(
            "min_switch_interval_minutes", default=DEFAULT_MIN_SWITCH_INTERVAL_MINUTES
        ): vol.All(vol.Coerce(float), vol.Range(min=0)),
        vol.Optional(
            "controller_interval_seconds", default=DEFAULT_CONTROLLER_INTERVAL_SECONDS
        ): vol.All(vol.Coerce(float), vol.Range(min=0)),
        vol.Optional("super_heat_mode", default=MODE_SUPER_HEAT): str,
        vol.Optional("usable_temp", default=HOT_WATER_USABLE_TEMP): vol.Coerce(float),
    }
)


@dataclass(frozen=True)
class ThresholdSet:
    """Switching thresholds for one mode variant (°C)."""

    switch_off_temp: float  # S3 above this -> OFF
    switch_on_temp: float  # S3 below this (AND S4 condition) -> ON
    switch_on_s4_temp: float  # S4 must be below this to switch ON (interlock)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ThresholdSet:
        """Create from a validated threshold dict."""
        return cls(
            switch_off_temp=float(data["switch_off_temp"]),
            switch_on_temp=float(data["switch_on_temp"]),
            switch_on_s4_temp=float(data["switch_on_s4_temp"]),
        )


@dataclass(frozen=True)
class ModeConfig:
    """A named operating mode with optional poor-weather thresholds."""

    name: str
    thresholds: ThresholdSet
    poor_weather: ThresholdSet | None = None

    def thresholds_for(self, poor_weather: bool) -> ThresholdSet:
        """Return the variant to use for the given weather classification."""
        if poor_weather and self.poor_weather is not None:
            return self.poor_weather
        return self.thresholds


@dataclass(frozen=True)
class TimeBand:
    """Hours [start_hour, end_hour) mapped to a mode. Wraps past midnight."""

    start_hour: int
    end_hour: int
    mode: str

    def hours(self) -> list[int]:
        """Return every hour of day covered by this band."""
        if self.start_hour < self.end_hour:
            return list(range(self.start_hour, self.end_hour))
        # start == end covers the whole day
        return list(range(self.start_hour, HOURS_PER_DAY)) + list(range(0, self.end_hour))

    def contains(self, hour: int) -> bool:
        """Check whether the band covers the given hour."""
        if self.start_hour < self.end_hour:
            return self.start_hour <= hour < self.end_hour
        return hour >= self.start_hour or hour < self.end_hour


@dataclass(frozen=True)
class WeatherRule:
    """Poor solar = (cloud > X AND irradiance < Y) OR forecast == overcast label."""

    cloud_cover_threshold: float = DEFAULT_CLOUD_COVER_THRESHOLD
    irradiance_threshold: float = DEFAULT_IRRADIANCE_THRESHOLD
    overcast_label: str = FORECAST_OVERCAST
    sensitive_modes: frozenset[str] = frozenset(DEFAULT_WEATHER_SENSITIVE_MODES)


@dataclass(frozen=True)
class LoggingConfig:
    """Setpoint log toggles."""

    log_setpoints: bool = DEFAULT_LOG_SETPOINTS
    log_on_change_only: bool = DEFAULT_LOG_ON_CHANGE_ONLY
    log_weather_data: bool = DEFAULT_LOG_WEATHER_DATA


@dataclass(frozen=True)
class ControllerConfig:
    """Complete, validated controller configuration. Immutable after load."""

    modes: Mapping[str, ModeConfig]
    time_bands: tuple[TimeBand, ...]
    weather: WeatherRule
    logging: LoggingConfig
    min_time_seconds: int
    min_switch_interval_minutes: float
    controller_interval_seconds: float
    super_heat_mode: str = MODE_SUPER_HEAT
    usable_temp: float = HOT_WATER_USABLE_TEMP

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any] | None = None) -> ControllerConfig:
        """Validate a raw config dict and build the typed configuration.

        Raises:
            vol.Invalid: On schema errors, unknown mode references or a
                time-band partition that is not total
        """
        data = CONFIG_SCHEMA(dict(raw or {}))

        modes = {
            name: ModeConfig(
                name=name,
                thresholds=ThresholdSet.from_dict(mode),
                poor_weather=(
                    ThresholdSet.from_dict(mode["poor_weather"]) if "poor_weather" in mode else None
                ),
            )
            for name, mode in data["modes"].items()
        }
        time_bands = tuple(
            TimeBand(
                start_hour=band["start_hour"],
                end_hour=band["end_hour"],
                mode=band["mode"],
            )
            for band in data["time_bands"]
        )
        weather = WeatherRule(
            cloud_cover_threshold=data["weather"]["cloud_cover_threshold"],
            irradiance_threshold=data["weather"]["irradiance_threshold"],
            overcast_label=data["weather"]["overcast_label"],
            sensitive_modes=frozenset(data["weather"]["sensitive_modes"]),
        )

        config = cls(
            modes=modes,
            time_bands=time_bands,
            weather=weather,
            logging=LoggingConfig(**data["logging"]),
            min_time_seconds=data["min_time_seconds"],
            min_switch_interval_minutes=data["min_switch_interval_minutes"],
            controller_interval_seconds=data["controller_interval_seconds"],
            super_heat_mode=data["super_heat_mode"],
            usable_temp=data["usable_temp"],
        )
        config._validate_references()
        config._validate_partition()
        config._warn_inverted_thresholds()
        return config

    @classmethod
    def from_options(cls, options: Mapping[str, Any]) -> ControllerConfig:
        """Build from the flat options-flow keys, using defaults for the mode table."""
        raw: dict[str, Any] = {
            "weather": {},
            "logging": {},
        }
        if CONF_MIN_TIME_SECONDS in options:
            raw["min_time_seconds"] = options[CONF_MIN_TIME_SECONDS]
        if CONF_MIN_SWITCH_INTERVAL_MINUTES in options:
            raw["min_switch_interval_minutes"] = options[CONF_MIN_SWITCH_INTERVAL_MINUTES]
        if CONF_CONTROLLER_INTERVAL_SECONDS in options:
            raw["controller_interval_seconds"] = options[CONF_CONTROLLER_INTERVAL_SECONDS]
        if CONF_CLOUD_COVER_THRESHOLD in options:
            raw["weather"]["cloud_cover_threshold"] = options[CONF_CLOUD_COVER_THRESHOLD]
        if CONF_IRRADIANCE_THRESHOLD in options:
            raw["weather"]["irradiance_threshold"] = options[CONF_IRRADIANCE_THRESHOLD]
        for key in (CONF_LOG_SETPOINTS, CONF_LOG_ON_CHANGE_ONLY, CONF_LOG_WEATHER_DATA):
            if key in options:
                raw["logging"][key] = bool(options[key])
        return cls.from_dict(raw)

    def _validate_references(self) -> None:
        """Every referenced mode name must exist in the mode table."""
        if self.super_heat_mode not in self.modes:
            raise vol.Invalid(f"Super heat mode '{self.super_heat_mode}' is not defined in modes")

        for band in self.time_bands:
            if band.mode not in self.modes:
                raise vol.Invalid(
                    f"Time band {band.start_hour:02d}-{band.end_hour:02d} references "
                    f"unknown mode '{band.mode}'"
                )

        unknown = sorted(self.weather.sensitive_modes - set(self.modes))
        if unknown:
            raise vol.Invalid(f"Weather-sensitive modes not defined in modes: {unknown}")

    def _validate_partition(self) -> None:
        """Every hour of the day must map to exactly one band."""
        owners: dict[int, list[TimeBand]] = {hour: [] for hour in range(HOURS_PER_DAY)}
        for band in self.time_bands:
            for hour in band.hours():
                owners[hour].append(band)

        uncovered = [hour for hour, bands in owners.items() if not bands]
        if uncovered:
            raise vol.Invalid(f"Time bands do not cover hours {uncovered}")

        overlapping = [hour for hour, bands in owners.items() if len(bands) > 1]
        if overlapping:
            raise vol.Invalid(f"Time bands overlap at hours {overlapping}")

    def _warn_inverted_thresholds(self) -> None:
        for mode in self.modes.values():
            variants = [("normal", mode.thresholds)]
            if mode.poor_weather is not None:
                variants.append(("poor_weather", mode.poor_weather))
            for variant, thresholds in variants:
                if thresholds.switch_on_temp >= thresholds.switch_off_temp:
                    _LOGGER.warning(
                        "Mode %s (%s): switch_on_temp %.1f°C >= switch_off_temp %.1f°C, "
                        "element will oscillate",
                        mode.name,
                        variant,
                        thresholds.switch_on_temp,
                        thresholds.switch_off_temp,
                    )

        for name in self.weather.sensitive_modes:
            if self.modes[name].poor_weather is None:
                _LOGGER.debug(
                    "Weather-sensitive mode %s has no poor_weather thresholds, "
                    "normal thresholds apply in poor weather",
                    name,
                )
