"""Tests for mode and threshold resolution."""

import pytest

from custom_components.solar_hws.control.config import ControllerConfig
from custom_components.solar_hws.control.mode_resolver import get_time_based_mode, resolve_mode


@pytest.mark.parametrize(
    "hour, mode",
    [
        (0, "evening_night"),
        (4, "evening_night"),
        (5, "morning"),
        (7, "morning"),
        (8, "daytime"),
        (9, "daytime"),
        (10, "midday"),
        (13, "midday"),
        (14, "daytime"),
        (15, "daytime"),
        (16, "evening_prep"),
        (19, "evening_prep"),
        (20, "evening_night"),
        (23, "evening_night"),
    ],
)
def test_reference_schedule(default_config, hour, mode):
    assert get_time_based_mode(hour, default_config) == mode


def test_every_hour_resolves(default_config):
    for hour in range(24):
        assert get_time_based_mode(hour, default_config) in default_config.modes


@pytest.mark.parametrize("hour", [0, 9, 12, 17, 22])
@pytest.mark.parametrize("poor_solar", [False, True])
def test_super_heat_overrides_everything(default_config, hour, poor_solar):
    resolution = resolve_mode(hour, super_heat=True, poor_solar=poor_solar, config=default_config)

    assert resolution.mode == "super_heat"
    assert resolution.thresholds.switch_off_temp == 60.0
    assert resolution.thresholds.switch_on_temp == 58.0
    assert resolution.thresholds.switch_on_s4_temp == 58.0
    assert resolution.poor_weather_applied is False


def test_normal_thresholds_in_good_weather(default_config):
    resolution = resolve_mode(12, super_heat=False, poor_solar=False, config=default_config)

    assert resolution.mode == "midday"
    assert resolution.thresholds.switch_on_s4_temp == 32.0
    assert resolution.poor_weather_applied is False


def test_poor_weather_thresholds_for_sensitive_mode(default_config):
    resolution = resolve_mode(6, super_heat=False, poor_solar=True, config=default_config)

    assert resolution.mode == "morning"
    assert resolution.thresholds.switch_on_temp == 36.0
    assert resolution.thresholds.switch_on_s4_temp == 42.0
    assert resolution.poor_weather_applied is True


def test_poor_weather_ignored_outside_sensitive_modes(default_config):
    resolution = resolve_mode(18, super_heat=False, poor_solar=True, config=default_config)

    assert resolution.mode == "evening_prep"
    assert resolution.thresholds.switch_on_temp == 40.0
    assert resolution.poor_weather_applied is False


def test_sensitive_set_is_configurable():
    config = ControllerConfig.from_dict({"weather": {"sensitive_modes": ["morning"]}})

    resolution = resolve_mode(12, super_heat=False, poor_solar=True, config=config)

    assert resolution.mode == "midday"
    assert resolution.thresholds.switch_on_s4_temp == 32.0
    assert resolution.poor_weather_applied is False


def test_custom_schedule():
    bands = [
        {"start_hour": 22, "end_hour": 6, "mode": "evening_night"},
        {"start_hour": 6, "end_hour": 22, "mode": "daytime"},
    ]
    config = ControllerConfig.from_dict({"time_bands": bands})

    assert get_time_based_mode(5, config) == "evening_night"
    assert get_time_based_mode(6, config) == "daytime"
    assert get_time_based_mode(21, config) == "daytime"
