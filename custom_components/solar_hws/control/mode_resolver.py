"""Operating mode and threshold resolution.

Priority:
1. Super heat override - fixed thresholds regardless of hour and weather
2. Time-of-day band - from the configured 24h partition
3. Poor weather - weather-sensitive modes use their poor_weather variant
"""

import logging
from dataclasses import dataclass

from .config import ControllerConfig, ThresholdSet

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ModeResolution:
    """Resolved mode and the thresholds to apply this pass."""

    mode: str
    thresholds: ThresholdSet
    poor_weather_applied: bool = False


def get_time_based_mode(hour: int, config: ControllerConfig) -> str:
    """Map an hour of day (0-23) to its configured mode.

    The partition is validated as total at load, so a band always matches.
    """
    for band in config.time_bands:
        if band.contains(hour):
            return band.mode
    raise ValueError(f"No time band covers hour {hour}")


def resolve_mode(
    hour: int,
    super_heat: bool,
    poor_solar: bool,
    config: ControllerConfig,
) -> ModeResolution:
    """Resolve the operating mode and thresholds.

    Args:
        hour: Current wall-clock hour (0-23)
        super_heat: Manual super heat override flag
        poor_solar: Weather classification
        config: Controller configuration

    Returns:
        ModeResolution with mode name and threshold triple
    """
    if super_heat:
        mode = config.modes[config.super_heat_mode]
        return ModeResolution(mode=mode.name, thresholds=mode.thresholds)

    mode = config.modes[get_time_based_mode(hour, config)]
    use_poor_weather = (
        poor_solar and mode.name in config.weather.sensitive_modes and mode.poor_weather is not None
    )
    thresholds = mode.thresholds_for(use_poor_weather)

    if use_poor_weather:
        _LOGGER.debug("Using poor weather thresholds for %s mode", mode.name)
    else:
        _LOGGER.debug("Using normal %s thresholds", mode.name)

    return ModeResolution(
        mode=mode.name,
        thresholds=thresholds,
        poor_weather_applied=use_poor_weather,
    )
