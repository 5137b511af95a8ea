"""Weather classification for solar availability.

Reads the latest weather snapshot (pre-fetched by an external weather
pipeline into the input state) and decides whether solar input is poor enough
to switch weather-sensitive modes to their poor_weather thresholds.

Rule shape: (cloud_cover > X AND irradiance < Y) OR forecast == "overcast".

Fails safe towards trusting solar: any error reading the snapshot yields
poor_solar=False with zeroed fields.
"""

import logging
from dataclasses import dataclass

from ..const import (
    FORECAST_UNKNOWN,
    STATE_WEATHER_CLOUD_COVER,
    STATE_WEATHER_FORECAST,
    STATE_WEATHER_SOLAR_IRRADIANCE,
)
from .config import WeatherRule
from .state import InputStore

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class WeatherAssessment:
    """Weather classification plus the raw values it was based on."""

    poor_solar: bool
    cloud_cover: float  # %
    irradiance: float  # W/m²
    forecast: str


SAFE_WEATHER = WeatherAssessment(
    poor_solar=False,
    cloud_cover=0.0,
    irradiance=0.0,
    forecast=FORECAST_UNKNOWN,
)


def assess_weather(inputs: InputStore, rule: WeatherRule) -> WeatherAssessment:
    """Classify current solar conditions.

    Args:
        inputs: Process-wide input state holding the weather snapshot
        rule: Thresholds and overcast label

    Returns:
        WeatherAssessment (SAFE_WEATHER on any read error)
    """
    try:
        # Absent values read as no cloud, no irradiance, unknown forecast
        cloud_cover = float(inputs.get(STATE_WEATHER_CLOUD_COVER) or 0)
        irradiance = float(inputs.get(STATE_WEATHER_SOLAR_IRRADIANCE) or 0)
        forecast = str(inputs.get(STATE_WEATHER_FORECAST) or FORECAST_UNKNOWN)
    except Exception as err:  # noqa: BLE001
        _LOGGER.error("Error in weather assessment: %s", err)
        return SAFE_WEATHER

    poor_solar = (
        cloud_cover > rule.cloud_cover_threshold and irradiance < rule.irradiance_threshold
    ) or forecast == rule.overcast_label

    _LOGGER.debug(
        "Weather assessment: clouds=%.0f%%, irradiance=%.0f, forecast=%s, poor=%s",
        cloud_cover,
        irradiance,
        forecast,
        poor_solar,
    )

    return WeatherAssessment(
        poor_solar=poor_solar,
        cloud_cover=cloud_cover,
        irradiance=irradiance,
        forecast=forecast,
    )
