"""Options flow for the Solar Hot Water integration."""

import logging
from typing import Any

import voluptuous as vol

from homeassistant import config_entries
from homeassistant.data_entry_flow import FlowResult
from homeassistant.helpers import selector

from .const import (
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
)
from .control.config import ControllerConfig

_LOGGER = logging.getLogger(__name__)

INT_OPTIONS = (CONF_MIN_TIME_SECONDS,)
FLOAT_OPTIONS = (
    CONF_MIN_SWITCH_INTERVAL_MINUTES,
    CONF_CONTROLLER_INTERVAL_SECONDS,
    CONF_CLOUD_COVER_THRESHOLD,
    CONF_IRRADIANCE_THRESHOLD,
)
BOOL_OPTIONS = (CONF_LOG_SETPOINTS, CONF_LOG_ON_CHANGE_ONLY, CONF_LOG_WEATHER_DATA)


def convert_options(user_input: dict[str, Any]) -> dict[str, Any]:
    """Convert selector output to option types.

    NumberSelector returns floats, so integer options are cast back.

    Raises:
        vol.Invalid: If a value cannot be converted or the resulting
            controller configuration is invalid
    """
    converted = dict(user_input)

    for key in INT_OPTIONS:
        if key in converted:
            try:
                converted[key] = int(converted[key])
            except (TypeError, ValueError) as err:
                raise vol.Invalid(f"Invalid value for {key}: {err}") from err

    for key in FLOAT_OPTIONS:
        if key in converted:
            try:
                converted[key] = float(converted[key])
            except (TypeError, ValueError) as err:
                raise vol.Invalid(f"Invalid value for {key}: {err}") from err

    for key in BOOL_OPTIONS:
        if key in converted:
            converted[key] = bool(converted[key])

    # Reject anything the controller would refuse at load
    ControllerConfig.from_options(converted)
    return converted


class SolarHWSOptionsFlow(config_entries.OptionsFlow):
    """Handle options flow for Solar Hot Water."""

    async def async_step_init(self, user_input: dict[str, Any] | None = None) -> FlowResult:
        """Manage runtime tunables."""
        errors = {}

        if user_input is not None:
            try:
                options = convert_options(user_input)
            except vol.Invalid as err:
                _LOGGER.warning("Rejected Solar Hot Water options: %s", err)
                errors["base"] = "invalid_options"
            else:
                return self.async_create_entry(title="", data=options)

        options = self.config_entry.options

        def number(key: str, default: float, minimum: float, maximum: float, step: float):
            return {
                vol.Optional(key, default=options.get(key, default)): selector.NumberSelector(
                    selector.NumberSelectorConfig(
                        min=minimum, max=maximum, step=step, mode=selector.NumberSelectorMode.BOX
                    )
                )
            }

        def toggle(key: str, default: bool):
            return {vol.Optional(key, default=options.get(key, default)): selector.BooleanSelector()}

        schema_dict: dict[Any, Any] = {}
        schema_dict.update(number(CONF_MIN_TIME_SECONDS, DEFAULT_MIN_TIME_SECONDS, 0, 7200, 1))
        schema_dict.update(
            number(CONF_MIN_SWITCH_INTERVAL_MINUTES, DEFAULT_MIN_SWITCH_INTERVAL_MINUTES, 0, 120, 1)
        )
        schema_dict.update(
            number(CONF_CONTROLLER_INTERVAL_SECONDS, DEFAULT_CONTROLLER_INTERVAL_SECONDS, 0, 600, 1)
        )
        schema_dict.update(
            number(CONF_CLOUD_COVER_THRESHOLD, DEFAULT_CLOUD_COVER_THRESHOLD, 0, 100, 1)
        )
        schema_dict.update(
            number(CONF_IRRADIANCE_THRESHOLD, DEFAULT_IRRADIANCE_THRESHOLD, 0, 1500, 1)
        )
        schema_dict.update(toggle(CONF_LOG_SETPOINTS, DEFAULT_LOG_SETPOINTS))
        schema_dict.update(toggle(CONF_LOG_ON_CHANGE_ONLY, DEFAULT_LOG_ON_CHANGE_ONLY))
        schema_dict.update(toggle(CONF_LOG_WEATHER_DATA, DEFAULT_LOG_WEATHER_DATA))

        return self.async_show_form(
            step_id="init", data_schema=vol.Schema(schema_dict), errors=errors
        )
