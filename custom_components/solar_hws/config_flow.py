"""Config flow for the Solar Hot Water integration."""

import logging
from typing import Any

import voluptuous as vol

from homeassistant import config_entries
from homeassistant.core import callback
from homeassistant.data_entry_flow import FlowResult
from homeassistant.helpers import selector

from .const import (
    CONF_CLOUD_COVER_ENTITY,
    CONF_DISABLE_AUTO_CONTROL_ENTITY,
    CONF_ELEMENT_ENTITY,
    CONF_ENERGY_MGMT_ENTITY,
    CONF_FORECAST_ENTITY,
    CONF_S2_ENTITY,
    CONF_S3_ENTITY,
    CONF_S4_ENTITY,
    CONF_SOLAR_IRRADIANCE_ENTITY,
    CONF_SUPER_HEAT_ENTITY,
    CONF_UPTIME_ENTITY,
    DOMAIN,
)
from .options import SolarHWSOptionsFlow

_LOGGER = logging.getLogger(__name__)

FLAG_DOMAINS = ["input_boolean", "binary_sensor", "switch"]

OPTIONAL_SOURCE_KEYS = (
    CONF_UPTIME_ENTITY,
    CONF_DISABLE_AUTO_CONTROL_ENTITY,
    CONF_SUPER_HEAT_ENTITY,
    CONF_ENERGY_MGMT_ENTITY,
    CONF_CLOUD_COVER_ENTITY,
    CONF_SOLAR_IRRADIANCE_ENTITY,
    CONF_FORECAST_ENTITY,
)


def _temperature_selector() -> selector.EntitySelector:
    return selector.EntitySelector(
        selector.EntitySelectorConfig(domain="sensor", device_class="temperature")
    )


class SolarHWSConfigFlow(config_entries.ConfigFlow, domain=DOMAIN):
    """Handle a config flow for Solar Hot Water."""

    VERSION = 1

    def __init__(self):
        """Initialize config flow."""
        self._data: dict[str, Any] = {}

    async def async_step_user(self, user_input: dict[str, Any] | None = None) -> FlowResult:
        """Handle the initial step - tank sensors and element relay."""
        errors = {}

        if user_input is not None:
            for key in (CONF_S2_ENTITY, CONF_S3_ENTITY, CONF_S4_ENTITY, CONF_ELEMENT_ENTITY):
                if not self.hass.states.get(user_input[key]):
                    errors["base"] = f"{key}_not_found"
                    break
            else:
                await self.async_set_unique_id(user_input[CONF_ELEMENT_ENTITY])
                self._abort_if_unique_id_configured()
                self._data.update(user_input)
                return await self.async_step_sources()

        return self.async_show_form(
            step_id="user",
            data_schema=vol.Schema(
                {
                    vol.Required(CONF_S2_ENTITY): _temperature_selector(),
                    vol.Required(CONF_S3_ENTITY): _temperature_selector(),
                    vol.Required(CONF_S4_ENTITY): _temperature_selector(),
                    vol.Required(CONF_ELEMENT_ENTITY): selector.EntitySelector(
                        selector.EntitySelectorConfig(domain=["switch", "input_boolean"])
                    ),
                }
            ),
            errors=errors,
        )

    async def async_step_sources(self, user_input: dict[str, Any] | None = None) -> FlowResult:
        """Configure optional override flags, uptime and weather sources."""
        if user_input is not None:
            for key in OPTIONAL_SOURCE_KEYS:
                if user_input.get(key):
                    self._data[key] = user_input[key]

            return self.async_create_entry(
                title="Solar Hot Water",
                data=self._data,
            )

        flag_selector = selector.EntitySelector(
            selector.EntitySelectorConfig(domain=FLAG_DOMAINS)
        )
        sensor_selector = selector.EntitySelector(selector.EntitySelectorConfig(domain="sensor"))

        return self.async_show_form(
            step_id="sources",
            data_schema=vol.Schema(
                {
                    vol.Optional(CONF_UPTIME_ENTITY): sensor_selector,
                    vol.Optional(CONF_DISABLE_AUTO_CONTROL_ENTITY): flag_selector,
                    vol.Optional(CONF_SUPER_HEAT_ENTITY): flag_selector,
                    vol.Optional(CONF_ENERGY_MGMT_ENTITY): flag_selector,
                    vol.Optional(CONF_CLOUD_COVER_ENTITY): sensor_selector,
                    vol.Optional(CONF_SOLAR_IRRADIANCE_ENTITY): sensor_selector,
                    vol.Optional(CONF_FORECAST_ENTITY): selector.EntitySelector(
                        selector.EntitySelectorConfig(domain=["sensor", "input_select", "input_text"])
                    ),
                }
            ),
        )

    @staticmethod
    @callback
    def async_get_options_flow(
        config_entry: config_entries.ConfigEntry,
    ) -> config_entries.OptionsFlow:
        """Create the options flow."""
        return SolarHWSOptionsFlow()
