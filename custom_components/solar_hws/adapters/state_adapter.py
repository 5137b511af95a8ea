"""Home Assistant state adapter for the solar hot water controller.

Reads tank sensors into the inbound message, collects the process-wide input
state (override flags, relay state, weather snapshot) from configured
entities, and drives the element relay.

Entity roles:
- S2/S3/S4 temperature sensors (required)
- Element relay switch (required, also the current relay state)
- Uptime sensor (optional, falls back to integration uptime)
- Disable auto control / super heat / energy management flags (optional)
- Cloud cover, solar irradiance, 6h forecast label (optional)
"""

import logging
from typing import Any

from homeassistant.core import HomeAssistant
from homeassistant.exceptions import HomeAssistantError

from ..const import (
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
    PAYLOAD_S2,
    PAYLOAD_S3,
    PAYLOAD_S4,
    PAYLOAD_TIME,
    STATE_DISABLE_AUTO_CONTROL,
    STATE_ENERGY_MGMT_ACTIVE,
    STATE_HOT_WATER_ELEMENT,
    STATE_SUPER_HEAT,
    STATE_WEATHER_CLOUD_COVER,
    STATE_WEATHER_FORECAST,
    STATE_WEATHER_SOLAR_IRRADIANCE,
    UNAVAILABLE_STATES,
)
from ..models.types import SolarHWSConfigDict

_LOGGER = logging.getLogger(__name__)

ON_STATES = ("on", "true", "1")


class HassStateAdapter:
    """Adapter for reading controller inputs from and writing the relay to Home Assistant."""

    def __init__(self, hass: HomeAssistant, config: SolarHWSConfigDict):
        """Initialize state adapter.

        Args:
            hass: Home Assistant instance
            config: Configuration dictionary with entity IDs
        """
        self.hass = hass
        self.s2_entity: str = config[CONF_S2_ENTITY]
        self.s3_entity: str = config[CONF_S3_ENTITY]
        self.s4_entity: str = config[CONF_S4_ENTITY]
        self.element_entity: str = config[CONF_ELEMENT_ENTITY]
        self.uptime_entity: str | None = config.get(CONF_UPTIME_ENTITY)
        self.disable_auto_control_entity: str | None = config.get(
            CONF_DISABLE_AUTO_CONTROL_ENTITY
        )
        self.super_heat_entity: str | None = config.get(CONF_SUPER_HEAT_ENTITY)
        self.energy_mgmt_entity: str | None = config.get(CONF_ENERGY_MGMT_ENTITY)
        self.cloud_cover_entity: str | None = config.get(CONF_CLOUD_COVER_ENTITY)
        self.solar_irradiance_entity: str | None = config.get(CONF_SOLAR_IRRADIANCE_ENTITY)
        self.forecast_entity: str | None = config.get(CONF_FORECAST_ENTITY)

    def read_payload(self, uptime_fallback: float | None = None) -> dict[str, Any]:
        """Build the inbound message from the tank sensors.

        Unavailable or unparsable sensors are passed through as None so the
        controller's input guard rejects the message.

        Args:
            uptime_fallback: Uptime to report when no uptime entity is configured

        Returns:
            Message dict with s2, s3, s4 and time
        """
        uptime = uptime_fallback
        if self.uptime_entity:
            uptime = self._read_float(self.uptime_entity)

        return {
            PAYLOAD_S2: self._read_float(self.s2_entity),
            PAYLOAD_S3: self._read_float(self.s3_entity),
            PAYLOAD_S4: self._read_float(self.s4_entity),
            PAYLOAD_TIME: uptime,
        }

    def read_inputs(self) -> dict[str, Any]:
        """Snapshot the process-wide input state.

        Missing entities read as absent, which the controller treats as
        flags off and no cloud / no irradiance / unknown forecast.
        """
        return {
            STATE_DISABLE_AUTO_CONTROL: int(self._read_bool(self.disable_auto_control_entity)),
            STATE_HOT_WATER_ELEMENT: int(self._read_bool(self.element_entity)),
            STATE_SUPER_HEAT: int(self._read_bool(self.super_heat_entity)),
            STATE_ENERGY_MGMT_ACTIVE: self._read_bool(self.energy_mgmt_entity),
            STATE_WEATHER_CLOUD_COVER: self._read_float(self.cloud_cover_entity),
            STATE_WEATHER_SOLAR_IRRADIANCE: self._read_float(self.solar_irradiance_entity),
            STATE_WEATHER_FORECAST: self._read_str(self.forecast_entity),
        }

    async def async_set_element(self, command: int) -> bool:
        """Drive the element relay.

        Args:
            command: 1 to switch ON, 0 to switch OFF

        Returns:
            True if the service call succeeded
        """
        service = "turn_on" if command == 1 else "turn_off"
        domain = self.element_entity.split(".", 1)[0]

        try:
            await self.hass.services.async_call(
                domain,
                service,
                {"entity_id": self.element_entity},
                blocking=True,
            )
        except HomeAssistantError as err:
            _LOGGER.error(
                "Failed to %s element %s: %s",
                service.replace("_", " "),
                self.element_entity,
                err,
            )
            return False

        _LOGGER.debug("Element %s: %s", self.element_entity, service)
        return True

    def _read_float(self, entity_id: str | None, default: float | None = None) -> float | None:
        """Read float value from entity.

        Args:
            entity_id: Entity ID to read
            default: Default value if entity unavailable

        Returns:
            Float value or default
        """
        if not entity_id:
            return default

        state = self.hass.states.get(entity_id)
        if not state or state.state in UNAVAILABLE_STATES:
            return default

        try:
            return float(state.state)
        except (ValueError, TypeError):
            _LOGGER.warning("Cannot parse float from %s: %s", entity_id, state.state)
            return default

    def _read_bool(self, entity_id: str | None) -> bool:
        if not entity_id:
            return False

        state = self.hass.states.get(entity_id)
        if not state or state.state in UNAVAILABLE_STATES:
            return False
        return str(state.state).lower() in ON_STATES

    def _read_str(self, entity_id: str | None) -> str | None:
        if not entity_id:
            return None

        state = self.hass.states.get(entity_id)
        if not state or state.state in UNAVAILABLE_STATES:
            return None
        return str(state.state)
