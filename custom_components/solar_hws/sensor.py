"""Sensor entities for the Solar Hot Water integration.

Diagnostic sensors exposing the controller's mode, thresholds, hot water
estimate, control authority and last decision.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from homeassistant.components.sensor import (
    SensorDeviceClass,
    SensorEntity,
    SensorEntityDescription,
    SensorStateClass,
)
from homeassistant.config_entries import ConfigEntry
from homeassistant.const import PERCENTAGE, EntityCategory, UnitOfTemperature
from homeassistant.core import HomeAssistant
from homeassistant.helpers.device_registry import DeviceInfo
from homeassistant.helpers.entity_platform import AddEntitiesCallback
from homeassistant.helpers.update_coordinator import CoordinatorEntity

from .const import DOMAIN
from .coordinator import SolarHWSCoordinator

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class SolarHWSSensorEntityDescription(SensorEntityDescription):
    """Describes Solar Hot Water sensor entity."""

    value_fn: Callable[[dict[str, Any]], Any]


def _threshold(field: str) -> Callable[[dict[str, Any]], Any]:
    def value(data: dict[str, Any]) -> Any:
        resolution = data.get("resolution")
        return getattr(resolution.thresholds, field) if resolution else None

    return value


SENSORS: tuple[SolarHWSSensorEntityDescription, ...] = (
    SolarHWSSensorEntityDescription(
        key="mode",
        name="Operating Mode",
        icon="mdi:clock-outline",
        value_fn=lambda data: data["resolution"].mode if data.get("resolution") else None,
    ),
    SolarHWSSensorEntityDescription(
        key="hot_water_level",
        name="Hot Water Level",
        icon="mdi:water-percent",
        native_unit_of_measurement=PERCENTAGE,
        state_class=SensorStateClass.MEASUREMENT,
        value_fn=lambda data: data.get("hot_water_level"),
    ),
    SolarHWSSensorEntityDescription(
        key="switch_on_temp",
        name="Switch On Temperature",
        icon="mdi:thermometer-chevron-up",
        device_class=SensorDeviceClass.TEMPERATURE,
        native_unit_of_measurement=UnitOfTemperature.CELSIUS,
        entity_category=EntityCategory.DIAGNOSTIC,
        value_fn=_threshold("switch_on_temp"),
    ),
    SolarHWSSensorEntityDescription(
        key="switch_off_temp",
        name="Switch Off Temperature",
        icon="mdi:thermometer-chevron-down",
        device_class=SensorDeviceClass.TEMPERATURE,
        native_unit_of_measurement=UnitOfTemperature.CELSIUS,
        entity_category=EntityCategory.DIAGNOSTIC,
        value_fn=_threshold("switch_off_temp"),
    ),
    SolarHWSSensorEntityDescription(
        key="switch_on_s4_temp",
        name="Switch On Top Limit",
        icon="mdi:thermometer-alert",
        device_class=SensorDeviceClass.TEMPERATURE,
        native_unit_of_measurement=UnitOfTemperature.CELSIUS,
        entity_category=EntityCategory.DIAGNOSTIC,
        value_fn=_threshold("switch_on_s4_temp"),
    ),
    SolarHWSSensorEntityDescription(
        key="control_state",
        name="Control State",
        icon="mdi:account-switch",
        entity_category=EntityCategory.DIAGNOSTIC,
        value_fn=lambda data: str(data["status"].control_mode) if data.get("status") else None,
    ),
    SolarHWSSensorEntityDescription(
        key="last_decision",
        name="Last Decision",
        icon="mdi:head-cog-outline",
        entity_category=EntityCategory.DIAGNOSTIC,
        value_fn=lambda data: data["decision"].reason if data.get("decision") else None,
    ),
)


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up Solar Hot Water sensor entities from a config entry."""
    coordinator: SolarHWSCoordinator = hass.data[DOMAIN][entry.entry_id]
    async_add_entities(
        SolarHWSSensor(coordinator, entry, description) for description in SENSORS
    )


class SolarHWSSensor(CoordinatorEntity[SolarHWSCoordinator], SensorEntity):
    """Solar Hot Water diagnostic sensor."""

    entity_description: SolarHWSSensorEntityDescription
    _attr_has_entity_name = True

    def __init__(
        self,
        coordinator: SolarHWSCoordinator,
        entry: ConfigEntry,
        description: SolarHWSSensorEntityDescription,
    ):
        """Initialize sensor."""
        super().__init__(coordinator)
        self.entity_description = description
        self._attr_unique_id = f"{entry.entry_id}_{description.key}"
        self._attr_device_info = DeviceInfo(
            identifiers={(DOMAIN, entry.entry_id)},
            name="Solar Hot Water",
            manufacturer="Solar Hot Water",
            model="Setpoint Controller",
        )

    @property
    def native_value(self) -> Any:
        """Return the state of the sensor."""
        if not self.coordinator.data:
            return None
        try:
            return self.entity_description.value_fn(self.coordinator.data)
        except (AttributeError, KeyError, TypeError) as err:
            _LOGGER.debug("Cannot compute %s: %s", self.entity_description.key, err)
            return None

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Return additional state attributes based on sensor type."""
        data = self.coordinator.data
        if not data:
            return {}

        key = self.entity_description.key
        attrs: dict[str, Any] = {}

        if key == "mode":
            weather = data.get("weather")
            resolution = data.get("resolution")
            if weather:
                attrs["cloud_cover"] = weather.cloud_cover
                attrs["solar_irradiance"] = weather.irradiance
                attrs["forecast"] = weather.forecast
                attrs["poor_solar"] = weather.poor_solar
            if resolution:
                attrs["poor_weather_thresholds"] = resolution.poor_weather_applied

        elif key == "control_state":
            status = data.get("status")
            if status:
                attrs["energy_mgmt_active"] = status.energy_mgmt_active
                attrs["disable_auto_control"] = status.disable_auto_control
                attrs["consistent"] = status.consistent

        elif key == "last_decision":
            decision = data.get("decision")
            if decision:
                attrs["action"] = str(decision.action)
            if self.coordinator.last_command_time:
                attrs["last_command"] = self.coordinator.last_command
                attrs["last_command_time"] = self.coordinator.last_command_time.isoformat()

        return attrs
