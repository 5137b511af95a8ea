"""The Solar Hot Water integration.

Rule-based setpoint control for a solar-assisted electric hot water tank.
Decides when the electric element should run based on tank stratification,
a time-of-day mode schedule, weather and manual or energy management
overrides, and publishes a setpoint analytics record every controller pass.
"""

import logging

import voluptuous as vol

from homeassistant.config_entries import ConfigEntry
from homeassistant.const import Platform
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import ConfigEntryError, ConfigEntryNotReady

from .const import CONF_S3_ENTITY, DOMAIN
from .coordinator import SolarHWSCoordinator

_LOGGER = logging.getLogger(__name__)

PLATFORMS: list[Platform] = [
    Platform.SENSOR,
]


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Set up Solar Hot Water from a config entry."""
    _LOGGER.info("Setting up Solar Hot Water integration")

    # S3 is the primary control sensor - wait for it to exist before controlling
    if hass.states.get(entry.data[CONF_S3_ENTITY]) is None:
        raise ConfigEntryNotReady(
            f"Tank sensor {entry.data[CONF_S3_ENTITY]} not available yet. "
            f"Ensure the sensor integration is loaded."
        )

    hass.data.setdefault(DOMAIN, {})

    coordinator = _create_coordinator(hass, entry)
    hass.data[DOMAIN][entry.entry_id] = coordinator

    await coordinator.async_config_entry_first_refresh()

    # Event-driven passes on S3 updates, after the first refresh
    coordinator.setup_sensor_listener()

    await hass.config_entries.async_forward_entry_setups(entry, PLATFORMS)

    entry.async_on_unload(entry.add_update_listener(async_reload_entry))

    _LOGGER.info("Solar Hot Water setup complete")
    return True


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Unload a config entry."""
    _LOGGER.info("Unloading Solar Hot Water integration")

    coordinator: SolarHWSCoordinator | None = hass.data[DOMAIN].get(entry.entry_id)
    if coordinator:
        await coordinator.async_shutdown()

    unload_ok = await hass.config_entries.async_unload_platforms(entry, PLATFORMS)
    if unload_ok:
        hass.data[DOMAIN].pop(entry.entry_id, None)

    return unload_ok


async def async_reload_entry(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Reload config entry when options change.

    Controller configuration is immutable once loaded, so any option change
    rebuilds the controller. Control state starts fresh.
    """
    _LOGGER.info("Options changed, reloading Solar Hot Water")
    await hass.config_entries.async_reload(entry.entry_id)


def _create_coordinator(hass: HomeAssistant, entry: ConfigEntry) -> SolarHWSCoordinator:
    """Create coordinator with dependency injection.

    Builds the validated controller configuration (defaults merged with
    options), the state adapter and the controller.
    """
    from .adapters.state_adapter import HassStateAdapter
    from .control.config import ControllerConfig
    from .control.controller import SolarHotWaterController

    try:
        config = ControllerConfig.from_options(entry.options)
    except vol.Invalid as err:
        raise ConfigEntryError(f"Invalid Solar Hot Water configuration: {err}") from err

    config_with_options = {**entry.data, **entry.options}
    state_adapter = HassStateAdapter(hass, config_with_options)
    controller = SolarHotWaterController(config)

    _LOGGER.info(
        "Controller configured: %d modes, min switch interval %.0f min, "
        "controller interval %.0f s",
        len(config.modes),
        config.min_switch_interval_minutes,
        config.controller_interval_seconds,
    )

    return SolarHWSCoordinator(
        hass=hass,
        state_adapter=state_adapter,
        controller=controller,
        entry=entry,
    )
