"""Data update coordinator for the Solar Hot Water integration."""

import logging
from datetime import datetime, timedelta
from typing import Any

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant, callback
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator
from homeassistant.util import dt as dt_util

from .adapters.state_adapter import HassStateAdapter
from .const import DOMAIN, EVENT_SETPOINT_LOG, SETPOINT_LOG_TOPIC
from .control.controller import ControllerResult, SolarHotWaterController
from .control.setpoint_logger import SetpointLogRecord
from .control.state import ControlState

_LOGGER = logging.getLogger(__name__)

# Polling floor - the controller's own rate limiter handles finer gating
MIN_UPDATE_INTERVAL_SECONDS = 10

# Polls land on a whole-second grid, so poll just past the rate limit
# to keep every scheduled pass from being rate limited
POLL_MARGIN_SECONDS = 1


class SolarHWSCoordinator(DataUpdateCoordinator):
    """Coordinate controller passes for the Solar Hot Water integration.

    This coordinator:
    - Owns the ControlState for the lifetime of the config entry
    - Builds the inbound message and input state from Home Assistant entities
    - Runs one controller pass per poll or per S3 sensor update
    - Drives the element relay and publishes setpoint log records

    Passes run on the event loop and the controller pass itself never awaits,
    so ControlState is read and written by one pass at a time.
    """

    def __init__(
        self,
        hass: HomeAssistant,
        state_adapter: HassStateAdapter,
        controller: SolarHotWaterController,
        entry: ConfigEntry,
    ):
        """Initialize coordinator with dependency injection."""
        interval = max(
            controller.config.controller_interval_seconds + POLL_MARGIN_SECONDS,
            MIN_UPDATE_INTERVAL_SECONDS,
        )
        super().__init__(
            hass,
            _LOGGER,
            name=DOMAIN,
            update_interval=timedelta(seconds=interval),
        )
        self.adapter = state_adapter
        self.controller = controller
        self.entry = entry

        self.control_state = ControlState()
        self.started_at: datetime = dt_util.utcnow()
        self.last_result: ControllerResult | None = None
        self.last_log_record: SetpointLogRecord | None = None
        self.last_command: int | None = None
        self.last_command_time: datetime | None = None
        self._sensor_listener = None

    def uptime_seconds(self) -> float:
        """Seconds since the integration started (fallback controller uptime)."""
        return (dt_util.utcnow() - self.started_at).total_seconds()

    def setup_sensor_listener(self) -> None:
        """Run a controller pass whenever the S3 sensor reports a new value.

        Polling still runs as a backstop; the controller's rate limiter keeps
        bursts of sensor updates from producing extra passes.
        """
        s3_entity = self.adapter.s3_entity

        @callback
        def s3_state_changed(event):
            """Handle S3 sensor state change event."""
            if event.data.get("entity_id") != s3_entity:
                return

            new_state = event.data.get("new_state")
            if new_state is None:
                return

            self.hass.async_create_task(self.async_request_refresh())

        self._sensor_listener = self.hass.bus.async_listen("state_changed", s3_state_changed)
        _LOGGER.debug("Listening for %s updates", s3_entity)

    async def async_shutdown(self) -> None:
        """Remove listeners on unload."""
        if self._sensor_listener:
            self._sensor_listener()
            self._sensor_listener = None
        await super().async_shutdown()

    async def _async_update_data(self) -> dict[str, Any]:
        """Run one controller pass and apply its outputs.

        Returns:
            Dictionary containing:
            - result: Latest ControllerResult that ran
            - decision: Switch decision of that pass
            - resolution: Mode and thresholds
            - weather: Weather assessment
            - status: Control authority
            - hot_water_level: Estimated usable hot water (%)
            - log_record: Last emitted setpoint record
        """
        now = dt_util.now()
        payload = self.adapter.read_payload(uptime_fallback=self.uptime_seconds())
        inputs = self.adapter.read_inputs()

        result = self.controller.run(payload, inputs, self.control_state, now)

        if not result.ran:
            # Rate limited - keep what entities already show
            return self.data or {}

        if result.decision.has_command:
            await self._apply_command(result.decision.command, now)

        if result.log_record is not None:
            self._publish_log_record(result.log_record)

        self.last_result = result
        return {
            "result": result,
            "decision": result.decision,
            "resolution": result.resolution,
            "weather": result.weather,
            "status": result.status,
            "hot_water_level": result.hot_water_level,
            "log_record": self.last_log_record,
        }

    async def _apply_command(self, command: int, now: datetime) -> None:
        """Deliver an element command to the relay.

        The switch timestamp is already stamped by the controller. A failed
        write is logged only; the next pass reads the real relay state.
        """
        if await self.adapter.async_set_element(command):
            self.last_command = command
            self.last_command_time = now
            _LOGGER.info("Element switched %s", "ON" if command == 1 else "OFF")

    @callback
    def _publish_log_record(self, record: SetpointLogRecord) -> None:
        """Hand the setpoint record to time-series logging via the event bus."""
        self.last_log_record = record
        self.hass.bus.async_fire(
            EVENT_SETPOINT_LOG,
            {"topic": SETPOINT_LOG_TOPIC, "payload": record.as_dict()},
        )
