"""Tests for coordinator controller passes.

The coordinator reads entities through the adapter, runs one controller pass,
drives the relay and publishes setpoint records on the event bus.
"""

from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock, Mock

import pytest
from conftest import ENTRY_DATA, create_mock_entry, create_mock_hass, set_mock_states
from freezegun import freeze_time
from homeassistant.exceptions import HomeAssistantError

from custom_components.solar_hws.adapters.state_adapter import HassStateAdapter
from custom_components.solar_hws.const import EVENT_SETPOINT_LOG, SETPOINT_LOG_TOPIC
from custom_components.solar_hws.control.config import ControllerConfig
from custom_components.solar_hws.control.controller import SolarHotWaterController
from custom_components.solar_hws.coordinator import SolarHWSCoordinator

# Cold tank, element OFF, sunny daytime
COLD_TANK = {
    "sensor.tank_s2": "24.0",
    "sensor.tank_s3": "26.0",
    "sensor.tank_s4": "30.0",
    "switch.hws_element": "off",
    "sensor.controller_uptime": "700",
    "input_boolean.hws_disable_auto": "off",
    "input_boolean.hws_super_heat": "off",
    "binary_sensor.hws_energy_mgmt": "off",
    "sensor.cloud_cover": "20",
    "sensor.solar_irradiance": "600",
    "sensor.forecast_next_6h": "clear",
}


def _make_coordinator(states, options=None):
    hass = create_mock_hass(states)
    entry = create_mock_entry(options=options)
    config = ControllerConfig.from_options(entry.options)
    coordinator = SolarHWSCoordinator(
        hass=hass,
        state_adapter=HassStateAdapter(hass, {**entry.data, **entry.options}),
        controller=SolarHotWaterController(config),
        entry=entry,
    )
    return coordinator, hass


def test_update_interval_polls_just_past_rate_limit():
    coordinator, _ = _make_coordinator(COLD_TANK, {"controller_interval_seconds": 60})

    assert coordinator.update_interval == timedelta(seconds=61)


@pytest.mark.asyncio
async def test_scheduled_polls_are_never_rate_limited():
    """Polls one interval apart always run a full pass."""
    coordinator, _ = _make_coordinator(COLD_TANK)
    step = coordinator.update_interval

    with freeze_time("2025-01-15 09:00:00") as frozen:
        results = []
        for _ in range(5):
            results.append(await coordinator._async_update_data())
            coordinator.data = results[-1]
            frozen.tick(step)

    assert all(result["result"].ran for result in results)
    assert len({id(result) for result in results}) == 5


def test_update_interval_has_floor():
    coordinator, _ = _make_coordinator(COLD_TANK, {"controller_interval_seconds": 0})

    assert coordinator.update_interval == timedelta(seconds=10)


@pytest.mark.asyncio
@freeze_time("2025-01-15 09:00:00")
async def test_pass_switches_element_on_and_publishes_record():
    coordinator, hass = _make_coordinator(COLD_TANK)

    data = await coordinator._async_update_data()

    hass.services.async_call.assert_awaited_once_with(
        "switch", "turn_on", {"entity_id": "switch.hws_element"}, blocking=True
    )
    assert coordinator.last_command == 1
    assert data["decision"].command == 1
    assert data["resolution"].mode == "daytime"
    assert data["hot_water_level"] == 0

    hass.bus.async_fire.assert_called_once()
    event_type, event_data = hass.bus.async_fire.call_args.args
    assert event_type == EVENT_SETPOINT_LOG
    assert event_data["topic"] == SETPOINT_LOG_TOPIC
    assert event_data["payload"]["mode"] == "daytime"
    assert event_data["payload"]["control_state"] == "AUTO_CONTROL"
    assert event_data["payload"]["s3_current"] == 26.0


@pytest.mark.asyncio
async def test_rate_limited_pass_keeps_previous_data():
    coordinator, hass = _make_coordinator(COLD_TANK)

    with freeze_time("2025-01-15 09:00:00") as frozen:
        first = await coordinator._async_update_data()
        coordinator.data = first

        frozen.tick(timedelta(seconds=5))
        second = await coordinator._async_update_data()

    assert second is first
    assert hass.services.async_call.await_count == 1
    assert hass.bus.async_fire.call_count == 1


@pytest.mark.asyncio
async def test_anti_cycling_across_passes():
    coordinator, hass = _make_coordinator(COLD_TANK)

    with freeze_time("2025-01-15 09:00:00") as frozen:
        await coordinator._async_update_data()

        # Relay reports ON and the tank heats up quickly
        set_mock_states(
            hass, {**COLD_TANK, "switch.hws_element": "on", "sensor.tank_s3": "45.0"}
        )
        frozen.tick(timedelta(minutes=5))
        vetoed = await coordinator._async_update_data()

        frozen.tick(timedelta(minutes=10))
        allowed = await coordinator._async_update_data()

    assert vetoed["decision"].command is None
    assert "blocked" in vetoed["decision"].reason
    assert allowed["decision"].command == 0
    assert [call.args[1] for call in hass.services.async_call.await_args_list] == [
        "turn_on",
        "turn_off",
    ]


@pytest.mark.asyncio
@freeze_time("2025-01-15 09:00:00")
async def test_invalid_sensor_pass_does_not_touch_relay():
    coordinator, hass = _make_coordinator({**COLD_TANK, "sensor.tank_s3": "unavailable"})

    data = await coordinator._async_update_data()

    hass.services.async_call.assert_not_awaited()
    hass.bus.async_fire.assert_not_called()
    assert data["decision"].reason == "Invalid sensor data"


@pytest.mark.asyncio
@freeze_time("2025-01-15 09:00:00")
async def test_energy_management_blocks_relay():
    states = {
        **COLD_TANK,
        "input_boolean.hws_disable_auto": "on",
        "binary_sensor.hws_energy_mgmt": "on",
    }
    coordinator, hass = _make_coordinator(states)

    data = await coordinator._async_update_data()

    hass.services.async_call.assert_not_awaited()
    assert data["status"].control_mode == "ENERGY_MGMT"
    # Records are still published while energy management holds the element
    assert hass.bus.async_fire.call_args.args[1]["payload"]["control_state"] == "ENERGY_MGMT"


@pytest.mark.asyncio
@freeze_time("2025-01-15 09:00:00")
async def test_failed_relay_write_is_not_recorded():
    coordinator, hass = _make_coordinator(COLD_TANK)
    hass.services.async_call = AsyncMock(side_effect=HomeAssistantError("relay offline"))

    data = await coordinator._async_update_data()

    assert data["decision"].command == 1
    assert coordinator.last_command is None
    assert coordinator.last_command_time is None


@pytest.mark.asyncio
@freeze_time("2025-01-15 09:00:00")
async def test_weather_logging_disabled_blanks_weather_fields():
    coordinator, hass = _make_coordinator(COLD_TANK, {"log_weather_data": False})

    await coordinator._async_update_data()

    payload = hass.bus.async_fire.call_args.args[1]["payload"]
    assert payload["cloud_cover_pct"] is None
    assert payload["solar_irradiance"] is None
    assert payload["weather_forecast"] is None


@pytest.mark.asyncio
@freeze_time("2025-01-15 09:00:00")
async def test_setpoint_logging_disabled():
    coordinator, hass = _make_coordinator(COLD_TANK, {"log_setpoints": False})

    data = await coordinator._async_update_data()

    hass.bus.async_fire.assert_not_called()
    assert data["log_record"] is None


def test_s3_listener_triggers_refresh():
    coordinator, hass = _make_coordinator(COLD_TANK)
    coordinator.async_request_refresh = MagicMock()

    coordinator.setup_sensor_listener()

    event_type, handler = hass.bus.async_listen.call_args.args
    assert event_type == "state_changed"

    handler(Mock(data={"entity_id": "sensor.tank_s2", "new_state": Mock()}))
    hass.async_create_task.assert_not_called()

    handler(Mock(data={"entity_id": "sensor.tank_s3", "new_state": None}))
    hass.async_create_task.assert_not_called()

    handler(Mock(data={"entity_id": "sensor.tank_s3", "new_state": Mock()}))
    hass.async_create_task.assert_called_once()


def test_uptime_fallback_without_uptime_entity():
    data = {key: value for key, value in ENTRY_DATA.items() if key != "uptime_entity"}
    hass = create_mock_hass(COLD_TANK)

    with freeze_time("2025-01-15 09:00:00") as frozen:
        coordinator = SolarHWSCoordinator(
            hass=hass,
            state_adapter=HassStateAdapter(hass, data),
            controller=SolarHotWaterController(ControllerConfig.from_dict({})),
            entry=create_mock_entry(data=data),
        )
        frozen.tick(timedelta(seconds=90))

        assert coordinator.uptime_seconds() == 90.0
        assert coordinator.adapter.read_payload(coordinator.uptime_seconds())["time"] == 90.0