"""Pytest configuration for Solar Hot Water tests."""

import sys
import warnings
from datetime import datetime
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock, Mock

import pytest

# Add custom_components to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

# Configure pytest-asyncio
pytest_plugins = ("pytest_asyncio",)

# Filter warnings
warnings.filterwarnings("ignore", category=DeprecationWarning, module="josepy")
warnings.filterwarnings("ignore", category=DeprecationWarning, module="acme")
warnings.filterwarnings("ignore", category=DeprecationWarning, module="homeassistant")


@pytest.fixture(autouse=True)
def setup_frame_helper(monkeypatch):
    """Set up the frame helper for all tests."""
    from homeassistant.helpers import frame

    # Mock the report_usage function to avoid frame helper errors
    monkeypatch.setattr(frame, "report_usage", Mock())

    yield


# Common mock helper functions
def create_mock_hass(states: dict[str, Any] | None = None):
    """Create a properly configured mock Home Assistant instance.

    Args:
        states: Entity ID -> state string. Entities not listed read as missing.

    Returns:
        Mock hass with a state machine, bus and service registry
    """
    mock_hass = MagicMock()
    mock_hass.data = {}
    mock_hass.loop = MagicMock()  # Add loop for DataUpdateCoordinator
    mock_hass.loop.call_soon_threadsafe = MagicMock()
    mock_hass.async_add_executor_job = AsyncMock(side_effect=lambda func, *args: func(*args))
    mock_hass.async_create_task = MagicMock()
    mock_hass.services.async_call = AsyncMock()
    mock_hass.bus.async_fire = MagicMock()
    set_mock_states(mock_hass, states or {})
    return mock_hass


def set_mock_states(mock_hass, states: dict[str, Any]) -> None:
    """Point hass.states.get at a dict of entity states."""

    def get_state(entity_id):
        if entity_id not in states:
            return None
        state = Mock()
        state.state = str(states[entity_id])
        return state

    mock_hass.states.get = Mock(side_effect=get_state)


def create_mock_entry(data: dict[str, Any] | None = None, options: dict[str, Any] | None = None):
    """Create a properly configured mock config entry.

    Returns:
        Mock entry with real dicts for data and options
    """
    mock_entry = MagicMock()
    mock_entry.entry_id = "test_entry"
    mock_entry.data = dict(data if data is not None else ENTRY_DATA)
    mock_entry.options = dict(options or {})
    return mock_entry


ENTRY_DATA = {
    "s2_entity": "sensor.tank_s2",
    "s3_entity": "sensor.tank_s3",
    "s4_entity": "sensor.tank_s4",
    "element_entity": "switch.hws_element",
    "uptime_entity": "sensor.controller_uptime",
    "disable_auto_control_entity": "input_boolean.hws_disable_auto",
    "super_heat_entity": "input_boolean.hws_super_heat",
    "energy_management_entity": "binary_sensor.hws_energy_mgmt",
    "cloud_cover_entity": "sensor.cloud_cover",
    "solar_irradiance_entity": "sensor.solar_irradiance",
    "forecast_entity": "sensor.forecast_next_6h",
}


def make_payload(s2=30.0, s3=36.0, s4=40.0, uptime=700.0) -> dict[str, Any]:
    """Build an inbound sensor message."""
    return {"s2": s2, "s3": s3, "s4": s4, "time": uptime}


def make_inputs(
    element_on: bool = False,
    disable_auto_control: bool = False,
    super_heat: bool = False,
    energy_mgmt_active: bool = False,
    cloud_cover: float | None = 20.0,
    irradiance: float | None = 600.0,
    forecast: str | None = "clear",
) -> dict[str, Any]:
    """Build the process-wide input state (sunny, auto control, element OFF)."""
    return {
        "disable_auto_control": int(disable_auto_control),
        "hot_water_element": int(element_on),
        "super_heat": int(super_heat),
        "energy_management_hws_active": energy_mgmt_active,
        "weather_cloud_cover": cloud_cover,
        "weather_solar_irradiance": irradiance,
        "weather_forecast_next_6h": forecast,
    }


# Daytime mode under the default schedule (08-10)
DAYTIME = datetime(2025, 1, 15, 9, 0, 0)


@pytest.fixture
def default_config():
    """Controller configuration with all defaults."""
    from custom_components.solar_hws.control.config import ControllerConfig

    return ControllerConfig.from_dict({})


@pytest.fixture
def daytime_config():
    """Defaults with simple daytime thresholds (off 35, on 30, s4-on 35)."""
    from custom_components.solar_hws.const import DEFAULT_MODES
    from custom_components.solar_hws.control.config import ControllerConfig

    modes = {name: dict(mode) for name, mode in DEFAULT_MODES.items()}
    modes["daytime"] = {
        "switch_off_temp": 35,
        "switch_on_temp": 30,
        "switch_on_s4_temp": 35,
    }
    return ControllerConfig.from_dict({"modes": modes})


@pytest.fixture
def control_state():
    """Fresh control state."""
    from custom_components.solar_hws.control.state import ControlState

    return ControlState()
