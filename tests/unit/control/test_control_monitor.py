"""Tests for control authority monitoring."""

import logging

import pytest

from custom_components.solar_hws.const import ControlMode
from custom_components.solar_hws.control.control_monitor import monitor_control_state
from custom_components.solar_hws.control.state import ControlState


@pytest.mark.parametrize(
    "energy_mgmt, disable, expected_mode, expected_disable",
    [
        (False, 0, ControlMode.AUTO_CONTROL, False),
        (True, 1, ControlMode.ENERGY_MGMT, True),
        (False, 1, ControlMode.AUTO_CONTROL, True),
        (True, 0, ControlMode.ENERGY_MGMT, False),
    ],
)
def test_derives_control_mode(energy_mgmt, disable, expected_mode, expected_disable):
    inputs = {"energy_management_hws_active": energy_mgmt, "disable_auto_control": disable}

    status = monitor_control_state(inputs, ControlState())

    assert status.control_mode == expected_mode
    assert status.disable_auto_control is expected_disable


def test_absent_flags_mean_auto_control():
    status = monitor_control_state({}, ControlState())

    assert status.control_mode == ControlMode.AUTO_CONTROL
    assert status.energy_mgmt_active is False
    assert status.disable_auto_control is False
    assert status.changed is False
    assert status.consistent is True


def test_transition_is_recorded_and_logged(caplog):
    state = ControlState()
    inputs = {"energy_management_hws_active": True, "disable_auto_control": 1}

    with caplog.at_level(logging.INFO):
        status = monitor_control_state(inputs, state)

    assert status.changed is True
    assert state.last_control_mode == ControlMode.ENERGY_MGMT
    assert "HWS control changed: AUTO_CONTROL → ENERGY_MGMT" in caplog.text


def test_steady_state_is_not_a_transition():
    state = ControlState(last_control_mode=ControlMode.ENERGY_MGMT)
    inputs = {"energy_management_hws_active": True, "disable_auto_control": 1}

    status = monitor_control_state(inputs, state)

    assert status.changed is False


def test_return_to_auto_control():
    state = ControlState(last_control_mode=ControlMode.ENERGY_MGMT)

    status = monitor_control_state({"energy_management_hws_active": False}, state)

    assert status.changed is True
    assert state.last_control_mode == ControlMode.AUTO_CONTROL


def test_inconsistent_flags_warn_but_are_not_corrected(caplog):
    """Energy management active without disable flag is reported only."""
    inputs = {"energy_management_hws_active": True, "disable_auto_control": 0}

    with caplog.at_level(logging.WARNING):
        status = monitor_control_state(inputs, ControlState())

    assert status.consistent is False
    assert status.disable_auto_control is False
    assert "Inconsistent HWS control state" in caplog.text


@pytest.mark.parametrize("value", [True, 1, 2, "active", "on"])
def test_energy_management_flag_is_truthy(value):
    inputs = {"energy_management_hws_active": value, "disable_auto_control": 1}

    status = monitor_control_state(inputs, ControlState())

    assert status.energy_mgmt_active is True
    assert status.control_mode == ControlMode.ENERGY_MGMT


@pytest.mark.parametrize("value", [False, 0, None, "", "off", "false"])
def test_energy_management_flag_falsy(value):
    status = monitor_control_state({"energy_management_hws_active": value}, ControlState())

    assert status.energy_mgmt_active is False


def test_disable_flag_still_needs_exactly_one():
    status = monitor_control_state({"disable_auto_control": 2}, ControlState())

    assert status.disable_auto_control is False
