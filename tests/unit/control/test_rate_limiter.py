"""Tests for controller pass rate limiting."""

from datetime import datetime, timedelta

from custom_components.solar_hws.control.rate_limiter import should_run
from custom_components.solar_hws.control.state import ControlState

BASE = datetime(2025, 1, 15, 9, 0, 0)


def test_first_pass_always_runs():
    state = ControlState()

    assert should_run(state, BASE, 30) is True
    assert state.last_run_timestamp == BASE


def test_pass_within_interval_is_skipped():
    state = ControlState(last_run_timestamp=BASE)

    assert should_run(state, BASE + timedelta(seconds=29), 30) is False
    # Skipped passes leave the stamp alone
    assert state.last_run_timestamp == BASE


def test_pass_at_interval_runs():
    state = ControlState(last_run_timestamp=BASE)
    now = BASE + timedelta(seconds=30)

    assert should_run(state, now, 30) is True
    assert state.last_run_timestamp == now


def test_burst_of_messages_runs_once_per_interval():
    """Ten messages in 50s with a 30s interval give two passes."""
    state = ControlState()
    ran = [should_run(state, BASE + timedelta(seconds=5 * i), 30) for i in range(10)]

    assert ran.count(True) == 2
    assert ran[0] is True
    assert ran[6] is True


def test_zero_interval_never_limits():
    state = ControlState()

    assert should_run(state, BASE, 0) is True
    assert should_run(state, BASE, 0) is True
