"""Rate limiting for controller passes.

The host may deliver sensor messages far more often than the element needs
re-evaluating. A pass only proceeds once controller_interval_seconds have
elapsed since the last pass that proceeded.
"""

import logging
from datetime import datetime

from ..utils.time_utils import seconds_since
from .state import ControlState

_LOGGER = logging.getLogger(__name__)


def should_run(state: ControlState, now: datetime, interval_seconds: float) -> bool:
    """Gate a controller pass.

    On proceed, stamps last_run_timestamp before any other logic runs, so a
    pass that fails midway still counts as a run.

    Args:
        state: Control state (mutated on proceed)
        now: Current time
        interval_seconds: Minimum seconds between passes

    Returns:
        True to proceed, False to skip silently
    """
    elapsed = seconds_since(state.last_run_timestamp, now)
    if elapsed < interval_seconds:
        _LOGGER.debug(
            "Rate limited: %.0fs remaining until next controller run",
            interval_seconds - elapsed,
        )
        return False

    state.last_run_timestamp = now
    return True
