"""Control authority monitoring between auto control and energy management.

An external energy management system can claim the heating element. It signals
this with two flags that it is expected to keep in sync:
- energy_management_hws_active: energy management owns the element
- disable_auto_control: this controller must not switch the element

The monitor derives the current authority, reports transitions, and reports
(but never corrects) an active flag without the matching disable flag.
"""

import logging
from dataclasses import dataclass

from ..const import STATE_DISABLE_AUTO_CONTROL, STATE_ENERGY_MGMT_ACTIVE, ControlMode
from .state import ControlState, InputStore, read_bool, read_flag

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ControlStatus:
    """Authority snapshot for one pass."""

    control_mode: ControlMode
    energy_mgmt_active: bool
    disable_auto_control: bool
    changed: bool
    consistent: bool


def monitor_control_state(inputs: InputStore, state: ControlState) -> ControlStatus:
    """Derive control authority and record it in the control state.

    Args:
        inputs: Process-wide input state
        state: Control state (last_control_mode is updated)

    Returns:
        ControlStatus for this pass
    """
    energy_mgmt_active = read_bool(inputs, STATE_ENERGY_MGMT_ACTIVE)
    disable_auto_control = read_flag(inputs, STATE_DISABLE_AUTO_CONTROL)

    control_mode = ControlMode.ENERGY_MGMT if energy_mgmt_active else ControlMode.AUTO_CONTROL
    previous = state.last_control_mode
    changed = control_mode != previous

    if changed:
        _LOGGER.info("HWS control changed: %s → %s", previous, control_mode)
        _LOGGER.debug(
            "Control state details: energy_mgmt_active=%s, disable_auto_control=%s",
            energy_mgmt_active,
            disable_auto_control,
        )
        state.last_control_mode = control_mode

    consistent = not (energy_mgmt_active and not disable_auto_control)
    if not consistent:
        _LOGGER.warning(
            "Inconsistent HWS control state - energy_mgmt_active=%s but disable_auto_control=%s",
            energy_mgmt_active,
            int(disable_auto_control),
        )

    return ControlStatus(
        control_mode=control_mode,
        energy_mgmt_active=energy_mgmt_active,
        disable_auto_control=disable_auto_control,
        changed=changed,
        consistent=consistent,
    )
