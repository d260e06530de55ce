"""Dataset registry lifecycle states.

This module defines the registry state machine and validates transitions
so the readiness gate can only open after one fully successful load.
"""

from __future__ import annotations

from typing import Literal

from core.errors import RegistryStateError

RegistryState = Literal["not_ready", "loading", "ready", "failed"]
ALLOWED_STATE_TRANSITIONS: dict[RegistryState, tuple[RegistryState, ...]] = {
    "not_ready": ("loading",),
    "loading": ("ready", "failed"),
    "ready": (),
    "failed": (),
}


def validate_transition(current: RegistryState, next_state: RegistryState) -> None:
    """Validate one lifecycle transition against allowed state machine edges."""
    allowed_states = ALLOWED_STATE_TRANSITIONS[current]
    if next_state not in allowed_states:
        raise RegistryStateError(
            f"Invalid registry state transition {current!r} -> {next_state!r}. "
            f"Allowed: {', '.join(allowed_states) or 'none'}."
        )
