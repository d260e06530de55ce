"""Unit tests for registry lifecycle transitions."""

from __future__ import annotations

import pytest

from core.errors import RegistryStateError
from store.registry_state import ALLOWED_STATE_TRANSITIONS, validate_transition


def test_validate_transition_accepts_load_edges() -> None:
    """Load edges should pass without raising."""
    validate_transition("not_ready", "loading")
    validate_transition("loading", "ready")
    validate_transition("loading", "failed")

    assert ALLOWED_STATE_TRANSITIONS["loading"] == ("ready", "failed")


def test_validate_transition_rejects_reload_after_ready() -> None:
    """Ready is terminal and cannot restart a load."""
    with pytest.raises(RegistryStateError, match="'ready' -> 'loading'"):
        validate_transition("ready", "loading")

    assert True


def test_validate_transition_rejects_recovery_from_failed() -> None:
    """Failed is terminal and never becomes ready."""
    with pytest.raises(RegistryStateError, match="Allowed: none"):
        validate_transition("failed", "ready")

    assert True


def test_validate_transition_rejects_skipping_loading() -> None:
    """The gate cannot open without passing through loading."""
    with pytest.raises(RegistryStateError):
        validate_transition("not_ready", "ready")

    assert True
