"""Pytest configuration and shared fixtures for repository test runs."""

from __future__ import annotations

from pathlib import Path

import pytest

from store.dataset_registry import DatasetRegistry
from tests.fixture_builders import build_data_root, make_config


@pytest.fixture
def data_root(tmp_path: Path) -> Path:
    """Directory holding all seven valid source files."""
    return build_data_root(tmp_path / "data")


@pytest.fixture
def loaded_registry(data_root: Path) -> DatasetRegistry:
    """Registry that has imported the valid source files."""
    registry = DatasetRegistry(make_config(data_root))
    registry.load_all()
    return registry
