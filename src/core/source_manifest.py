"""Source manifest parsing.

This module loads the optional YAML manifest that overrides where each
canonical dataset is read from, and builds the fixed-order source list.
"""

from __future__ import annotations

from pathlib import Path
from typing import Mapping, cast

import yaml

from core.constants import (
    DATASET_LOAD_ORDER,
    DEFAULT_SOURCE_FILE_NAMES,
    SOURCE_LABELS,
    SOURCE_MANIFEST_VERSION,
)
from core.errors import DataEngineConfigError
from core.types import DatasetSource

_ALLOWED_ROOT_KEYS = ("version", "sources")


def default_sources() -> tuple[DatasetSource, ...]:
    """Return the seven default sources in load order."""
    return build_sources({})


def build_sources(overrides: Mapping[str, str]) -> tuple[DatasetSource, ...]:
    """Build the load-ordered source list with file name overrides.

    Args:
        overrides: Canonical dataset name to file name.

    Returns:
        Sources in fixed load order.

    Raises:
        DataEngineConfigError: If an override names an unknown dataset.
    """
    unknown_names = sorted(set(overrides) - set(DEFAULT_SOURCE_FILE_NAMES))
    if unknown_names:
        raise DataEngineConfigError(
            f"Unknown dataset names in source overrides: {', '.join(unknown_names)}. "
            f"Supported names: {', '.join(sorted(DEFAULT_SOURCE_FILE_NAMES))}."
        )
    return tuple(
        DatasetSource(
            name=name,
            file_name=overrides.get(name, DEFAULT_SOURCE_FILE_NAMES[name]),
            label=SOURCE_LABELS[name],
        )
        for name in DATASET_LOAD_ORDER
    )


def load_source_manifest(manifest_path: Path) -> tuple[DatasetSource, ...]:
    """Load and validate a YAML source manifest from disk.

    Args:
        manifest_path: File path to YAML manifest.

    Returns:
        Sources in fixed load order with manifest overrides applied.

    Raises:
        DataEngineConfigError: If file is missing, invalid, or fails schema checks.
    """
    payload = _load_yaml_payload(manifest_path)
    if not isinstance(payload, Mapping):
        raise DataEngineConfigError(
            f"Invalid source manifest at {manifest_path}: expected a mapping at the root."
        )
    root_mapping = cast(Mapping[str, object], payload)
    _validate_root_keys(root_mapping, manifest_path)
    _validate_version(root_mapping.get("version"), manifest_path)
    overrides = _parse_sources(root_mapping.get("sources"), manifest_path)
    return build_sources(overrides)


def _load_yaml_payload(manifest_path: Path) -> object:
    manifest_file = manifest_path.expanduser().resolve()
    if not manifest_file.exists():
        raise DataEngineConfigError(
            f"Source manifest does not exist at {manifest_file}. Provide a valid YAML file path."
        )
    try:
        payload = cast(object, yaml.safe_load(manifest_file.read_text(encoding="utf-8")))
    except OSError as error:
        raise DataEngineConfigError(
            f"Failed to read source manifest at {manifest_file}: {error}. "
            "Check file permissions and retry."
        ) from error
    except yaml.YAMLError as error:
        raise DataEngineConfigError(
            f"Failed to parse YAML source manifest at {manifest_file}: {error}. "
            "Fix YAML syntax and retry."
        ) from error
    if payload is None:
        raise DataEngineConfigError(
            f"Source manifest at {manifest_file} is empty. Define 'version' and 'sources'."
        )
    return payload


def _validate_root_keys(root_mapping: Mapping[str, object], manifest_path: Path) -> None:
    unknown_keys = sorted(str(key) for key in root_mapping if key not in _ALLOWED_ROOT_KEYS)
    if unknown_keys:
        raise DataEngineConfigError(
            f"Invalid source manifest at {manifest_path}: unsupported keys "
            f"{', '.join(unknown_keys)}. Allowed keys: {', '.join(_ALLOWED_ROOT_KEYS)}."
        )


def _validate_version(raw_version: object, manifest_path: Path) -> None:
    if raw_version != SOURCE_MANIFEST_VERSION or isinstance(raw_version, bool):
        raise DataEngineConfigError(
            f"Invalid source manifest at {manifest_path}: expected version "
            f"{SOURCE_MANIFEST_VERSION}, got {raw_version!r}."
        )


def _parse_sources(raw_sources: object, manifest_path: Path) -> dict[str, str]:
    if raw_sources is None:
        return {}
    if not isinstance(raw_sources, Mapping):
        raise DataEngineConfigError(
            f"Invalid source manifest at {manifest_path}: 'sources' must map dataset names "
            "to file names."
        )
    overrides: dict[str, str] = {}
    for name, file_name in raw_sources.items():
        if not isinstance(name, str) or not isinstance(file_name, str) or not file_name.strip():
            raise DataEngineConfigError(
                f"Invalid source manifest at {manifest_path}: entry {name!r} must be a "
                "non-empty file name string."
            )
        overrides[name] = file_name.strip()
    return overrides
