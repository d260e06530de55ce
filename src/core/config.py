"""Runtime configuration model for DataEngine.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
from typing import cast

from core.constants import (
    DEFAULT_DATA_ROOT,
    DEFAULT_DUPLICATE_HEADER_POLICY,
    DEFAULT_ROW_LENGTH_POLICY,
    SUPPORTED_DUPLICATE_HEADER_POLICIES,
    SUPPORTED_ROW_LENGTH_POLICIES,
)
from core.errors import DataEngineConfigError
from core.types import DuplicateHeaderPolicy, RowLengthPolicy

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


@dataclass(frozen=True)
class DataEngineConfig:
    """Validated runtime configuration.

    Attributes:
        data_root: Directory holding the source data files.
        echo_import: Whether the CLI prints per-file import timings.
        row_length_policy: How short rows are zipped onto a header.
        duplicate_header_policy: How repeated header names are handled.
        source_manifest: Optional YAML manifest overriding source file names.
    """

    data_root: Path
    echo_import: bool
    row_length_policy: RowLengthPolicy
    duplicate_header_policy: DuplicateHeaderPolicy
    source_manifest: Path | None

    @classmethod
    def from_env(cls) -> "DataEngineConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            DataEngineConfigError: If environment values are invalid.
        """
        data_root_value = os.getenv("DATAENGINE_DATA_ROOT", str(DEFAULT_DATA_ROOT))
        echo_import = _parse_bool(
            "DATAENGINE_ECHO_IMPORT", os.getenv("DATAENGINE_ECHO_IMPORT", "true")
        )
        row_length_policy = _parse_choice(
            "DATAENGINE_ROW_LENGTH_POLICY",
            os.getenv("DATAENGINE_ROW_LENGTH_POLICY", DEFAULT_ROW_LENGTH_POLICY),
            SUPPORTED_ROW_LENGTH_POLICIES,
        )
        duplicate_header_policy = _parse_choice(
            "DATAENGINE_DUPLICATE_HEADERS",
            os.getenv("DATAENGINE_DUPLICATE_HEADERS", DEFAULT_DUPLICATE_HEADER_POLICY),
            SUPPORTED_DUPLICATE_HEADER_POLICIES,
        )
        manifest_value = os.getenv("DATAENGINE_SOURCE_MANIFEST")
        return cls(
            data_root=Path(data_root_value).expanduser().resolve(),
            echo_import=echo_import,
            row_length_policy=cast(RowLengthPolicy, row_length_policy),
            duplicate_header_policy=cast(DuplicateHeaderPolicy, duplicate_header_policy),
            source_manifest=Path(manifest_value).expanduser().resolve() if manifest_value else None,
        )


def _parse_bool(variable: str, raw_value: str) -> bool:
    """Parse a boolean environment value.

    Args:
        variable: Environment variable name for error context.
        raw_value: Raw string from environment.

    Returns:
        Parsed boolean.

    Raises:
        DataEngineConfigError: If value is not a recognised boolean.
    """
    normalized = raw_value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise DataEngineConfigError(
        f"Invalid {variable} value: expected one of "
        f"{', '.join(_TRUE_VALUES + _FALSE_VALUES)}, got '{raw_value}'."
    )


def _parse_choice(variable: str, raw_value: str, choices: tuple[str, ...]) -> str:
    """Parse an enumerated environment value.

    Args:
        variable: Environment variable name for error context.
        raw_value: Raw string from environment.
        choices: Accepted values.

    Returns:
        Normalized accepted value.

    Raises:
        DataEngineConfigError: If value is not one of the choices.
    """
    normalized = raw_value.strip().lower()
    if normalized not in choices:
        raise DataEngineConfigError(
            f"Invalid {variable} value: expected one of {', '.join(choices)}, "
            f"got '{raw_value}'. Set {variable} to a supported value."
        )
    return normalized
