"""DataEngine exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Load-time failures and query-time failures have separate base classes.
"""

from __future__ import annotations

from typing import Mapping, Sequence


class DataEngineError(Exception):
    """Base exception for all DataEngine failures."""


class DataEngineConfigError(DataEngineError):
    """Raised for invalid runtime configuration or source manifests."""


class DataEngineIngestError(DataEngineError):
    """Raised for source parsing and import failures."""


class DataFileNotFoundError(DataEngineIngestError):
    """Raised when a source file does not exist."""


class UnsupportedFormatError(DataEngineIngestError):
    """Raised when a source file extension has no reader."""


class StructuralMismatchError(DataEngineIngestError):
    """Raised when a source file breaks its format's structure.

    Attributes:
        partial_records: Records parsed before the mismatch was found.
        line_number: One-based line or row number of the mismatch, if known.
    """

    def __init__(
        self,
        message: str,
        partial_records: Sequence[Mapping[str, str]] = (),
        line_number: int | None = None,
    ) -> None:
        super().__init__(message)
        self.partial_records = tuple(partial_records)
        self.line_number = line_number


class RowLengthMismatchError(DataEngineIngestError):
    """Raised when a row cannot be zipped onto its header."""


class DataEngineRegistryError(DataEngineError):
    """Raised for dataset registry lookup and lifecycle failures."""


class UnknownDatasetNameError(DataEngineRegistryError):
    """Raised when a dataset name is not registered."""


class NotInitializedError(DataEngineRegistryError):
    """Raised when the registry is queried before a successful load."""


class RegistryStateError(DataEngineRegistryError):
    """Raised for an illegal registry lifecycle transition."""


class UnknownAttributeError(DataEngineError):
    """Raised when a query names a field the dataset does not have."""
