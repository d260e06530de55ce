"""Public SDK surface for DataEngine.

This module provides a stable import path for library users.
It re-exports the registry, typed models, readers, and errors.
"""

from __future__ import annotations

from core.config import DataEngineConfig
from core.errors import (
    DataEngineError,
    DataFileNotFoundError,
    NotInitializedError,
    RowLengthMismatchError,
    StructuralMismatchError,
    UnknownAttributeError,
    UnknownDatasetNameError,
    UnsupportedFormatError,
)
from core.source_manifest import default_sources, load_source_manifest
from core.types import AttributeMatch, Dataset, DatasetSource, Record, TableData
from ingest.format_readers import FormatTag, read_source_table, resolve_format_tag
from ingest.import_report import ImportReport, ImportTiming
from ingest.record_normalizer import build_record, normalize_table
from store.dataset_query import list_dataset_headers, query_attribute, query_attribute_all
from store.dataset_registry import DatasetRegistry

__all__ = [
    "AttributeMatch",
    "DataEngineConfig",
    "DataEngineError",
    "DataFileNotFoundError",
    "Dataset",
    "DatasetRegistry",
    "DatasetSource",
    "FormatTag",
    "ImportReport",
    "ImportTiming",
    "NotInitializedError",
    "Record",
    "RowLengthMismatchError",
    "StructuralMismatchError",
    "TableData",
    "UnknownAttributeError",
    "UnknownDatasetNameError",
    "UnsupportedFormatError",
    "build_record",
    "default_sources",
    "list_dataset_headers",
    "load_source_manifest",
    "normalize_table",
    "query_attribute",
    "query_attribute_all",
    "read_source_table",
    "resolve_format_tag",
]
