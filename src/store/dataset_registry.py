"""Readiness-gated registry of imported datasets.

This module loads the seven canonical datasets in a fixed order and
publishes them only after every file imports successfully. Any single
failure leaves the registry permanently failed with nothing visible.
"""

from __future__ import annotations

import sys
import threading
from typing import Sequence, TextIO

from core.config import DataEngineConfig
from core.constants import DATASET_COLLECTION_ORDER, DEFAULT_SOURCE_FILE_NAMES
from core.errors import (
    DataEngineConfigError,
    NotInitializedError,
    StructuralMismatchError,
    UnknownDatasetNameError,
)
from core.logging_config import get_logger
from core.source_manifest import default_sources, load_source_manifest
from core.types import Dataset, DatasetSource
from ingest.format_readers import read_source_table
from ingest.import_report import ImportReport, ImportReportBuilder
from ingest.record_normalizer import normalize_table
from store.registry_state import RegistryState, validate_transition

_LOGGER = get_logger(__name__)


class DatasetRegistry:
    """Process-scoped context holding the imported datasets."""

    def __init__(
        self,
        config: DataEngineConfig | None = None,
        sources: Sequence[DatasetSource] | None = None,
    ) -> None:
        """Create an unready registry.

        Args:
            config: Optional runtime configuration.
            sources: Optional explicit sources; defaults to the configured
                manifest or the built-in file names.

        Raises:
            DataEngineConfigError: If sources do not cover the canonical names.
        """
        self._config = config or DataEngineConfig.from_env()
        self._sources = tuple(sources) if sources is not None else _configured_sources(self._config)
        _validate_sources(self._sources)
        self._lock = threading.Lock()
        self._state: RegistryState = "not_ready"
        self._failure: Exception | None = None
        self._datasets: tuple[Dataset, ...] = ()
        self._datasets_by_name: dict[str, Dataset] = {}
        self._import_report: ImportReport | None = None

    @property
    def state(self) -> RegistryState:
        """Return the current lifecycle state."""
        return self._state

    @property
    def is_ready(self) -> bool:
        """Return whether queries are allowed."""
        return self._state == "ready"

    @property
    def sources(self) -> tuple[DatasetSource, ...]:
        """Return the sources in load order."""
        return self._sources

    @property
    def import_report(self) -> ImportReport | None:
        """Return the import report of a successful load, if any."""
        return self._import_report

    def load_all(self) -> ImportReport:
        """Import every source and open the readiness gate.

        Returns:
            Per-file record counts and timings.

        Raises:
            RegistryStateError: If a load already started.
            DataEngineIngestError: If any source fails; the registry is
                then permanently failed.
        """
        self._transition("loading")
        builder = ImportReportBuilder()
        loaded: dict[str, Dataset] = {}
        current_source: DatasetSource | None = None
        try:
            for current_source in self._sources:
                builder.start(current_source)
                dataset = self._load_dataset(current_source)
                loaded[current_source.name] = dataset
                builder.finish(current_source, len(dataset))
            report = builder.build()
        except Exception as error:
            _LOGGER.error(
                "datasets_import_failed",
                dataset=current_source.name if current_source else None,
                error=str(error),
                error_type=type(error).__name__,
            )
            with self._lock:
                self._failure = error
            self._transition("failed")
            raise
        with self._lock:
            self._datasets = tuple(loaded[name] for name in DATASET_COLLECTION_ORDER)
            self._datasets_by_name = {dataset.name: dataset for dataset in self._datasets}
            self._import_report = report
        self._transition("ready")
        return report

    def get_dataset_names(self) -> tuple[str, ...]:
        """Return the canonical dataset names, sorted ascending."""
        self._require_ready()
        return tuple(sorted(self._datasets_by_name))

    def has_dataset_name(self, name: str) -> bool:
        """Return whether a dataset name is registered."""
        self._require_ready()
        return name in self._datasets_by_name

    def get_dataset_by_name(self, name: str) -> Dataset:
        """Look up one dataset.

        Args:
            name: Canonical dataset name.

        Returns:
            The dataset.

        Raises:
            NotInitializedError: If the registry is not ready.
            UnknownDatasetNameError: If the name is not registered.
        """
        self._require_ready()
        dataset = self._datasets_by_name.get(name)
        if dataset is None:
            raise UnknownDatasetNameError(
                f"'{name}' is not a valid dataset name. "
                f"Known datasets: {', '.join(sorted(self._datasets_by_name))}."
            )
        return dataset

    def get_all_datasets(self) -> tuple[Dataset, ...]:
        """Return every dataset in fixed collection order."""
        self._require_ready()
        return self._datasets

    def format_dump_lines(self, limit: int) -> list[str]:
        """Render up to ``limit`` records of each dataset, sorted by name.

        Args:
            limit: Maximum records per dataset; larger values clamp.

        Returns:
            Output lines without trailing newlines.

        Raises:
            ValueError: If limit is negative.
        """
        self._require_ready()
        if limit < 0:
            raise ValueError(f"Dump limit must be >= 0, got {limit}.")
        lines: list[str] = []
        for name in self.get_dataset_names():
            dataset = self._datasets_by_name[name]
            lines.append(f"Data Set: {name}")
            for record in dataset.records[: min(limit, len(dataset))]:
                lines.append(
                    "".join(f"  key:'{key}' => val:'{value}' " for key, value in record.items())
                )
            lines.append("")
        return lines

    def dump_datasets(self, limit: int, stream: TextIO | None = None) -> None:
        """Write up to ``limit`` records of each dataset to a stream.

        Args:
            limit: Maximum records per dataset; larger values clamp.
            stream: Output stream, standard output by default.
        """
        output = stream if stream is not None else sys.stdout
        for line in self.format_dump_lines(limit):
            output.write(line + "\n")

    def _load_dataset(self, source: DatasetSource) -> Dataset:
        source_path = source.resolve(self._config.data_root)
        table = read_source_table(source_path)
        records = normalize_table(
            table,
            policy=self._config.row_length_policy,
            duplicate_policy=self._config.duplicate_header_policy,
        )
        if not records:
            raise StructuralMismatchError(
                f"Source {source_path} for dataset {source.name} produced no records. "
                "Each dataset must contain at least one data row."
            )
        return Dataset(
            name=source.name,
            source_path=source_path,
            header=tuple(dict.fromkeys(table.header)),
            records=records,
        )

    def _transition(self, next_state: RegistryState) -> None:
        with self._lock:
            validate_transition(self._state, next_state)
            self._state = next_state

    def _require_ready(self) -> None:
        if self._state == "ready":
            return
        if self._state == "failed":
            raise NotInitializedError(
                "Dataset registry failed to import data from external files: "
                f"{self._failure}. Fix the source and rerun the import."
            )
        raise NotInitializedError(
            "Dataset registry is not initialized with imported data from external files. "
            "Call load_all() first."
        )


def _configured_sources(config: DataEngineConfig) -> tuple[DatasetSource, ...]:
    if config.source_manifest is not None:
        return load_source_manifest(config.source_manifest)
    return default_sources()


def _validate_sources(sources: Sequence[DatasetSource]) -> None:
    names = [source.name for source in sources]
    if sorted(names) != sorted(DEFAULT_SOURCE_FILE_NAMES):
        raise DataEngineConfigError(
            f"Dataset sources must name each canonical dataset exactly once, got "
            f"{', '.join(names) or 'none'}. "
            f"Expected: {', '.join(sorted(DEFAULT_SOURCE_FILE_NAMES))}."
        )
