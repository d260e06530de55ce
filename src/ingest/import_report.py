"""Per-file import telemetry.

This module records record counts and elapsed time for each imported
source file and renders the classic console import summary.
"""

from __future__ import annotations

from dataclasses import dataclass
import time

from core.logging_config import get_logger
from core.types import DatasetSource

_LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class ImportTiming:
    """Import outcome for one source file."""

    name: str
    label: str
    file_name: str
    record_count: int
    elapsed_ms: int


@dataclass(frozen=True)
class ImportReport:
    """Import outcome for a full load, in load order."""

    entries: tuple[ImportTiming, ...]

    @property
    def total_records(self) -> int:
        return sum(entry.record_count for entry in self.entries)

    @property
    def total_elapsed_ms(self) -> int:
        return sum(entry.elapsed_ms for entry in self.entries)

    def format_lines(self) -> list[str]:
        """Render the report in the console import layout."""
        lines = ["Starting Import Data Sets from Files.", ""]
        for entry in self.entries:
            lines.append(
                f"  Import {entry.label}...".ljust(42)
                + f"Done. {entry.record_count:6d}-records loaded. "
                f"Time: {entry.elapsed_ms:6d}-mSec."
            )
        lines.extend(
            [
                "",
                "Finished Import Data Sets from Files.",
                f"Total {self.total_records}-records imported in {self.total_elapsed_ms}-mSec.",
                "",
            ]
        )
        return lines


class ImportReportBuilder:
    """Accumulate per-file timings while a load runs."""

    def __init__(self) -> None:
        self._entries: list[ImportTiming] = []
        self._started_at: float | None = None

    def start(self, source: DatasetSource) -> None:
        """Mark the start of one source import."""
        self._started_at = time.perf_counter()
        _LOGGER.debug("dataset_import_started", dataset=source.name, file=source.file_name)

    def finish(self, source: DatasetSource, record_count: int) -> ImportTiming:
        """Record the completion of the source started last."""
        started_at = self._started_at if self._started_at is not None else time.perf_counter()
        elapsed_ms = int(round((time.perf_counter() - started_at) * 1000))
        timing = ImportTiming(
            name=source.name,
            label=source.label,
            file_name=source.file_name,
            record_count=record_count,
            elapsed_ms=elapsed_ms,
        )
        self._entries.append(timing)
        self._started_at = None
        _LOGGER.info(
            "dataset_imported",
            dataset=source.name,
            records=record_count,
            elapsed_ms=elapsed_ms,
        )
        return timing

    def build(self) -> ImportReport:
        """Freeze the collected timings into a report."""
        report = ImportReport(entries=tuple(self._entries))
        _LOGGER.info(
            "datasets_import_completed",
            datasets=len(report.entries),
            records=report.total_records,
            elapsed_ms=report.total_elapsed_ms,
        )
        return report
