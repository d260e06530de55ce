"""Shared typed models.

This module defines the immutable data models passed between the
format readers, the record normalizer, and the dataset registry.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Literal

Record = dict[str, str]
Row = tuple[str, ...]
RowLengthPolicy = Literal["pad", "strict"]
DuplicateHeaderPolicy = Literal["error", "last_wins"]


@dataclass(frozen=True)
class TableData:
    """Raw tabular content parsed from one source file.

    Attributes:
        header: Ordered field names.
        rows: Ordered row values, positionally aligned with the header.
        truncated_at: One-based sheet row where an empty cell stopped reading.
    """

    header: tuple[str, ...]
    rows: tuple[Row, ...]
    truncated_at: int | None = None


@dataclass(frozen=True)
class DatasetSource:
    """One named external source file.

    Attributes:
        name: Canonical dataset name.
        file_name: File name or path relative to the data root.
        label: Human-readable label used in import reports.
    """

    name: str
    file_name: str
    label: str

    def resolve(self, data_root: Path) -> Path:
        """Return the absolute source path under a data root."""
        return data_root.expanduser() / Path(self.file_name).expanduser()


@dataclass(frozen=True)
class Dataset:
    """Named ordered collection of records from one source file.

    Attributes:
        name: Canonical dataset name.
        source_path: File the records were read from.
        header: Field names shared by every record, in order.
        records: Ordered records.
    """

    name: str
    source_path: Path
    header: tuple[str, ...]
    records: tuple[Record, ...] = field(repr=False)

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[Record]:
        return iter(self.records)

    def __getitem__(self, index: int) -> Record:
        return self.records[index]


@dataclass(frozen=True)
class AttributeMatch:
    """One attribute value found by a dataset query."""

    value: str
    row_index: int
