"""Format readers for external source files.

This module resolves a source path to one format tag and parses the file
into a header plus ordered rows. Each reader holds at most one file handle
and releases it on every exit path.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
import csv
from enum import Enum
import json
from pathlib import Path
from typing import Any, Iterable, Sequence
from xml.etree import ElementTree
import zipfile

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from core.errors import (
    DataFileNotFoundError,
    StructuralMismatchError,
    UnsupportedFormatError,
)
from core.logging_config import get_logger
from core.types import Row, TableData
from ingest.fixed_schema_xml import parse_fixed_schema_xml

_LOGGER = get_logger(__name__)
_WORKBOOK_ERRORS = (
    InvalidFileException,
    zipfile.BadZipFile,
    KeyError,
    ValueError,
    ElementTree.ParseError,
    # lxml-backed openpyxl raises XMLSyntaxError, a SyntaxError subclass
    SyntaxError,
)


class FormatTag(str, Enum):
    """Supported source formats keyed by file extension."""

    DELIMITED = "csv"
    JSON_TABLE = "json"
    SPREADSHEET = "xlsx"
    FIXED_SCHEMA_XML = "xml"


def resolve_format_tag(source_path: Path) -> FormatTag:
    """Resolve a path suffix to its format tag.

    Args:
        source_path: Source file path.

    Returns:
        Matching format tag.

    Raises:
        UnsupportedFormatError: If the extension has no reader.
    """
    extension = source_path.suffix.lower().lstrip(".")
    try:
        return FormatTag(extension)
    except ValueError as error:
        raise UnsupportedFormatError(
            f"Unsupported file extension '{extension or '<none>'}' for {source_path}. "
            f"Supported extensions: {', '.join(tag.value for tag in FormatTag)}."
        ) from error


class FormatReader(ABC):
    """Parse one source file into a header and ordered rows."""

    format_tag: FormatTag

    def read_table(self, source_path: Path) -> TableData:
        """Read a source file.

        Args:
            source_path: Existing source file.

        Returns:
            Parsed header and rows.

        Raises:
            DataFileNotFoundError: If the file does not exist.
            StructuralMismatchError: If the content breaks the format's layout.
        """
        if not source_path.is_file():
            raise DataFileNotFoundError(
                f"Failed to read source at {source_path}: file does not exist. "
                "Place the file under the data root or fix the source manifest."
            )
        try:
            return self._read_existing(source_path)
        except UnicodeDecodeError as error:
            raise StructuralMismatchError(
                f"Failed to decode {source_path} as UTF-8: {error.reason}."
            ) from error
        except OSError as error:
            raise DataFileNotFoundError(
                f"Failed to open source at {source_path}: {error}."
            ) from error

    @abstractmethod
    def _read_existing(self, source_path: Path) -> TableData:
        """Parse a file already known to exist."""


class DelimitedReader(FormatReader):
    """Comma-separated text with a header row and optional quoting."""

    format_tag = FormatTag.DELIMITED

    def _read_existing(self, source_path: Path) -> TableData:
        with source_path.open(encoding="utf-8-sig", newline="") as handle:
            try:
                rows = [tuple(row) for row in csv.reader(handle) if row]
            except csv.Error as error:
                raise StructuralMismatchError(
                    f"Failed to parse CSV at {source_path}: {error}."
                ) from error
        if not rows:
            raise StructuralMismatchError(
                f"CSV source at {source_path} has no header row.", line_number=1
            )
        return TableData(header=rows[0], rows=tuple(rows[1:]))


class JsonTableReader(FormatReader):
    """JSON array whose first element is the header array."""

    format_tag = FormatTag.JSON_TABLE

    def _read_existing(self, source_path: Path) -> TableData:
        with source_path.open(encoding="utf-8") as handle:
            try:
                payload = json.load(handle)
            except json.JSONDecodeError as error:
                raise StructuralMismatchError(
                    f"Failed to parse JSON at {source_path}:{error.lineno}:{error.colno}: "
                    f"{error.msg}. Fix the JSON syntax and retry.",
                    line_number=error.lineno,
                ) from error
        if not isinstance(payload, list) or not payload:
            raise StructuralMismatchError(
                f"Invalid JSON table at {source_path}: expected a non-empty top-level array."
            )
        table_rows = [_json_row(source_path, index, item) for index, item in enumerate(payload)]
        return TableData(header=table_rows[0], rows=tuple(table_rows[1:]))


class SpreadsheetReader(FormatReader):
    """First sheet of an xlsx workbook, truncated at the first empty cell."""

    format_tag = FormatTag.SPREADSHEET

    def _read_existing(self, source_path: Path) -> TableData:
        try:
            workbook = load_workbook(source_path, read_only=True, data_only=True)
        except _WORKBOOK_ERRORS as error:
            raise StructuralMismatchError(
                f"Failed to open workbook at {source_path}: {error}."
            ) from error
        try:
            sheet = workbook.worksheets[0]
            return _read_sheet_rows(source_path, sheet.iter_rows(values_only=True))
        except _WORKBOOK_ERRORS as error:
            raise StructuralMismatchError(
                f"Failed to read the first sheet of {source_path}: {error}."
            ) from error
        finally:
            workbook.close()


class FixedSchemaXmlReader(FormatReader):
    """Rigid record-per-block XML, parsed line by line."""

    format_tag = FormatTag.FIXED_SCHEMA_XML

    def _read_existing(self, source_path: Path) -> TableData:
        with source_path.open(encoding="utf-8") as handle:
            result = parse_fixed_schema_xml(handle)
        if result.error is not None:
            raise result.error
        return TableData(header=result.header, rows=result.rows)


_READERS: dict[FormatTag, FormatReader] = {
    FormatTag.DELIMITED: DelimitedReader(),
    FormatTag.JSON_TABLE: JsonTableReader(),
    FormatTag.SPREADSHEET: SpreadsheetReader(),
    FormatTag.FIXED_SCHEMA_XML: FixedSchemaXmlReader(),
}


def reader_for(format_tag: FormatTag) -> FormatReader:
    """Return the reader registered for a format tag."""
    return _READERS[format_tag]


def read_source_table(source_path: Path) -> TableData:
    """Resolve a path's format and read it.

    Args:
        source_path: Source file path.

    Returns:
        Parsed header and rows.

    Raises:
        UnsupportedFormatError: If the extension has no reader.
        DataFileNotFoundError: If the file does not exist.
        StructuralMismatchError: If the content breaks the format's layout.
    """
    return reader_for(resolve_format_tag(source_path)).read_table(source_path)


def _json_row(source_path: Path, index: int, item: object) -> Row:
    if not isinstance(item, list):
        raise StructuralMismatchError(
            f"Invalid JSON table at {source_path}: element {index} must be an array, "
            f"got {type(item).__name__}.",
            line_number=index + 1,
        )
    return tuple(_json_cell_text(value) for value in item)


def _json_cell_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value, sort_keys=True)
    return str(value)


def _read_sheet_rows(source_path: Path, sheet_rows: Iterable[Sequence[object]]) -> TableData:
    """Collect header and data rows up to the first empty cell.

    Args:
        source_path: Workbook path for log context.
        sheet_rows: Cell values of the first sheet, row by row.

    Returns:
        Header and complete rows before the truncation sentinel.
    """
    row_iterator = iter(sheet_rows)
    header_cells = next(row_iterator, None)
    header = _header_from_cells(header_cells or ())
    if not header:
        raise StructuralMismatchError(
            f"Workbook at {source_path} has no header row on its first sheet.", line_number=1
        )
    rows: list[Row] = []
    for sheet_row_number, cells in enumerate(row_iterator, 2):
        values = tuple(_cell_text(cell) for cell in tuple(cells)[: len(header)])
        if len(values) < len(header) or "" in values:
            _LOGGER.info(
                "spreadsheet_truncated",
                source=str(source_path),
                sheet_row=sheet_row_number,
                records=len(rows),
            )
            return TableData(header=header, rows=tuple(rows), truncated_at=sheet_row_number)
        rows.append(values)
    return TableData(header=header, rows=tuple(rows))


def _header_from_cells(cells: Sequence[object]) -> tuple[str, ...]:
    names = [_cell_text(cell).replace("\r\n", " ").replace("\n", " ") for cell in cells]
    while names and names[-1] == "":
        names.pop()
    return tuple(names)


def _cell_text(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
