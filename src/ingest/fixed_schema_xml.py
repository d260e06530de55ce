"""Line-oriented parser for fixed-schema record XML.

The wage XML layout is rigid: two leading lines, then ``<record>`` blocks
of exactly nineteen single-element attribute lines, then a literal footer.
Blocks are validated line by line and converted one at a time, so a
schema drift stops parsing with every earlier record still available.
"""

from __future__ import annotations

from dataclasses import dataclass
import re
from typing import Iterable, Iterator
from xml.etree import ElementTree

from core.constants import (
    XML_ATTRIBUTES_PER_RECORD,
    XML_FOOTER_LINE,
    XML_RECORD_CLOSE_TAG,
    XML_RECORD_OPEN_TAG,
    XML_SKIPPED_LEADING_LINES,
)
from core.errors import StructuralMismatchError
from core.types import Record, Row

_ATTRIBUTE_LINE_PATTERN = re.compile(
    r"^<([A-Za-z_][\w.\-]*)(?:\s+[^<>]*?)?\s*(?:/>|>[^<]*</\1\s*>)$"
)


@dataclass(frozen=True)
class FixedSchemaParseResult:
    """Records parsed from a fixed-schema XML body.

    Attributes:
        header: Element names of the first record, in document order.
            Repeated names are kept for the duplicate header policy.
        rows: Element texts of each well-formed record, in header order.
        records: Well-formed records parsed before any mismatch.
        error: Structural mismatch that stopped parsing, if any.
    """

    header: tuple[str, ...]
    rows: tuple[Row, ...]
    records: tuple[Record, ...]
    error: StructuralMismatchError | None = None


class _BlockError(ValueError):
    """Raised when a record block cannot be converted."""


class _NumberedLines:
    """Iterator over stripped lines that tracks one-based line numbers."""

    def __init__(self, lines: Iterable[str]) -> None:
        self._lines: Iterator[str] = iter(lines)
        self.line_number = 0

    def next_line(self) -> str | None:
        line = next(self._lines, None)
        if line is None:
            return None
        self.line_number += 1
        return line.strip()

    def next_non_blank_line(self) -> str | None:
        line = self.next_line()
        while line == "":
            line = self.next_line()
        return line


def parse_fixed_schema_xml(
    lines: Iterable[str],
    attributes_per_record: int = XML_ATTRIBUTES_PER_RECORD,
) -> FixedSchemaParseResult:
    """Parse fixed-schema XML lines into records.

    Args:
        lines: Raw file lines, including the two leading lines.
        attributes_per_record: Attribute lines expected inside each block.

    Returns:
        Parsed records and the mismatch that stopped parsing, if any.
    """
    reader = _NumberedLines(lines)
    rows: list[Row] = []
    records: list[Record] = []
    header: tuple[str, ...] = ()
    for _ in range(XML_SKIPPED_LEADING_LINES):
        if reader.next_line() is None:
            return _failed(header, rows, records, reader, "file ended inside the leading lines")
    while True:
        line = reader.next_non_blank_line()
        if line is None:
            return _failed(
                header, rows, records, reader, f"file ended before footer {XML_FOOTER_LINE!r}"
            )
        if line == XML_FOOTER_LINE:
            return FixedSchemaParseResult(header=header, rows=tuple(rows), records=tuple(records))
        if line != XML_RECORD_OPEN_TAG:
            return _failed(
                header, rows, records, reader, f"expected {XML_RECORD_OPEN_TAG!r}, got {line!r}"
            )
        block_lines = [line]
        for _ in range(attributes_per_record):
            attribute_line = reader.next_line()
            if attribute_line is None:
                return _failed(header, rows, records, reader, "file ended inside a record block")
            if not _ATTRIBUTE_LINE_PATTERN.match(attribute_line):
                return _failed(
                    header,
                    rows,
                    records,
                    reader,
                    f"expected attribute line {len(block_lines)} of {attributes_per_record}, "
                    f"got {attribute_line!r}",
                )
            block_lines.append(attribute_line)
        close_line = reader.next_line()
        if close_line != XML_RECORD_CLOSE_TAG:
            return _failed(
                header,
                rows,
                records,
                reader,
                f"expected {XML_RECORD_CLOSE_TAG!r} after {attributes_per_record} attribute "
                f"lines, got {close_line!r}",
            )
        block_lines.append(close_line)
        try:
            names, values = _convert_block("".join(block_lines))
        except _BlockError as error:
            return _failed(header, rows, records, reader, str(error))
        if not header:
            header = names
        elif names != header:
            return _failed(
                header, rows, records, reader, f"record fields {names!r} differ from {header!r}"
            )
        rows.append(values)
        records.append(dict(zip(names, values)))


def _convert_block(block_xml: str) -> tuple[tuple[str, ...], Row]:
    """Convert one ``<record>`` block into its element names and texts."""
    try:
        element = ElementTree.fromstring(block_xml)
    except ElementTree.ParseError as error:
        raise _BlockError(f"record block is not valid XML ({error})") from error
    names = tuple(child.tag for child in element)
    values = tuple((child.text or "").strip() for child in element)
    return names, values


def _failed(
    header: tuple[str, ...],
    rows: list[Row],
    records: list[Record],
    reader: _NumberedLines,
    reason: str,
) -> FixedSchemaParseResult:
    error = StructuralMismatchError(
        f"Fixed-schema XML mismatch at line {reader.line_number}: {reason}. "
        f"{len(records)} records were parsed before the mismatch.",
        partial_records=records,
        line_number=reader.line_number,
    )
    return FixedSchemaParseResult(
        header=header, rows=tuple(rows), records=tuple(records), error=error
    )
