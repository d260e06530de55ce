"""Unit tests for the line-oriented fixed-schema XML parser."""

from __future__ import annotations

from pathlib import Path

import pytest

from core.errors import StructuralMismatchError
from core.types import TableData
from ingest.fixed_schema_xml import parse_fixed_schema_xml
from ingest.format_readers import FixedSchemaXmlReader
from ingest.record_normalizer import normalize_table
from tests.fixture_builders import WAGE_FIELDS, render_wage_xml, wage_record


def test_parse_returns_every_well_formed_record() -> None:
    """A well-formed document should yield one record per block."""
    text = render_wage_xml([wage_record(1), wage_record(2)])

    result = parse_fixed_schema_xml(text.splitlines())

    assert (
        result.error is None
        and result.header == WAGE_FIELDS
        and [record["state"] for record in result.records] == ["state-1", "state-2"]
        and list(result.records[0]) == list(WAGE_FIELDS)
    )


def test_parse_accepts_blocks_without_separator_lines() -> None:
    """Blank separators between blocks should be optional."""
    text = render_wage_xml([wage_record(1), wage_record(2)]).replace("\n\n", "\n")

    result = parse_fixed_schema_xml(text.splitlines())

    assert result.error is None and len(result.records) == 2


def test_parse_detects_short_third_block_with_partial_records() -> None:
    """A third block with 18 attributes should keep the first two records."""
    text = render_wage_xml([wage_record(1), wage_record(2), wage_record(3)[:18], wage_record(4)])

    result = parse_fixed_schema_xml(text.splitlines())

    assert (
        isinstance(result.error, StructuralMismatchError)
        and len(result.records) == 2
        and len(result.error.partial_records) == 2
        and "</record>" in str(result.error)
    )


def test_parse_rejects_line_that_does_not_open_a_record() -> None:
    """Unexpected content where a block should open is a mismatch."""
    text = render_wage_xml([wage_record(1)]).replace(
        "</state-county-wage-data>", "<summary>1</summary>\n</state-county-wage-data>"
    )

    result = parse_fixed_schema_xml(text.splitlines())

    assert (
        result.error is not None
        and len(result.records) == 1
        and result.error.line_number == 25
    )


def test_parse_rejects_block_with_extra_attribute() -> None:
    """A twentieth attribute line where the close tag belongs is a mismatch."""
    fields = wage_record(1) + [("extra", "value")]
    text = render_wage_xml([wage_record(0), fields])

    result = parse_fixed_schema_xml(text.splitlines())

    assert result.error is not None and len(result.records) == 1 and "'</record>'" in str(
        result.error
    )


def test_parse_rejects_missing_footer() -> None:
    """End of file before the footer is a mismatch with records kept."""
    text = render_wage_xml([wage_record(1)], footer=False)

    result = parse_fixed_schema_xml(text.splitlines())

    assert result.error is not None and "footer" in str(result.error) and len(result.records) == 1


def test_parse_rejects_renamed_field() -> None:
    """A block whose element names drift from the first block is a mismatch."""
    drifted = [
        ("state_code", value) if name == "state" else (name, value)
        for name, value in wage_record(2)
    ]
    text = render_wage_xml([wage_record(1), drifted])

    result = parse_fixed_schema_xml(text.splitlines())

    assert result.error is not None and len(result.records) == 1


def test_parse_unescapes_entities_and_strips_text() -> None:
    """Element text should be unescaped and stripped."""
    fields = [
        ("area_title", " Autauga &amp; Co ") if name == "area_title" else (name, value)
        for name, value in wage_record(1)
    ]
    text = render_wage_xml([fields])

    result = parse_fixed_schema_xml(text.splitlines())

    assert result.error is None and result.records[0]["area_title"] == "Autauga & Co"


def test_parse_accepts_empty_elements() -> None:
    """Self-closing attribute elements should become empty values."""
    text = render_wage_xml([wage_record(1)]).replace("<qtr>qtr-1</qtr>", "<qtr/>")

    result = parse_fixed_schema_xml(text.splitlines())

    assert result.error is None and result.records[0]["qtr"] == ""


def test_parse_accepts_elements_with_xml_attributes() -> None:
    """Attribute elements may carry XML attributes of their own."""
    text = render_wage_xml([wage_record(1)]).replace(
        "<qtr>qtr-1</qtr>", '<qtr unit="q">qtr-1</qtr>'
    ).replace("<year>year-1</year>", '<year format="yyyy" />')

    result = parse_fixed_schema_xml(text.splitlines())

    assert (
        result.error is None
        and result.records[0]["qtr"] == "qtr-1"
        and result.records[0]["year"] == ""
    )


def test_parse_keeps_repeated_element_names_for_header_policy() -> None:
    """Repeated element names should reach the duplicate header policy."""
    fields = [
        ("state", "Ohio") if name == "county" else (name, value)
        for name, value in wage_record(1)
    ]
    result = parse_fixed_schema_xml(render_wage_xml([fields]).splitlines())
    table = TableData(header=result.header, rows=result.rows)

    with pytest.raises(StructuralMismatchError, match="state"):
        normalize_table(table)
    records = normalize_table(table, duplicate_policy="last_wins")

    assert table.header.count("state") == 2 and records[0]["state"] == "Ohio"


def test_reader_raises_mismatch_with_partial_records(tmp_path: Path) -> None:
    """The XML reader should raise the mismatch carrying parsed records."""
    xml_path = tmp_path / "wages.xml"
    xml_path.write_text(
        render_wage_xml([wage_record(1), wage_record(2), wage_record(3)[:18]]),
        encoding="utf-8",
    )

    with pytest.raises(StructuralMismatchError) as error_info:
        FixedSchemaXmlReader().read_table(xml_path)

    assert [record["county"] for record in error_info.value.partial_records] == [
        "county-1",
        "county-2",
    ]
