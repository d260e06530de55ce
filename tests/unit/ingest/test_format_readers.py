"""Unit tests for per-format source readers."""

from __future__ import annotations

from pathlib import Path
import zipfile

import pytest

from core.errors import DataFileNotFoundError, StructuralMismatchError, UnsupportedFormatError
from ingest.format_readers import (
    FormatReader,
    FormatTag,
    JsonTableReader,
    SpreadsheetReader,
    read_source_table,
    resolve_format_tag,
)
from tests.fixture_builders import WAGE_FIELDS, write_workbook
from tests.fixture_paths import fixture_path


@pytest.mark.parametrize(
    ("file_name", "expected_tag"),
    [
        ("counties.csv", FormatTag.DELIMITED),
        ("income.JSON", FormatTag.JSON_TABLE),
        ("Exports By State 2012.xlsx", FormatTag.SPREADSHEET),
        ("wages.xml", FormatTag.FIXED_SCHEMA_XML),
    ],
)
def test_resolve_format_tag_maps_extensions(file_name: str, expected_tag: FormatTag) -> None:
    """Extensions should resolve case-insensitively to one format tag."""
    assert resolve_format_tag(Path(file_name)) is expected_tag


def test_resolve_format_tag_rejects_unknown_extension() -> None:
    """Unknown extensions should fail as unsupported formats."""
    with pytest.raises(UnsupportedFormatError, match="tsv"):
        resolve_format_tag(Path("table.tsv"))

    assert resolve_format_tag(Path("table.csv")) is FormatTag.DELIMITED


def test_read_source_table_rejects_unsupported_file_before_reading() -> None:
    """Existing files with unsupported extensions should still be rejected."""
    with pytest.raises(UnsupportedFormatError):
        read_source_table(fixture_path("raw/tab_separated.tsv"))

    assert fixture_path("raw/tab_separated.tsv").exists()


def test_read_source_table_raises_for_missing_file(tmp_path: Path) -> None:
    """Readers should fail when the source file is missing."""
    missing_path = tmp_path / "does-not-exist.csv"

    with pytest.raises(DataFileNotFoundError):
        read_source_table(missing_path)

    assert missing_path.exists() is False


def test_delimited_reader_handles_quoted_fields() -> None:
    """CSV rows should keep quoted commas and escaped quotes inside one value."""
    table = read_source_table(fixture_path("sources/usa_county_list.csv"))

    assert (
        table.header == ("County", "State", "FIPS")
        and len(table.rows) == 4
        and table.rows[1] == ("Baldwin County, Gulf Coast", "Alabama", "01003")
        and table.rows[3][0] == 'Apache "Navajo Nation" County'
    )


def test_delimited_reader_keeps_header_only_file_empty() -> None:
    """A CSV with only a header should parse to zero rows."""
    table = read_source_table(fixture_path("raw/header_only.csv"))

    assert table.header == ("State", "County") and table.rows == ()


def test_delimited_reader_keeps_rows_of_empty_values(tmp_path: Path) -> None:
    """Rows of empty values are data; only fully blank lines are skipped."""
    csv_path = tmp_path / "sparse.csv"
    csv_path.write_text("State,County\nAlabama,Autauga\n,\n\n , \nAlaska,Nome\n", encoding="utf-8")

    table = read_source_table(csv_path)

    assert table.rows == (
        ("Alabama", "Autauga"),
        ("", ""),
        (" ", " "),
        ("Alaska", "Nome"),
    )


def test_delimited_reader_rejects_empty_file(tmp_path: Path) -> None:
    """A CSV without a header row should be a structural mismatch."""
    empty_path = tmp_path / "empty.csv"
    empty_path.write_text("\n\n", encoding="utf-8")

    with pytest.raises(StructuralMismatchError):
        read_source_table(empty_path)

    assert empty_path.exists()


def test_json_table_reader_renders_cells_as_text() -> None:
    """JSON rows should zip positionally with numbers and nulls rendered as text."""
    table = read_source_table(fixture_path("sources/Median_Income_County.json"))

    assert table.header == ("State", "County", "Median Income") and table.rows == (
        ("Alabama", "Autauga", "58786"),
        ("Alabama", "Baldwin", "55962"),
        ("Alaska", "Aleutians East", ""),
    )


def test_json_table_reader_rejects_object_payload() -> None:
    """A top-level JSON object should be a structural mismatch."""
    with pytest.raises(StructuralMismatchError):
        JsonTableReader().read_table(fixture_path("raw/object_table.json"))

    assert fixture_path("raw/object_table.json").exists()


def test_json_table_reader_reports_syntax_error_position(tmp_path: Path) -> None:
    """Malformed JSON should fail with the decoder line number."""
    bad_path = tmp_path / "bad.json"
    bad_path.write_text('[["a", "b"],\n ["1", ]\n]', encoding="utf-8")

    with pytest.raises(StructuralMismatchError) as error_info:
        read_source_table(bad_path)

    assert error_info.value.line_number == 2


def test_json_table_reader_rejects_non_array_row(tmp_path: Path) -> None:
    """Every JSON element after the header must be an array."""
    bad_path = tmp_path / "rows.json"
    bad_path.write_text('[["a"], {"a": "1"}]', encoding="utf-8")

    with pytest.raises(StructuralMismatchError, match="element 1"):
        read_source_table(bad_path)

    assert bad_path.exists()


def test_spreadsheet_reader_replaces_header_newlines(tmp_path: Path) -> None:
    """Header cell text should replace embedded newlines with one space."""
    workbook_path = write_workbook(
        tmp_path / "rates.xlsx",
        [["State", "Unemployment\nRate"], ["Alabama", 3.9], ["Alaska", 6]],
    )

    table = read_source_table(workbook_path)

    assert (
        table.header == ("State", "Unemployment Rate")
        and table.rows == (("Alabama", "3.9"), ("Alaska", "6"))
        and table.truncated_at is None
    )


def test_spreadsheet_reader_stops_at_first_empty_cell(tmp_path: Path) -> None:
    """A fifth data row with an empty leading cell should leave four rows."""
    rows: list[list[object]] = [["State", "County"]]
    rows.extend([f"State {index}", f"County {index}"] for index in range(1, 5))
    rows.append([None, "County 5"])
    rows.append(["State 6", "County 6"])
    workbook_path = write_workbook(tmp_path / "counties.xlsx", rows)

    table = SpreadsheetReader().read_table(workbook_path)

    assert len(table.rows) == 4 and table.truncated_at == 6


def test_spreadsheet_reader_stops_at_empty_trailing_cell(tmp_path: Path) -> None:
    """An empty cell anywhere within the header width should truncate."""
    workbook_path = write_workbook(
        tmp_path / "exports.xlsx",
        [["State", "Exports"], ["Alabama", 19601], ["Alaska", None], ["Arizona", 18400]],
    )

    table = read_source_table(workbook_path)

    assert table.rows == (("Alabama", "19601"),) and table.truncated_at == 3


def test_spreadsheet_reader_reads_first_sheet_only(tmp_path: Path) -> None:
    """Only the first worksheet should be read."""
    from openpyxl import Workbook

    workbook = Workbook()
    workbook.active.append(["State"])
    workbook.active.append(["Alabama"])
    extra_sheet = workbook.create_sheet("Other")
    extra_sheet.append(["Ignored"])
    extra_sheet.append(["Value"])
    workbook_path = tmp_path / "two_sheets.xlsx"
    workbook.save(workbook_path)

    table = read_source_table(workbook_path)

    assert table.header == ("State",) and table.rows == (("Alabama",),)


def test_spreadsheet_reader_rejects_corrupt_workbook(tmp_path: Path) -> None:
    """A file that is not a workbook should be a structural mismatch."""
    corrupt_path = tmp_path / "corrupt.xlsx"
    corrupt_path.write_text("not a zip archive", encoding="utf-8")

    with pytest.raises(StructuralMismatchError):
        read_source_table(corrupt_path)

    assert corrupt_path.exists()


def test_spreadsheet_reader_rejects_malformed_workbook_xml(tmp_path: Path) -> None:
    """A zip with broken workbook XML should be a structural mismatch."""
    broken_path = tmp_path / "broken.xlsx"
    with zipfile.ZipFile(broken_path, "w") as archive:
        archive.writestr("[Content_Types].xml", "<Types><not-closed>")

    with pytest.raises(StructuralMismatchError, match="broken.xlsx"):
        read_source_table(broken_path)

    assert broken_path.exists()


def test_fixed_schema_xml_reader_reads_record_blocks() -> None:
    """XML blocks should become rows keyed by element name."""
    table = read_source_table(fixture_path("sources/US_St_Cn_Table_Workforce_Wages.xml"))

    assert (
        table.header == WAGE_FIELDS
        and len(table.rows) == 3
        and table.rows[2][3] == "county-3"
    )


def test_format_reader_requires_a_parser() -> None:
    """The reader base cannot be used without a format-specific parser."""
    with pytest.raises(TypeError):
        FormatReader()  # type: ignore[abstract]

    assert issubclass(SpreadsheetReader, FormatReader)
