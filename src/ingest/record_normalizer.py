"""Header and row zipping into uniform records.

This module turns reader output into ordered field-name to value records.
Row length and duplicate header handling follow configurable policies.
"""

from __future__ import annotations

from collections import Counter
from typing import Sequence

from core.errors import RowLengthMismatchError, StructuralMismatchError
from core.logging_config import get_logger
from core.types import DuplicateHeaderPolicy, Record, RowLengthPolicy, TableData

_LOGGER = get_logger(__name__)


def build_record(
    header: Sequence[str],
    values: Sequence[str],
    policy: RowLengthPolicy = "pad",
    row_number: int | None = None,
) -> Record:
    """Zip one row onto a header, preserving header order.

    Args:
        header: Ordered field names.
        values: Ordered row values.
        policy: ``pad`` fills short rows with empty values; ``strict`` rejects them.
        row_number: Optional one-based row number for error context.

    Returns:
        Ordered record.

    Raises:
        RowLengthMismatchError: If the row is longer than the header, or
            shorter under the strict policy.
    """
    if len(values) > len(header) or (policy == "strict" and len(values) != len(header)):
        raise RowLengthMismatchError(
            f"Row {row_number if row_number is not None else '?'} has {len(values)} values "
            f"but the header has {len(header)} fields. Fix the source row or relax "
            "DATAENGINE_ROW_LENGTH_POLICY to 'pad'."
        )
    if len(values) < len(header):
        _LOGGER.warning(
            "row_padded",
            row_number=row_number,
            expected=len(header),
            actual=len(values),
        )
        values = tuple(values) + ("",) * (len(header) - len(values))
    record: Record = {}
    for name, value in zip(header, values):
        record[name] = value
    return record


def normalize_table(
    table: TableData,
    policy: RowLengthPolicy = "pad",
    duplicate_policy: DuplicateHeaderPolicy = "error",
) -> tuple[Record, ...]:
    """Convert reader output into records.

    Args:
        table: Parsed header and rows.
        policy: Row length policy for ``build_record``.
        duplicate_policy: ``error`` rejects repeated header names;
            ``last_wins`` keeps the last value for a repeated name.

    Returns:
        Ordered records, one per row.

    Raises:
        StructuralMismatchError: If the header repeats a name under ``error``.
        RowLengthMismatchError: If a row cannot be zipped onto the header.
    """
    check_duplicate_headers(table.header, duplicate_policy)
    return tuple(
        build_record(table.header, row, policy, row_number)
        for row_number, row in enumerate(table.rows, 1)
    )


def check_duplicate_headers(header: Sequence[str], policy: DuplicateHeaderPolicy) -> None:
    """Reject repeated header names unless the policy allows them.

    Args:
        header: Ordered field names.
        policy: Duplicate header policy.

    Raises:
        StructuralMismatchError: If names repeat under the ``error`` policy.
    """
    if policy == "last_wins":
        return
    duplicates = sorted(name for name, count in Counter(header).items() if count > 1)
    if duplicates:
        raise StructuralMismatchError(
            f"Header repeats field names: {', '.join(repr(name) for name in duplicates)}. "
            "Rename the columns or set DATAENGINE_DUPLICATE_HEADERS to 'last_wins'.",
            line_number=1,
        )
