"""Attribute lookups over registered datasets.

This module lists dataset headers and finds records whose attribute
values compare against given strings, reporting each match's row index.
"""

from __future__ import annotations

import operator
from typing import Callable

from core.errors import UnknownAttributeError
from core.types import AttributeMatch, Dataset
from store.dataset_registry import DatasetRegistry

_COMPARATORS: dict[str, Callable[[str, str], bool]] = {
    "eq": operator.eq,
    "ne": operator.ne,
    "gt": operator.gt,
    "ge": operator.ge,
    "lt": operator.lt,
    "le": operator.le,
}


def supported_query_operators() -> tuple[str, ...]:
    """Return supported comparison operator names."""
    return tuple(_COMPARATORS)


def list_dataset_headers(registry: DatasetRegistry, dataset_name: str) -> tuple[str, ...]:
    """Return the field names of one dataset, in order."""
    return registry.get_dataset_by_name(dataset_name).header


def query_attribute_all(
    registry: DatasetRegistry,
    dataset_name: str,
    attribute: str,
) -> list[AttributeMatch]:
    """Return one attribute's value for every record.

    Args:
        registry: Ready dataset registry.
        dataset_name: Canonical dataset name.
        attribute: Field name to read.

    Returns:
        Value and row index for every record.

    Raises:
        UnknownAttributeError: If the dataset has no such field.
    """
    dataset = _dataset_with_attribute(registry, dataset_name, attribute)
    return [
        AttributeMatch(value=record[attribute], row_index=row_index)
        for row_index, record in enumerate(dataset.records)
    ]


def query_attribute(
    registry: DatasetRegistry,
    dataset_name: str,
    attribute: str,
    operator_name: str,
    *values: str,
) -> list[AttributeMatch]:
    """Find records whose attribute compares true against any given value.

    Comparison is lexicographic on the stored strings. A record yields one
    match per value it satisfies.

    Args:
        registry: Ready dataset registry.
        dataset_name: Canonical dataset name.
        attribute: Field name to compare.
        operator_name: One of ``eq``, ``ne``, ``gt``, ``ge``, ``lt``, ``le``.
        *values: Values to compare against.

    Returns:
        Matching values with their row index, in record order.

    Raises:
        ValueError: If the operator is unknown or no values are given.
        UnknownAttributeError: If the dataset has no such field.
    """
    comparator = _COMPARATORS.get(operator_name)
    if comparator is None:
        raise ValueError(
            f"Unsupported query operator '{operator_name}'. "
            f"Supported: {', '.join(supported_query_operators())}."
        )
    if not values:
        raise ValueError("At least one comparison value is required.")
    dataset = _dataset_with_attribute(registry, dataset_name, attribute)
    matches: list[AttributeMatch] = []
    for row_index, record in enumerate(dataset.records):
        attribute_value = record[attribute]
        for value in values:
            if comparator(attribute_value, value):
                matches.append(AttributeMatch(value=attribute_value, row_index=row_index))
    return matches


def _dataset_with_attribute(
    registry: DatasetRegistry,
    dataset_name: str,
    attribute: str,
) -> Dataset:
    dataset = registry.get_dataset_by_name(dataset_name)
    if attribute not in dataset.header:
        raise UnknownAttributeError(
            f"Dataset {dataset_name} has no attribute '{attribute}'. "
            f"Available attributes: {', '.join(dataset.header)}."
        )
    return dataset
