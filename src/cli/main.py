"""DataEngine CLI entry points.
This module exposes the import demo and dataset lookup commands.
It maps argparse commands onto registry calls.
"""

from __future__ import annotations

import argparse
from dataclasses import replace
import logging
from pathlib import Path
import sys
from typing import Any, Sequence

from core.config import DataEngineConfig
from core.constants import DEFAULT_DUMP_LIMIT, DEFAULT_LOOKUP_DATASET
from core.errors import DataEngineError
from core.logging_config import configure_logging
from store.dataset_query import (
    list_dataset_headers,
    query_attribute,
    query_attribute_all,
    supported_query_operators,
)
from store.dataset_registry import DatasetRegistry


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="dataengine", description="DataEngine import CLI")
    parser.add_argument("--data-root", help="Override DATAENGINE_DATA_ROOT for this command")
    parser.add_argument("--manifest", help="Override DATAENGINE_SOURCE_MANIFEST for this command")
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress the import report and informational logs",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_demo_command(subparsers)
    _add_names_command(subparsers)
    _add_dump_command(subparsers)
    _add_headers_command(subparsers)
    _add_query_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the DataEngine CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(logging.WARNING if args.quiet else logging.INFO)
    try:
        config = _build_config(args.data_root, args.manifest, args.quiet)
        registry = _load_registry(config)
        if args.command == "demo":
            return _run_demo_command(registry, args)
        if args.command == "names":
            return _run_names_command(registry)
        if args.command == "dump":
            return _run_dump_command(registry, args)
        if args.command == "headers":
            return _run_headers_command(registry, args)
        if args.command == "query":
            return _run_query_command(registry, args)
    except DataEngineError as error:
        print(f"Error: {error}", file=sys.stderr)
        return 1
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_config(data_root: str | None, manifest: str | None, quiet: bool) -> DataEngineConfig:
    """Build config with optional command-line overrides.

    Args:
        data_root: Optional data root override.
        manifest: Optional source manifest override.
        quiet: Whether to disable the import report.

    Returns:
        Runtime configuration.
    """
    config = DataEngineConfig.from_env()
    if data_root:
        config = replace(config, data_root=Path(data_root).expanduser().resolve())
    if manifest:
        config = replace(config, source_manifest=Path(manifest).expanduser().resolve())
    if quiet:
        config = replace(config, echo_import=False)
    return config


def _load_registry(config: DataEngineConfig) -> DatasetRegistry:
    """Create a registry, import all sources, and echo the report."""
    registry = DatasetRegistry(config)
    report = registry.load_all()
    if config.echo_import:
        for line in report.format_lines():
            print(line)
    return registry


def _run_demo_command(registry: DatasetRegistry, args: argparse.Namespace) -> int:
    """Handle demo command.

    Args:
        registry: Loaded registry.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    registry.dump_datasets(args.limit)
    print("Listing Data Set by Name:")
    print()
    for name in registry.get_dataset_names():
        print(f"  {name}")
    print()
    dataset = registry.get_dataset_by_name(args.dataset)
    print(f"{dataset.name}\t{len(dataset)}")
    return 0


def _run_names_command(registry: DatasetRegistry) -> int:
    for name in registry.get_dataset_names():
        print(name)
    return 0


def _run_dump_command(registry: DatasetRegistry, args: argparse.Namespace) -> int:
    registry.dump_datasets(args.limit)
    return 0


def _run_headers_command(registry: DatasetRegistry, args: argparse.Namespace) -> int:
    for header in list_dataset_headers(registry, args.dataset):
        print(header)
    return 0


def _run_query_command(registry: DatasetRegistry, args: argparse.Namespace) -> int:
    """Handle query command.

    Args:
        registry: Loaded registry.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    if args.values:
        matches = query_attribute(registry, args.dataset, args.attribute, args.op, *args.values)
    else:
        matches = query_attribute_all(registry, args.dataset, args.attribute)
    for match in matches:
        print(f"{match.row_index}\t{match.value}")
    return 0


def _add_demo_command(subparsers: Any) -> None:
    """Register demo subcommand."""
    parser = subparsers.add_parser(
        "demo",
        help="Import all datasets, dump records, list names, and look one up",
    )
    parser.add_argument(
        "--limit",
        type=_non_negative_int,
        default=DEFAULT_DUMP_LIMIT,
        help="Records to dump per dataset",
    )
    parser.add_argument(
        "--dataset",
        default=DEFAULT_LOOKUP_DATASET,
        help="Dataset name to look up",
    )


def _add_names_command(subparsers: Any) -> None:
    """Register names subcommand."""
    subparsers.add_parser("names", help="List dataset names in ascending order")


def _add_dump_command(subparsers: Any) -> None:
    """Register dump subcommand."""
    parser = subparsers.add_parser("dump", help="Dump the first records of each dataset")
    parser.add_argument(
        "--limit",
        type=_non_negative_int,
        default=DEFAULT_DUMP_LIMIT,
        help="Records to dump per dataset",
    )


def _add_headers_command(subparsers: Any) -> None:
    """Register headers subcommand."""
    parser = subparsers.add_parser("headers", help="List the field names of a dataset")
    parser.add_argument("--dataset", required=True, help="Dataset name")


def _add_query_command(subparsers: Any) -> None:
    """Register query subcommand."""
    parser = subparsers.add_parser("query", help="Find attribute values in a dataset")
    parser.add_argument("--dataset", required=True, help="Dataset name")
    parser.add_argument("--attribute", required=True, help="Field name to compare")
    parser.add_argument(
        "--op",
        default="eq",
        choices=supported_query_operators(),
        help="Comparison operator applied to each value",
    )
    parser.add_argument("values", nargs="*", help="Values to compare; omit to list all values")


def _non_negative_int(raw_value: str) -> int:
    """Parse a non-negative integer argument."""
    try:
        value = int(raw_value)
    except ValueError as error:
        raise argparse.ArgumentTypeError(f"expected an integer, got '{raw_value}'") from error
    if value < 0:
        raise argparse.ArgumentTypeError(f"expected a value >= 0, got {value}")
    return value
