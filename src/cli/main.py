"""kindsync CLI entry points.
This module exposes commands for schema inference, table creation, and ingest.
It maps argparse commands onto SDK calls.
"""

from __future__ import annotations

import argparse
from dataclasses import replace
import json
from pathlib import Path
import sys
from typing import Sequence

import httpx

from core.config import KindSyncConfig
from core.errors import KindSyncError
from core.sync_options import load_sync_options
from ingest.record_payload import read_records_jsonl
from stats.stats_source import load_stats_source
from sync.sync_sdk import KindSyncClient


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(
        prog="kindsync",
        description="Export datastore kinds into warehouse tables",
    )
    parser.add_argument("--project", help="Override KINDSYNC_PROJECT for this command")
    parser.add_argument("--dataset", help="Override KINDSYNC_DATASET for this command")
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_infer_schema_command(subparsers)
    _add_create_table_command(subparsers)
    _add_ingest_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the kindsync CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        with _build_client(args) as client:
            if args.command == "infer-schema":
                return _run_infer_schema_command(client, args)
            if args.command == "create-table":
                return _run_create_table_command(client, args)
            if args.command == "ingest":
                return _run_ingest_command(client, args)
    except (KindSyncError, httpx.HTTPError) as error:
        print(f"error: {error}", file=sys.stderr)
        return 1
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _add_infer_schema_command(subparsers: argparse._SubParsersAction) -> None:
    command = subparsers.add_parser("infer-schema", help="Print the inferred schema for a kind")
    command.add_argument("--kind", required=True, help="Datastore kind name")
    command.add_argument("--stats", required=True, help="Path to a JSON statistics export")


def _add_create_table_command(subparsers: argparse._SubParsersAction) -> None:
    command = subparsers.add_parser("create-table", help="Create the warehouse table for a kind")
    command.add_argument("--kind", required=True, help="Datastore kind name")
    command.add_argument("--stats", required=True, help="Path to a JSON statistics export")


def _add_ingest_command(subparsers: argparse._SubParsersAction) -> None:
    command = subparsers.add_parser("ingest", help="Stream JSONL entity records")
    command.add_argument("--records", required=True, help="Path to a JSONL entity export")
    command.add_argument("--exclude", help="Regexp of property names to leave out")
    command.add_argument("--options", help="Path to a YAML sync options file")
    command.add_argument("--batch-size", type=_positive_int, help="Override KINDSYNC_BATCH_SIZE")


def _positive_int(raw_value: str) -> int:
    """Parse a strictly positive integer CLI value."""
    try:
        value = int(raw_value)
    except ValueError as error:
        raise argparse.ArgumentTypeError(f"expected an integer, got '{raw_value}'") from error
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return value


def _build_client(args: argparse.Namespace) -> KindSyncClient:
    """Build SDK client with optional config overrides.

    Args:
        args: Parsed CLI args.

    Returns:
        Configured SDK client.
    """
    config = KindSyncConfig.from_env()
    if args.project:
        config = replace(config, project_id=args.project)
    if args.dataset:
        config = replace(config, dataset_id=args.dataset)
    if getattr(args, "batch_size", None) is not None:
        config = replace(config, batch_size=args.batch_size)
    if getattr(args, "exclude", None) is not None:
        config = replace(config, exclude_pattern=args.exclude)
    return KindSyncClient(config)


def _run_infer_schema_command(client: KindSyncClient, args: argparse.Namespace) -> int:
    """Handle infer-schema command.

    Args:
        client: SDK client.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    schema = client.infer_schema(args.kind, load_stats_source(args.stats))
    print(json.dumps(schema.to_payload(), indent=2))
    return 0


def _run_create_table_command(client: KindSyncClient, args: argparse.Namespace) -> int:
    """Handle create-table command.

    Args:
        client: SDK client.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    descriptor = client.create_table(args.kind, load_stats_source(args.stats))
    reference = descriptor.reference
    print(f"{reference.project_id}:{reference.dataset_id}.{reference.table_id}")
    return 0


def _run_ingest_command(client: KindSyncClient, args: argparse.Namespace) -> int:
    """Handle ingest command.

    Args:
        client: SDK client.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    records = read_records_jsonl(Path(args.records).expanduser())
    options = load_sync_options(args.options) if args.options else None
    submitted = client.sync(records, options)
    for kind, row_count in submitted.items():
        print(f"{kind}\t{row_count}")
    return 0
