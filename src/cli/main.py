"""Healthisis ETL CLI entry points.
This module exposes the import and schema bootstrap commands.
It maps argparse commands onto pipeline calls.
"""

from __future__ import annotations

import argparse
from dataclasses import replace
from pathlib import Path
from typing import Any, Sequence

from core.config import PipelineConfig
from core.errors import HealthisisError
from core.logging_config import get_logger
from ingest.pipeline import create_schema, run_import

_LOGGER = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(
        prog="healthisis-etl",
        description="Load quarterly disease surveillance CSVs into ClickHouse",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_import_command(subparsers)
    _add_create_table_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the Healthisis ETL CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        config = _build_config(args)
        if args.command == "import":
            return _run_import_command(config)
        if args.command == "create-table":
            return _run_create_table_command(config)
    except HealthisisError as error:
        _LOGGER.error("command_failed", command=args.command, error=str(error))
        return 1
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_config(args: argparse.Namespace) -> PipelineConfig:
    """Build config from file or env, then apply CLI overrides.

    Args:
        args: Parsed CLI args.

    Returns:
        Runtime config.
    """
    if args.config:
        config = PipelineConfig.from_yaml(Path(args.config).expanduser())
    else:
        config = PipelineConfig.from_env()
    if args.data:
        config = replace(config, data_dir=Path(args.data).expanduser().resolve())
    overrides = {
        "host": args.host,
        "port": args.port,
        "database": args.db,
        "username": args.user,
        "password": args.password,
    }
    overrides = {key: value for key, value in overrides.items() if value is not None}
    if overrides:
        config = replace(config, clickhouse=replace(config.clickhouse, **overrides))
    return config


def _run_import_command(config: PipelineConfig) -> int:
    """Handle import command.

    Args:
        config: Runtime config.

    Returns:
        Exit code.
    """
    summary = run_import(config)
    print(summary.loaded_count)
    return 0


def _run_create_table_command(config: PipelineConfig) -> int:
    """Handle create-table command.

    Args:
        config: Runtime config.

    Returns:
        Exit code.
    """
    print(create_schema(config))
    return 0


def _add_connection_arguments(parser: argparse.ArgumentParser) -> None:
    """Register store connection overrides shared by all commands."""
    parser.add_argument("--config", help="Service YAML config with a database.clickhouse section")
    parser.add_argument("--data", help="Directory containing the source CSV files")
    parser.add_argument("--host", help="ClickHouse host")
    parser.add_argument("--port", type=int, help="ClickHouse HTTP port")
    parser.add_argument("--db", help="ClickHouse database")
    parser.add_argument("--user", help="ClickHouse username")
    parser.add_argument("--password", help="ClickHouse password")


def _add_import_command(subparsers: Any) -> None:
    """Register import subcommand."""
    parser = subparsers.add_parser("import", help="Run the full CSV to ClickHouse import once")
    _add_connection_arguments(parser)


def _add_create_table_command(subparsers: Any) -> None:
    """Register create-table subcommand."""
    parser = subparsers.add_parser("create-table", help="Create the target database and table")
    _add_connection_arguments(parser)
