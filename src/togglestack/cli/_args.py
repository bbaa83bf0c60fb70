"""Common CLI argument registration utilities.

This module provides reusable argument registration functions to reduce
duplication across CLI commands.
"""
from __future__ import annotations

import argparse


def add_json_flag(parser: argparse.ArgumentParser) -> None:
    """Add --json flag for JSON output mode."""
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )


def add_config_file_flag(parser: argparse.ArgumentParser) -> None:
    """Add --config-file flag for a settings file override."""
    parser.add_argument(
        "--config-file",
        type=str,
        help="Settings file (default: $TOGGLESTACK_CONFIG_FILE or ./togglestack.yaml)",
    )


def add_resolution_flags(parser: argparse.ArgumentParser) -> None:
    """Add the flags shared by commands that resolve toggle configs.

    Args:
        parser: ArgumentParser to add the flags to
    """
    parser.add_argument("library", help="Library name (e.g., com.example.lib)")
    parser.add_argument(
        "--env",
        dest="environment",
        help="Deployment environment (default: server.environment setting)",
    )
    parser.add_argument(
        "--root",
        dest="roots",
        action="append",
        default=[],
        help="Extra resource root searched first (repeatable)",
    )
    parser.add_argument(
        "--no-sys-path",
        action="store_true",
        help="Do not search sys.path entries for config resources",
    )
    add_config_file_flag(parser)
    add_json_flag(parser)


def add_verbose_flag(parser: argparse.ArgumentParser) -> None:
    """Add --verbose flag."""
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging on stderr",
    )
