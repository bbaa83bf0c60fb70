"""
togglestack config show command.

SUMMARY: Show current settings

Displays the merged settings from bundled defaults, the settings file,
and TOGGLESTACK_* environment variables. Supports filtering by key.
"""

from __future__ import annotations

import argparse
import sys

import yaml

from togglestack.cli import OutputFormatter, add_config_file_flag, add_json_flag, get_config_manager
from togglestack.core.exceptions import TogglesError

SUMMARY = "Show current settings"


def _nest_key(key: str, value):
    """Nest a dot-notation key into a YAML/JSON-friendly mapping."""
    parts = [p for p in str(key).split(".") if p]
    out = value
    for part in reversed(parts):
        out = {part: out}
    return out


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    parser.add_argument(
        "key",
        nargs="?",
        help="Specific settings key to show (e.g., 'resources.namespace')",
    )
    add_json_flag(parser)
    add_config_file_flag(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        manager = get_config_manager(args)
        data = manager.load_config(validate=True)

        if args.key:
            missing = object()
            value = manager.get(args.key, missing)
            if value is missing:
                formatter.error(KeyError(args.key), f"Key not found: {args.key}", error_code="key_not_found")
                return 1
            data = _nest_key(args.key, value)

        if formatter.json_mode:
            formatter.json_output(data)
        else:
            formatter.text(
                yaml.safe_dump(data, default_flow_style=False, sort_keys=True, allow_unicode=True).rstrip()
            )
        return 0

    except (TogglesError, OSError, ValueError, yaml.YAMLError) as e:
        formatter.error(e, error_code="config_show_error")
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    cli_args = parser.parse_args()
    sys.exit(main(cli_args))
