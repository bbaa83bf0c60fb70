"""
togglestack toggles show command.

SUMMARY: Show the toggles defined for a library

Assembles the standard toggle chain for LIBRARY and lists every defined
toggle, highest-precedence definition first, with the layer it came from.
"""

from __future__ import annotations

import argparse
import sys

from togglestack.cli import (
    OutputFormatter,
    add_resolution_flags,
    build_locator,
    build_server_info,
    get_config_manager,
)
from togglestack.core.exceptions import TogglesError
from togglestack.core.standard import standard_toggle_map
from togglestack.core.stats import InMemoryStatsReceiver
from togglestack.core.toggle.observed import checksum

SUMMARY = "Show the toggles defined for a library"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_resolution_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        manager = get_config_manager(args)
        server_info = build_server_info(args, manager)
        toggles = standard_toggle_map(
            args.library,
            InMemoryStatsReceiver(),
            server_info=server_info,
            locator=build_locator(args, manager),
            manager=manager,
        )
        entries = sorted(toggles.iter_metadata(), key=lambda md: md.id)

        if formatter.json_mode:
            formatter.json_output(
                {
                    "library": args.library,
                    "environment": server_info.current_environment(),
                    "checksum": checksum(toggles),
                    "toggles": [md.to_dict() for md in entries],
                }
            )
            return 0

        formatter.text(f"{args.library} (environment: {server_info.current_environment() or '-'})")
        if not entries:
            formatter.text("  No toggles defined")
            return 0
        for md in entries:
            formatter.text(f"  {md.id} = {md.fraction}  [{md.source or '?'}]")
            if md.description:
                formatter.text(f"      {md.description}")
        return 0

    except TogglesError as e:
        formatter.error(e, error_code="toggles_show_error")
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    cli_args = parser.parse_args()
    sys.exit(main(cli_args))
