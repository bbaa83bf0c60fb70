"""
togglestack toggles locate command.

SUMMARY: List the config resources a library would read

For each candidate config name of LIBRARY (service and library owner, with
and without the environment suffix) prints the relative resource path and
every resource root where it exists. More than one match for a name is an
error at assembly time and is flagged here.
"""

from __future__ import annotations

import argparse
import sys
from typing import Any, Dict, List

from togglestack.cli import (
    OutputFormatter,
    add_resolution_flags,
    build_locator,
    build_server_info,
    get_config_manager,
)
from togglestack.core.exceptions import TogglesError
from togglestack.core.resolution.resolver import environment_config_name, service_config_name
from togglestack.core.toggle.ids import is_valid_id, validate_library_name

SUMMARY = "List the config resources a library would read"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_resolution_flags(parser)


def _candidate_names(library_name: str, environment: str | None) -> List[str]:
    names: List[str] = []
    for base in (service_config_name(library_name), library_name):
        env_name = environment_config_name(base, environment)
        if env_name is not None and is_valid_id(env_name):
            names.append(env_name)
        names.append(base)
    return names


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        validate_library_name(args.library)
        manager = get_config_manager(args)
        locator = build_locator(args, manager)
        environment = build_server_info(args, manager).current_environment()

        results: List[Dict[str, Any]] = []
        for name in _candidate_names(args.library, environment):
            matches = locator.locate(name)
            results.append(
                {
                    "config_name": name,
                    "resource": str(locator.resource_path(name)),
                    "matches": [str(p) for p in matches],
                    "ambiguous": len(matches) > 1,
                }
            )

        if formatter.json_mode:
            formatter.json_output(
                {
                    "library": args.library,
                    "environment": environment,
                    "roots": [str(r.path) for r in locator.roots],
                    "configs": results,
                }
            )
            return 0

        formatter.text(f"{args.library} (environment: {environment or '-'})")
        for entry in results:
            suffix = "  (ambiguous)" if entry["ambiguous"] else ""
            formatter.text(f"  {entry['resource']}{suffix}")
            if not entry["matches"]:
                formatter.text("      not found")
            for match in entry["matches"]:
                formatter.text(f"      {match}")
        return 0

    except TogglesError as e:
        formatter.error(e, error_code="toggles_locate_error")
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    cli_args = parser.parse_args()
    sys.exit(main(cli_args))
