"""
togglestack CLI package.

Provides the command-line interface with auto-discovery of commands
from subfolders (toggles/, config/).

Framework utilities for building CLI commands:
- _output: Output formatting (JSON/text modes)
- _args: Common argument registration helpers
- _utils: Shared CLI utilities
"""
from ._output import OutputFormatter, print_error
from ._args import (
    add_config_file_flag,
    add_json_flag,
    add_resolution_flags,
    add_verbose_flag,
)
from ._utils import build_locator, build_server_info, get_config_manager

__all__ = [
    # Output formatting
    "OutputFormatter",
    "print_error",
    # Argument helpers
    "add_json_flag",
    "add_config_file_flag",
    "add_resolution_flags",
    "add_verbose_flag",
    # Utilities
    "get_config_manager",
    "build_locator",
    "build_server_info",
]
