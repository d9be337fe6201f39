"""Utility modules for spacectl.

This module exports commonly used utility functions.
"""

from spacectl.utils.formatting import (
    console,
    create_items_table,
    create_scan_table,
    err_console,
    format_size,
    parse_size,
    print_error,
    print_info,
    print_success,
    print_warning,
)
from spacectl.utils.shell import CommandResult, find_executable, run_command

__all__ = [
    "CommandResult",
    "console",
    "create_items_table",
    "create_scan_table",
    "err_console",
    "find_executable",
    "format_size",
    "parse_size",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
    "run_command",
]
