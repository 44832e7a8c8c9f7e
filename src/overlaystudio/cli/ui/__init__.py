"""CLI UI components for Overlay Studio."""

from .console import (
    console,
    err_console,
    print_error,
    print_header,
    print_info,
    print_key_value_table,
    print_muted,
    print_success,
    print_warning,
)
from .progress import spinner
from .setup import check_system_dependencies, run_setup_check

__all__ = [
    "check_system_dependencies",
    "console",
    "err_console",
    "print_error",
    "print_header",
    "print_info",
    "print_key_value_table",
    "print_muted",
    "print_success",
    "print_warning",
    "run_setup_check",
    "spinner",
]
