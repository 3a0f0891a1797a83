"""Utility helpers for claude-config-kit."""

from .console import (
    console,
    print_error,
    print_info,
    print_panel,
    print_success,
    print_warning,
)
from .file_utils import (
    backup_file,
    dump_json,
    ensure_dir,
    file_exists,
    file_fingerprint,
    read_file,
    write_file_atomic,
)

__all__ = [
    "backup_file",
    "console",
    "dump_json",
    "ensure_dir",
    "file_exists",
    "file_fingerprint",
    "print_error",
    "print_info",
    "print_panel",
    "print_success",
    "print_warning",
    "read_file",
    "write_file_atomic",
]
