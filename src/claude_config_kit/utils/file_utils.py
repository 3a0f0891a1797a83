"""File system utilities for claude-config-kit."""

import json
import os
import shutil
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Any

from claude_config_kit.config.paths import BACKUP_INFIX, BACKUP_TIMESTAMP_FORMAT
from claude_config_kit.constants import JSON_INDENT


def ensure_dir(path: Path) -> None:
    """Ensure directory exists, creating it if necessary.

    Args:
        path: Directory path to ensure exists
    """
    path.mkdir(parents=True, exist_ok=True)


def read_file(path: Path) -> str:
    """Read text file contents.

    Args:
        path: Path to file to read

    Returns:
        File contents as string

    Raises:
        FileNotFoundError: If file doesn't exist
    """
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    return path.read_text(encoding="utf-8")


def write_file_atomic(path: Path, content: str) -> None:
    """Write content to a text file via a temporary file and rename.

    Readers never observe a half-written file. Creates parent directories
    if they don't exist.

    Args:
        path: Path to file to write
        content: Content to write
    """
    ensure_dir(path.parent)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def file_exists(path: Path) -> bool:
    """Check if file exists.

    Args:
        path: Path to check

    Returns:
        True if file exists, False otherwise
    """
    return path.exists() and path.is_file()


def dump_json(data: Any) -> str:
    """Serialize JSON the way Claude Code config files are written.

    Pretty-printed with a trailing newline for cleaner git diffs.
    """
    return json.dumps(data, indent=JSON_INDENT, ensure_ascii=False) + "\n"


def backup_file(path: Path, now: datetime | None = None) -> Path:
    """Copy a file to ``<name>.backup.<timestamp>`` next to it.

    Args:
        path: File to back up
        now: Timestamp to use (defaults to the current time)

    Returns:
        Path of the backup file
    """
    timestamp = (now or datetime.now()).strftime(BACKUP_TIMESTAMP_FORMAT)
    backup_path = path.with_name(f"{path.name}{BACKUP_INFIX}{timestamp}")
    shutil.copy2(path, backup_path)
    return backup_path


def file_fingerprint(path: Path) -> tuple[int, int] | None:
    """Return ``(mtime_ns, size)`` for a file, or None if it doesn't exist."""
    try:
        stat = path.stat()
    except FileNotFoundError:
        return None
    return (stat.st_mtime_ns, stat.st_size)
