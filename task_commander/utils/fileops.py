"""Atomic and owner-only file operations for task files and config."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path


def secure_mkdir(path: Path) -> None:
    """Create directory with 0o700 permissions (owner-only access).

    If the directory already exists, its permissions are tightened to 0o700.
    Parent directories are created as needed.
    """
    path.mkdir(parents=True, exist_ok=True)
    path.chmod(0o700)


def atomic_write(path: Path, content: str, mode: int | None = None) -> None:
    """Write content to *path* atomically.

    Without *mode*, an existing file keeps its permissions and a new one
    is created 0o600. The parent directory must already exist. Uses a
    temporary file in the same directory and an atomic rename so readers
    never see a partially-written file.
    """
    if mode is None:
        mode = path.stat().st_mode & 0o777 if path.exists() else 0o600

    fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=".tmp-", suffix=".tmp")
    try:
        os.fchmod(fd, mode)
        with open(fd, "w", encoding="utf-8") as f:
            f.write(content)
        Path(tmp_path).replace(path)
    except BaseException:
        Path(tmp_path).unlink(missing_ok=True)
        raise


def secure_atomic_write(path: Path, content: str) -> None:
    """Write content to *path* atomically with 0o600 permissions.

    Creates the parent directory with 0o700 if it doesn't exist.
    """
    secure_mkdir(path.parent)
    atomic_write(path, content, mode=0o600)
