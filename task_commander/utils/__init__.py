"""Utility modules for task-commander."""

from task_commander.utils.fileops import atomic_write, secure_atomic_write, secure_mkdir
from task_commander.utils.output import (
    console,
    error,
    info,
    success,
    warning,
)

__all__ = [
    "atomic_write",
    "console",
    "error",
    "info",
    "secure_atomic_write",
    "secure_mkdir",
    "success",
    "warning",
]
