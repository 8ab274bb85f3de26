"""Exception hierarchy for task-commander."""

from pathlib import Path


class TaskCommanderError(Exception):
    """Base exception for all task-commander errors.

    All exceptions in this package inherit from this class,
    allowing callers to catch all task-commander errors with
    a single except clause.
    """

    pass


# Configuration Errors
class ConfigError(TaskCommanderError):
    """Configuration-related errors."""

    pass


class ConfigParseError(ConfigError):
    """Configuration file has invalid syntax."""

    def __init__(self, path: Path, detail: str) -> None:
        self.path = path
        self.detail = detail
        super().__init__(f"Invalid config at {path}: {detail}")


class ConfigValidationError(ConfigError):
    """Configuration value is invalid."""

    def __init__(self, key: str, value: object, reason: str) -> None:
        self.key = key
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid config value for '{key}': {reason}")


# Query Errors
class QueryError(TaskCommanderError):
    """A filter query was rejected before evaluation."""

    pass


class QueryLexError(QueryError):
    """The query contains a character the tokenizer cannot consume."""

    def __init__(self, char: str, offset: int, reason: str | None = None) -> None:
        self.char = char
        self.offset = offset
        self.reason = reason or "unexpected character"
        super().__init__(f"{self.reason} at position {offset}: {char!r}")


class QueryParseError(QueryError):
    """The token sequence does not form a valid query."""

    def __init__(self, message: str, offset: int, found: str) -> None:
        self.message = message
        self.offset = offset
        self.found = found
        super().__init__(f"{message} at position {offset}, got {found}")


# Recurrence Errors
class RecurrenceError(TaskCommanderError):
    """Recurrence pattern errors."""

    pass


class RecurrencePatternError(RecurrenceError):
    """A recurrence pattern failed validation."""

    def __init__(self, pattern: str, fragment: str, reason: str) -> None:
        self.pattern = pattern
        self.fragment = fragment
        self.reason = reason
        super().__init__(f"Invalid recurrence pattern {pattern!r}: {reason}")


class RecurrenceComputationError(RecurrenceError):
    """The next occurrence of a pattern could not be computed."""

    def __init__(self, pattern: str, fragment: str, reason: str) -> None:
        self.pattern = pattern
        self.fragment = fragment
        self.reason = reason
        super().__init__(f"Cannot compute next occurrence of {pattern!r}: {reason}")


# Task Store Errors
class TaskStoreError(TaskCommanderError):
    """Task file errors."""

    pass


class TaskFileNotFoundError(TaskStoreError):
    """Task file doesn't exist."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Task file not found: {path}")


class TaskFileParseError(TaskStoreError):
    """Task file has invalid content."""

    def __init__(self, path: Path, detail: str) -> None:
        self.path = path
        self.detail = detail
        super().__init__(f"Invalid task file {path}: {detail}")


class TaskNotFoundError(TaskStoreError):
    """Task doesn't exist."""

    def __init__(self, index_id: int) -> None:
        self.index_id = index_id
        super().__init__(f"Task not found: {index_id}")
