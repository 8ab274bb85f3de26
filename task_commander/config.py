"""Configuration management for task-commander."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import tomli_w

from task_commander.exceptions import (
    ConfigParseError,
    ConfigValidationError,
)
from task_commander.utils.fileops import secure_atomic_write

DEFAULT_SOON_HORIZON = 3

# Columns accepted by ``query.default_sort``
SORT_COLUMNS: frozenset[str] = frozenset({"index_id", "priority", "due", "start", "title", "status"})


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    return Path.home() / ".config" / "task-commander" / "config.toml"


def get_default_tasks_file() -> Path:
    """Get the default task file path."""
    return Path.home() / ".local" / "share" / "task-commander" / "tasks.json"


@dataclass
class Config:
    """Application configuration.

    Attributes:
        tasks_file: Path to the JSON task file.
        colored_output: Whether to use colored terminal output.
        soon_horizon: Days ahead that ``due:soon`` considers, inclusive.
        default_sort: Sort column for query output. Prefix with ``-`` for
            descending order.
        config_path: Path where config was loaded from (None if defaults).
    """

    tasks_file: Path = field(default_factory=get_default_tasks_file)
    colored_output: bool = True
    soon_horizon: int = DEFAULT_SOON_HORIZON
    default_sort: str = "index_id"
    config_path: Path | None = None

    def validate(self) -> list[str]:
        """Validate configuration values.

        Returns:
            List of warning messages for non-fatal issues.

        Raises:
            ConfigValidationError: If a critical validation fails.
        """
        warnings: list[str] = []

        self.tasks_file = self.tasks_file.expanduser().resolve()

        # Might be created later by the surrounding tool
        if not self.tasks_file.exists():
            warnings.append(f"Task file not found: {self.tasks_file}")

        if self.soon_horizon < 0:
            warnings.append(
                f"query.soon_horizon={self.soon_horizon} is negative, "
                f"using {DEFAULT_SOON_HORIZON}"
            )
            self.soon_horizon = DEFAULT_SOON_HORIZON

        if self.default_sort.lstrip("-") not in SORT_COLUMNS:
            raise ConfigValidationError(
                "query.default_sort",
                self.default_sort,
                f"must be one of {', '.join(sorted(SORT_COLUMNS))}",
            )

        return warnings


def load_config(config_path: Path | None = None) -> tuple[Config, list[str]]:
    """Load configuration from file or use defaults.

    Args:
        config_path: Explicit config file path. If None, uses default location.

    Returns:
        Tuple of (Config object, list of warning messages).

    Raises:
        ConfigParseError: If config file exists but has invalid syntax.
        ConfigValidationError: If config values are invalid.
    """
    warnings: list[str] = []

    if config_path is None:
        config_path = get_default_config_path()

    config_path = config_path.expanduser().resolve()

    if not config_path.exists():
        config = Config()
        warnings.append(
            f"No config file found at {config_path}. Using defaults. "
            f"Create config with: task-commander init-config"
        )
        config_warnings = config.validate()
        return config, warnings + config_warnings

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(config_path, str(e)) from e

    config = _parse_config_dict(data, config_path)
    config_warnings = config.validate()

    return config, warnings + config_warnings


def _parse_config_dict(data: dict[str, Any], config_path: Path) -> Config:
    """Parse configuration dictionary into Config object."""
    config = Config(config_path=config_path)

    # Parse [paths] section
    paths = data.get("paths", {})
    if "tasks_file" in paths:
        value = paths["tasks_file"]
        if not isinstance(value, str):
            raise ConfigValidationError("paths.tasks_file", value, "must be a string path")
        config.tasks_file = Path(value)

    # Parse [display] section
    display = data.get("display", {})
    if "colored_output" in display:
        value = display["colored_output"]
        if not isinstance(value, bool):
            raise ConfigValidationError("display.colored_output", value, "must be a boolean")
        config.colored_output = value

    # Parse [query] section
    query = data.get("query", {})
    if "soon_horizon" in query:
        value = query["soon_horizon"]
        # bool is an int subclass
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigValidationError("query.soon_horizon", value, "must be an integer")
        config.soon_horizon = value

    if "default_sort" in query:
        value = query["default_sort"]
        if not isinstance(value, str):
            raise ConfigValidationError("query.default_sort", value, "must be a string")
        config.default_sort = value

    return config


def save_config(config: Config, config_path: Path | None = None) -> None:
    """Save configuration to file.

    Args:
        config: Configuration to save.
        config_path: Path to save to. If None, uses config.config_path or default.
    """
    if config_path is None:
        config_path = config.config_path or get_default_config_path()

    config_path = config_path.expanduser().resolve()

    data: dict[str, Any] = {
        "paths": {
            "tasks_file": str(config.tasks_file),
        },
        "display": {
            "colored_output": config.colored_output,
        },
    }

    # Build [query] section (only if non-default values)
    query_data: dict[str, Any] = {}
    if config.soon_horizon != DEFAULT_SOON_HORIZON:
        query_data["soon_horizon"] = config.soon_horizon
    if config.default_sort != "index_id":
        query_data["default_sort"] = config.default_sort
    if query_data:
        data["query"] = query_data

    secure_atomic_write(config_path, tomli_w.dumps(data))
