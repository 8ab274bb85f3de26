"""Shared pytest fixtures."""

from __future__ import annotations

import json
import shutil
import tempfile
from datetime import date
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from collections.abc import Generator

# Fixed reference date for relative due-date checks (a Saturday)
TODAY = date(2026, 10, 17)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    path = Path(tempfile.mkdtemp())
    try:
        yield path
    finally:
        shutil.rmtree(path, ignore_errors=True)


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def sample_tasks_file(temp_dir: Path) -> Path:
    """Create a task file covering the fields the query language inspects."""
    tasks_path = temp_dir / "tasks.json"
    tasks_path.write_text(
        json.dumps(
            {
                "tasks": [
                    {
                        "index_id": 1,
                        "title": "Quarterly report",
                        "status": "open",
                        "priority": "p1",
                        "area": "work",
                        "due_date": "2026-10-10",
                        "estimate": 5,
                        "tags": ["finance", "report"],
                        "content": "Collect numbers from the Finance team.",
                    },
                    {
                        "index_id": 2,
                        "title": "Water plants",
                        "status": "open",
                        "priority": "p3",
                        "area": "home",
                        "due_date": "2026-10-17",
                        "recur": "every 3d",
                        "tags": ["garden"],
                    },
                    {
                        "index_id": 3,
                        "title": "Team sync notes",
                        "status": "done",
                        "priority": "p2",
                        "area": "work",
                        "due_date": "2026-10-01",
                        "recur": "every mon,thu",
                    },
                    {
                        "index_id": 4,
                        "title": "Pay rent",
                        "status": "open",
                        "priority": "p2",
                        "area": "home",
                        "due_date": "2026-10-31",
                        "recur": "monthly",
                        "project_id": "20260101T090000",
                    },
                ]
            }
        )
    )
    return tasks_path


@pytest.fixture
def sample_config(temp_dir: Path, sample_tasks_file: Path) -> Path:
    """Create a sample config file pointing at the sample tasks."""
    config_path = temp_dir / "config.toml"
    config_path.write_text(f"""[paths]
tasks_file = "{sample_tasks_file}"

[display]
colored_output = false

[query]
soon_horizon = 5
""")
    return config_path
