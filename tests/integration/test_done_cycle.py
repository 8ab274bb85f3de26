"""End-to-end tests: query tasks, complete them, query again."""

from __future__ import annotations

import json
from pathlib import Path

from click.testing import CliRunner

from task_commander.cli import cli


def _invoke(config: Path, *args: str):
    return CliRunner().invoke(cli, ["--config", str(config), *args])


def _query_ids(config: Path, query: str, today: str = "2026-10-17") -> list[int]:
    result = _invoke(config, "query", "--today", today, "--format", "ids", query)
    assert result.exit_code == 0, result.output
    return [int(line) for line in result.output.split()]


def test_complete_recurring_task_rolls_forward(sample_config: Path) -> None:
    assert _query_ids(sample_config, "due:today AND status:open") == [2]

    result = _invoke(sample_config, "done", "--today", "2026-10-17", "2")
    assert result.exit_code == 0, result.output

    # The completed instance is gone from today's list, the next one is upcoming
    assert _query_ids(sample_config, "due:today AND status:open") == []
    assert _query_ids(sample_config, "title:\"water plants\" AND status:open") == [5]
    assert _query_ids(sample_config, "due:soon AND recur:\"every 3d\"") == [5]


def test_repeated_completion_keeps_advancing(sample_config: Path, sample_tasks_file: Path) -> None:
    _invoke(sample_config, "done", "--today", "2026-10-17", "4")
    _invoke(sample_config, "done", "--today", "2026-10-17", "5")

    data = json.loads(sample_tasks_file.read_text())
    rent = [t for t in data["tasks"] if t["title"] == "Pay rent"]
    assert [(t["index_id"], t["status"], t["due_date"]) for t in rent] == [
        (4, "done", "2026-10-31"),
        (5, "done", "2026-11-30"),
        (6, "open", "2026-12-30"),
    ]


def test_stale_recurring_task_skips_missed_periods(temp_dir: Path) -> None:
    tasks_path = temp_dir / "tasks.json"
    tasks_path.write_text(
        json.dumps(
            {
                "tasks": [
                    {
                        "index_id": 1,
                        "title": "Standup",
                        "due_date": "2026-09-01",
                        "recur": "every mon,thu",
                    }
                ]
            }
        )
    )
    config = temp_dir / "config.toml"
    config.write_text(f'[paths]\ntasks_file = "{tasks_path}"\n')

    result = _invoke(config, "done", "--today", "2026-10-17", "1")
    assert result.exit_code == 0, result.output

    assert _query_ids(config, "due:\"2026-10-19\"") == [2]
    assert _query_ids(config, "due:overdue AND status:open") == []


def test_done_output_is_reported_in_json_query(sample_config: Path) -> None:
    _invoke(sample_config, "done", "--today", "2026-10-17", "1")

    result = _invoke(sample_config, "query", "--format", "json", "status:done")
    data = json.loads(result.output)
    assert sorted(t["index_id"] for t in data["tasks"]) == [1, 3]


def test_batch_completion_then_recur_change(sample_config: Path) -> None:
    result = _invoke(
        sample_config, "batch-update", "--today", "2026-10-17", "--where", "area:home", "--status", "done"
    )
    assert result.exit_code == 0, result.output
    assert _query_ids(sample_config, "area:home AND status:open") == [5, 6]

    result = _invoke(sample_config, "recur", "set", "6", "none")
    assert result.exit_code == 0, result.output

    assert _query_ids(sample_config, "area:home AND status:open AND recur:set") == [5]
