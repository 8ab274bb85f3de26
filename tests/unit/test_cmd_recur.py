"""Unit tests for the recur command group."""

from __future__ import annotations

import stat
from pathlib import Path

import pytest
from click.testing import CliRunner

from task_commander.cli import cli as root_cli
from task_commander.commands.recur import cli
from task_commander.store import load_tasks


class TestCheckCommand:
    @pytest.mark.parametrize(
        ("pattern", "expected"),
        [
            ("Daily", "daily"),
            ("every 2W", "every 2w"),
            ("every mon, Fri", "every mon,fri"),
        ],
    )
    def test_prints_normalized_pattern(self, pattern: str, expected: str) -> None:
        result = CliRunner().invoke(cli, ["check", pattern])
        assert result.exit_code == 0
        assert result.output.strip() == expected

    def test_unquoted_words_are_joined(self) -> None:
        result = CliRunner().invoke(cli, ["check", "every", "mon,wed"])
        assert result.exit_code == 0
        assert result.output.strip() == "every mon,wed"

    @pytest.mark.parametrize("pattern", ["fortnightly", "every 0d", "every funday", "every"])
    def test_invalid_pattern_exit_code(self, pattern: str) -> None:
        result = CliRunner().invoke(cli, ["check", pattern])
        assert result.exit_code == 1
        assert "Error" in result.output


class TestNextCommand:
    def test_single_occurrence(self) -> None:
        result = CliRunner().invoke(
            cli, ["next", "monthly", "2026-01-31", "--today", "2026-01-15"]
        )
        assert result.exit_code == 0
        assert result.output.split() == ["2026-02-28"]

    def test_multiple_occurrences(self) -> None:
        result = CliRunner().invoke(
            cli, ["next", "every mon,thu", "2026-10-19", "--today", "2026-10-17", "-n", "3"]
        )
        assert result.exit_code == 0
        assert result.output.split() == ["2026-10-22", "2026-10-26", "2026-10-29"]

    def test_stale_due_skips_to_present(self) -> None:
        result = CliRunner().invoke(
            cli, ["next", "daily", "2026-10-01", "--today", "2026-10-17"]
        )
        assert result.output.split() == ["2026-10-17"]

    def test_invalid_pattern(self) -> None:
        result = CliRunner().invoke(cli, ["next", "every 3x", "2026-10-01"])
        assert result.exit_code == 1

    def test_invalid_due_date(self) -> None:
        result = CliRunner().invoke(cli, ["next", "daily", "tomorrow"])
        assert result.exit_code == 2

    def test_count_must_be_positive(self) -> None:
        result = CliRunner().invoke(cli, ["next", "daily", "2026-10-01", "-n", "0"])
        assert result.exit_code == 2


class TestSetCommand:
    def _set(self, config: Path, *args: str):
        return CliRunner().invoke(root_cli, ["--config", str(config), "recur", "set", *args])

    def _recur_of(self, tasks_file: Path, index_id: int) -> str:
        return {t.index_id: t for t in load_tasks(tasks_file)}[index_id].recur

    def test_stores_normalized_pattern(self, sample_config: Path, sample_tasks_file: Path) -> None:
        result = self._set(sample_config, "1", "Every", "2W")
        assert result.exit_code == 0, result.output
        assert self._recur_of(sample_tasks_file, 1) == "every 2w"

    def test_weekday_list(self, sample_config: Path, sample_tasks_file: Path) -> None:
        result = self._set(sample_config, "1", "every mon, Thu")
        assert result.exit_code == 0
        assert self._recur_of(sample_tasks_file, 1) == "every mon,thu"

    def test_none_clears_pattern(self, sample_config: Path, sample_tasks_file: Path) -> None:
        result = self._set(sample_config, "4", "None")
        assert result.exit_code == 0
        assert "no longer recurs" in result.output
        assert self._recur_of(sample_tasks_file, 4) == ""

    def test_other_tasks_untouched(self, sample_config: Path, sample_tasks_file: Path) -> None:
        before = {t.index_id: t for t in load_tasks(sample_tasks_file)}
        self._set(sample_config, "1", "daily")
        after = {t.index_id: t for t in load_tasks(sample_tasks_file)}
        assert [after[i] for i in (2, 3, 4)] == [before[i] for i in (2, 3, 4)]

    @pytest.mark.parametrize("pattern", ["fortnightly", "every 0d", "every funday"])
    def test_invalid_pattern_leaves_file(
        self, sample_config: Path, sample_tasks_file: Path, pattern: str
    ) -> None:
        before = sample_tasks_file.read_text()
        result = self._set(sample_config, "1", pattern)
        assert result.exit_code == 1
        assert sample_tasks_file.read_text() == before

    def test_unknown_task(self, sample_config: Path, sample_tasks_file: Path) -> None:
        before = sample_tasks_file.read_text()
        result = self._set(sample_config, "99", "daily")
        assert result.exit_code == 2
        assert sample_tasks_file.read_text() == before

    def test_same_pattern_skips_write(self, sample_config: Path, sample_tasks_file: Path) -> None:
        mtime = sample_tasks_file.stat().st_mtime_ns
        result = self._set(sample_config, "4", "monthly")
        assert result.exit_code == 0
        assert sample_tasks_file.stat().st_mtime_ns == mtime

    def test_keeps_task_file_mode(self, sample_config: Path, sample_tasks_file: Path) -> None:
        sample_tasks_file.chmod(0o644)
        self._set(sample_config, "1", "weekly")
        assert stat.S_IMODE(sample_tasks_file.stat().st_mode) == 0o644
