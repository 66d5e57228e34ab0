"""Unit tests for utility functions (create_playwright.utils).

Tests cover:
- run_command (success, failure, stderr, cwd, timeout, capture=False)
- format_duration
- display_path
- Rich output helpers (print_stage_header, print_summary_table, etc.)
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from create_playwright.utils import (
    display_path,
    format_duration,
    print_error,
    print_stage_header,
    print_success,
    print_summary_table,
    print_warning,
    run_command,
)


# ---------------------------------------------------------------------------
# run_command
# ---------------------------------------------------------------------------


class TestRunCommand:
    @pytest.mark.unit
    async def test_successful_command_string(self):
        returncode, stdout, _ = await run_command("echo hello && echo world")
        assert returncode == 0
        assert stdout == "hello\nworld"

    @pytest.mark.unit
    async def test_failed_command(self):
        returncode, _, _ = await run_command("exit 4")
        assert returncode == 4

    @pytest.mark.unit
    async def test_stderr_captured(self):
        _, _, stderr = await run_command("echo oops 1>&2")
        assert stderr == "oops"

    @pytest.mark.unit
    async def test_command_with_cwd(self, tmp_path: Path):
        (tmp_path / "marker.txt").write_text("x")
        returncode, stdout, _ = await run_command("ls", cwd=tmp_path)
        assert returncode == 0
        assert "marker.txt" in stdout

    @pytest.mark.unit
    async def test_timeout(self):
        returncode, _, stderr = await run_command("sleep 5", timeout=0.2)
        assert returncode == -1
        assert "timed out" in stderr

    @pytest.mark.unit
    async def test_no_timeout(self):
        returncode, _, _ = await run_command("true", timeout=None)
        assert returncode == 0

    @pytest.mark.unit
    async def test_capture_false_returns_empty_strings(self, tmp_path: Path):
        returncode, stdout, stderr = await run_command(
            "echo hidden > out.txt", cwd=tmp_path, capture=False
        )
        assert (returncode, stdout, stderr) == (0, "", "")
        assert (tmp_path / "out.txt").read_text().strip() == "hidden"


# ---------------------------------------------------------------------------
# format_duration
# ---------------------------------------------------------------------------


class TestFormatDuration:
    @pytest.mark.unit
    @pytest.mark.parametrize(
        ("seconds", "expected"),
        [
            (0, "0.0s"),
            (3.7, "3.7s"),
            (65.2, "1m 5s"),
            (3661.0, "1h 1m 1s"),
            (7200, "2h 0s"),
            (-5, "0.0s"),
        ],
    )
    def test_format(self, seconds: float, expected: str):
        assert format_duration(seconds) == expected


# ---------------------------------------------------------------------------
# display_path
# ---------------------------------------------------------------------------


class TestDisplayPath:
    @pytest.mark.unit
    def test_same_directory(self, tmp_path: Path):
        assert display_path(tmp_path, tmp_path) == "."

    @pytest.mark.unit
    def test_child_directory(self, tmp_path: Path):
        assert display_path(tmp_path / "my-app", tmp_path) == "my-app"

    @pytest.mark.unit
    def test_sibling_directory(self, tmp_path: Path):
        (tmp_path / "a").mkdir()
        assert display_path(tmp_path / "b", tmp_path / "a") == str(Path("..") / "b")

    @pytest.mark.unit
    def test_defaults_to_cwd(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.chdir(tmp_path)
        assert display_path(tmp_path / "x") == "x"


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


class TestOutputHelpers:
    @pytest.mark.unit
    def test_print_stage_header(self):
        with patch("create_playwright.utils.console") as mock_console:
            print_stage_header(3, "WriteFiles")
        rule = mock_console.print.call_args[0][0]
        assert "3. WriteFiles" in str(rule.title)

    @pytest.mark.unit
    def test_print_summary_table(self):
        with patch("create_playwright.utils.console") as mock_console:
            print_summary_table({"Files": "4", "Commands": "5"}, title="Run")
        table = mock_console.print.call_args_list[0][0][0]
        assert table.title == "Run"
        assert table.row_count == 2

    @pytest.mark.unit
    @pytest.mark.parametrize(
        ("helper", "style"),
        [(print_success, "green"), (print_error, "red"), (print_warning, "yellow")],
    )
    def test_message_helpers(self, helper, style: str):
        with patch("create_playwright.utils.console") as mock_console:
            helper("hello")
        printed = mock_console.print.call_args[0][0]
        assert "hello" in printed
        assert style in printed
