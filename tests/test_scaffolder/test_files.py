"""Tests for the generated file map and writer (create_playwright.scaffolder.files)."""

from __future__ import annotations

from pathlib import Path

import pytest

from create_playwright.scaffolder.errors import DuplicateFileError, ScaffoldError, UnsafePathError
from create_playwright.scaffolder.files import FileMap, write_all


# ---------------------------------------------------------------------------
# FileMap
# ---------------------------------------------------------------------------


@pytest.mark.unit
class TestFileMap:
    def test_keeps_insertion_order(self):
        files = FileMap()
        files.add("b.ts", "b")
        files.add("a.ts", "a")
        assert list(files) == ["b.ts", "a.ts"]
        assert len(files) == 2

    def test_duplicate_path_rejected(self):
        files = FileMap()
        files.add("playwright.config.ts", "x")
        with pytest.raises(DuplicateFileError) as exc_info:
            files.add("playwright.config.ts", "y")
        assert exc_info.value.path == "playwright.config.ts"
        assert files["playwright.config.ts"] == "x"

    def test_equivalent_paths_collide(self):
        files = FileMap()
        files.add(Path("tests") / "example.spec.ts", "x")
        with pytest.raises(DuplicateFileError):
            files.add("tests/example.spec.ts", "y")

    def test_duplicate_is_a_scaffold_error(self):
        files = FileMap()
        files.add("a", "")
        with pytest.raises(ScaffoldError):
            files.add("a", "")

    @pytest.mark.parametrize(
        "path",
        ["/abs/example.spec.ts", "../outside/example.spec.ts", "tests/../../x.ts"],
    )
    def test_paths_outside_root_rejected(self, path: str):
        with pytest.raises(UnsafePathError) as exc_info:
            FileMap().add(path, "x")
        assert exc_info.value.path == path

    def test_unsafe_path_is_a_scaffold_error(self):
        with pytest.raises(ScaffoldError):
            FileMap().add(Path("/tmp") / "x.ts", "x")

    def test_dotted_names_allowed(self):
        files = FileMap()
        files.add("playwright/.cache-free/..name.ts", "x")
        assert "playwright/.cache-free/..name.ts" in files

    def test_contains(self):
        files = FileMap()
        files.add("playwright/index.html", "<html>")
        assert "playwright/index.html" in files
        assert Path("playwright/index.html") in files
        assert "missing" not in files
        assert 42 not in files


# ---------------------------------------------------------------------------
# write_all
# ---------------------------------------------------------------------------


@pytest.mark.unit
class TestWriteAll:
    async def test_writes_nested_files(self, tmp_project_dir: Path):
        files = FileMap()
        files.add("playwright.config.ts", "config")
        files.add(".github/workflows/playwright.yml", "name: Playwright Tests\n")
        files.add("logo.bin", b"\x00\x01")

        report = await write_all(tmp_project_dir, files)

        assert report.written == [
            "playwright.config.ts",
            ".github/workflows/playwright.yml",
            "logo.bin",
        ]
        assert report.skipped == []
        assert (tmp_project_dir / ".github/workflows/playwright.yml").read_text() == (
            "name: Playwright Tests\n"
        )
        assert (tmp_project_dir / "logo.bin").read_bytes() == b"\x00\x01"

    async def test_existing_files_skipped(self, tmp_project_dir: Path):
        (tmp_project_dir / "playwright.config.ts").write_text("mine", encoding="utf-8")
        files = FileMap()
        files.add("playwright.config.ts", "generated")
        files.add("tests/example.spec.ts", "test")

        report = await write_all(tmp_project_dir, files)

        assert report.skipped == ["playwright.config.ts"]
        assert report.written == ["tests/example.spec.ts"]
        assert (tmp_project_dir / "playwright.config.ts").read_text() == "mine"

    async def test_force_overwrites(self, tmp_project_dir: Path):
        (tmp_project_dir / "playwright.config.ts").write_text("mine", encoding="utf-8")
        files = FileMap()
        files.add("playwright.config.ts", "generated")

        report = await write_all(tmp_project_dir, files, force=True)

        assert report.written == ["playwright.config.ts"]
        assert (tmp_project_dir / "playwright.config.ts").read_text() == "generated"

    async def test_failed_write_lets_siblings_finish(self, tmp_project_dir: Path):
        (tmp_project_dir / "blocker").write_text("a file, not a directory")
        files = FileMap()
        files.add("blocker/playwright.config.ts", "x")
        files.add("tests/example.spec.ts", "test")
        files.add("playwright.config.ts", "config")

        with pytest.raises(OSError):
            await write_all(tmp_project_dir, files)

        assert (tmp_project_dir / "tests" / "example.spec.ts").read_text() == "test"
        assert (tmp_project_dir / "playwright.config.ts").read_text() == "config"

    async def test_empty_map(self, tmp_project_dir: Path):
        report = await write_all(tmp_project_dir, FileMap())
        assert report.written == [] and report.skipped == []
