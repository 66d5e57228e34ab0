"""Unit tests for TemplateRenderer (create_playwright.scaffolder.templates)."""

from __future__ import annotations

from pathlib import Path

import pytest
from jinja2 import UndefinedError

from create_playwright.scaffolder.templates import TemplateRenderer


pytestmark = pytest.mark.unit


E2E_CONTEXT = {
    "root_dir": "/work/my-app",
    "cd_path": "my-app",
    "first_command": "npx playwright test",
    "commands": [
        ("npx playwright test", "Runs the end-to-end tests."),
        ("npx playwright test --ui", "Starts the interactive UI mode."),
    ],
    "files": [("./my-app/tests/example.spec.ts", "Example end-to-end test")],
}


class TestTemplateRenderer:
    def test_default_template_dir(self):
        renderer = TemplateRenderer()
        assert (renderer.template_dir / "epilogue.txt.j2").is_file()

    def test_render_e2e_epilogue(self):
        out = TemplateRenderer().render("epilogue.txt.j2", E2E_CONTEXT)
        assert "Created a Playwright Test project at /work/my-app" in out
        assert "[cyan]npx playwright test --ui[/cyan]" in out
        assert "    Starts the interactive UI mode." in out
        assert "[cyan]cd my-app[/cyan]" in out
        assert "  - ./my-app/tests/example.spec.ts - Example end-to-end test" in out

    def test_cd_line_omitted_for_current_directory(self):
        out = TemplateRenderer().render("epilogue.txt.j2", {**E2E_CONTEXT, "cd_path": ""})
        assert "cd " not in out

    def test_render_ct_epilogue(self):
        out = TemplateRenderer().render(
            "epilogue_ct.txt.j2",
            {
                "root_dir": "/work/app",
                "first_command": "npm run test-ct",
                "commands": [("npm run test-ct", "Runs the component tests.")],
            },
        )
        assert "[cyan]npm run test-ct[/cyan]" in out
        assert "check out the following files" not in out

    def test_markup_filter_escapes_brackets(self):
        out = TemplateRenderer().render(
            "epilogue.txt.j2", {**E2E_CONTEXT, "root_dir": "/work/[red]app"}
        )
        assert "/work/\\[red]app" in out

    def test_missing_variable_raises(self):
        with pytest.raises(UndefinedError):
            TemplateRenderer().render("epilogue.txt.j2", {"root_dir": "/x"})

    def test_custom_template_dir(self, tmp_path: Path):
        (tmp_path / "hello.j2").write_text("Hello {{ name }}!", encoding="utf-8")
        assert TemplateRenderer(tmp_path).render("hello.j2", {"name": "you"}) == "Hello you!"

    def test_markup_filter_in_custom_dir(self, tmp_path: Path):
        (tmp_path / "note.j2").write_text("{{ value | markup }}", encoding="utf-8")
        out = TemplateRenderer(tmp_path).render("note.j2", {"value": "[b]"})
        assert out == "\\[b]"
