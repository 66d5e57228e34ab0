"""Shared pytest fixtures for the create-playwright test suite.

Provides reusable fixtures for:
- Temporary target project directories
- Default and component-testing answers
- A package manager whose commands are harmless shell builtins
- The packaged asset loader
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from create_playwright.config import DEFAULT_ASSETS_DIR
from create_playwright.package_manager import NPM
from create_playwright.scaffolder.engine import AssetLoader
from create_playwright.scaffolder.models import Answers, Framework, Language


# ---------------------------------------------------------------------------
# Paths & Directories
# ---------------------------------------------------------------------------

@pytest.fixture
def tmp_project_dir(tmp_path: Path) -> Path:
    """Empty target directory (auto-cleanup)."""
    project_dir = tmp_path / "test-project"
    project_dir.mkdir()
    yield project_dir


@pytest.fixture
def write_manifest(tmp_project_dir: Path):
    """Factory that writes ``package.json`` into the target directory."""

    def factory(data: dict[str, Any] | str) -> Path:
        path = tmp_project_dir / "package.json"
        text = data if isinstance(data, str) else json.dumps(data, indent=2) + "\n"
        path.write_text(text, encoding="utf-8")
        return path

    return factory


# ---------------------------------------------------------------------------
# Answers
# ---------------------------------------------------------------------------

@pytest.fixture
def e2e_answers() -> Answers:
    """TypeScript end-to-end setup with CI and browsers."""
    return Answers(
        test_dir="tests",
        language=Language.TYPESCRIPT,
        install_github_actions=True,
        install_playwright_dependencies=False,
        install_playwright_browsers=True,
    )


@pytest.fixture
def ct_answers() -> Answers:
    """TypeScript React component-testing setup."""
    return Answers(
        test_dir="tests",
        language=Language.TYPESCRIPT,
        framework=Framework.REACT,
        install_github_actions=True,
        install_playwright_dependencies=False,
        install_playwright_browsers=True,
    )


# ---------------------------------------------------------------------------
# Collaborators
# ---------------------------------------------------------------------------

@pytest.fixture
def npm() -> NPM:
    return NPM()


@pytest.fixture
def asset_loader() -> AssetLoader:
    """Loader over the packaged template assets."""
    return AssetLoader(DEFAULT_ASSETS_DIR)


class RecordingPackageManager:
    """Package manager whose commands append their label to ``commands.log``.

    Lets tests run the real pipeline without npm or network access while
    still observing execution order.
    """

    name = "Recording"
    cli = "rec"

    def __init__(self, log: Path, fail_on: str | None = None) -> None:
        self.log = log
        self.fail_on = fail_on

    def _cmd(self, label: str) -> str:
        status = "exit 3" if self.fail_on and self.fail_on in label else "true"
        return f"echo '{label}' >> '{self.log}' && {status}"

    def init(self) -> str:
        return self._cmd("init") + " && echo '{\"name\": \"demo\"}' > package.json"

    def npx(self, command: str, args: str) -> str:
        # Words the planner appends (flags, browsers) become positional
        # arguments of the inner script, so they reach the log too.
        script = 'echo "npx $*" >> "$0"'
        if self.fail_on:
            script += f'; case "npx $*" in *"{self.fail_on}"*) exit 3;; esac'
        return f"sh -c '{script}' '{self.log}' {command} {args}"

    def ci(self) -> str:
        return "rec ci"

    def i(self) -> str:
        return "rec i"

    def install_dev_dependency(self, name: str) -> str:
        return self._cmd(f"add {name}")

    def run_playwright_test(self, args: str = "") -> str:
        return f"rec playwright test {args}".strip()

    def run(self, script: str) -> str:
        return f"rec run {script}"


@pytest.fixture
def make_recording_pm(tmp_path: Path):
    """Factory for a :class:`RecordingPackageManager` logging under *tmp_path*."""

    def factory(fail_on: str | None = None) -> RecordingPackageManager:
        return RecordingPackageManager(tmp_path / "commands.log", fail_on)

    return factory


@pytest.fixture
def recording_pm(make_recording_pm) -> RecordingPackageManager:
    return make_recording_pm()
