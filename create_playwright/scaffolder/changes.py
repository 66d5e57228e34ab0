"""Identify every change a run will make before anything is applied.

:func:`identify_changes` renders all template assets into a :class:`FileMap`
and plans the commands.  Rendering happens up front so a malformed asset
aborts the run before any command has been executed.
"""

from __future__ import annotations

import configparser
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from .engine import AssetLoader
from .files import FileMap
from .models import Answers, CommandPlan, EnvironmentFacts, Options
from .patches import Manifest
from .planner import NODE_TYPES_PACKAGE, ct_package_name, plan_commands

if TYPE_CHECKING:
    from create_playwright.package_manager import PackageManager

logger = logging.getLogger(__name__)

WORKFLOW_PATH = ".github/workflows/playwright.yml"
EXAMPLES_DIR = "tests-examples"


@dataclass
class ChangeSet:
    """Files to generate and commands to run for one scaffolding pass."""
    files: FileMap
    plan: CommandPlan


def inspect_environment(root: str | Path) -> EnvironmentFacts:
    """Inspect *root* for an existing manifest, ``@types/node`` and ``.npmrc``."""
    root_path = Path(root)
    manifest_path = root_path / "package.json"
    manifest = Manifest.load(manifest_path)
    return EnvironmentFacts(
        has_manifest=manifest_path.exists(),
        has_node_types=manifest is not None and manifest.has_dependency(NODE_TYPES_PACKAGE),
        package_lock_disabled=_package_lock_disabled(root_path / ".npmrc"),
    )


def identify_changes(
    answers: Answers,
    facts: EnvironmentFacts,
    package_manager: PackageManager,
    loader: AssetLoader,
    options: Options | None = None,
) -> ChangeSet:
    """Render the generated file set and plan the commands.

    Raises:
        AssetError: If an asset is missing or its section markers are
            malformed.
        DuplicateFileError: If two steps produce the same path.
    """
    options = options or Options()
    pm = package_manager
    files = FileMap()
    ext = answers.file_extension
    sections = options.section_directives()
    install_examples = not options.no_examples

    if answers.is_component_testing:
        install_examples = False
        name = f"playwright-ct.config.{ext}"
        files.add(
            name,
            loader.render(
                name,
                {"testDir": answers.test_dir, "ctPackageName": ct_package_name(answers) or ""},
                sections,
            ),
        )
    else:
        name = f"playwright.config.{ext}"
        files.add(name, loader.render(name, {"testDir": answers.test_dir}, sections))

    if answers.install_github_actions:
        install_deps = pm.i() if facts.package_lock_disabled else pm.ci()
        run_tests = (
            pm.run("test-ct") if answers.is_component_testing else pm.run_playwright_test()
        )
        files.add(
            WORKFLOW_PATH,
            loader.render(
                "github-actions.yml",
                {
                    "installDepsCommand": install_deps,
                    "installPlaywrightCommand": pm.npx("playwright", "install --with-deps"),
                    "runTestsCommand": run_tests,
                },
            ),
        )

    if install_examples:
        files.add(
            Path(answers.test_dir) / f"example.spec.{ext}",
            loader.read(f"example.spec.{ext}"),
        )
        files.add(
            Path(EXAMPLES_DIR) / f"demo-todo-app.spec.{ext}",
            loader.read(f"demo-todo-app.spec.{ext}"),
        )

    if answers.is_component_testing:
        ct_ext = answers.ct_file_extension
        files.add(
            "playwright/index.html",
            loader.render("playwright/index.html", {"extension": ct_ext}),
        )
        files.add(f"playwright/index.{ct_ext}", loader.read("playwright/index.js"))

    plan = plan_commands(answers, facts, pm, options)
    logger.debug("Identified %d files and %d commands", len(files), len(plan))
    return ChangeSet(files=files, plan=plan)


def _package_lock_disabled(npmrc: Path) -> bool:
    if not npmrc.exists():
        return False
    parser = configparser.ConfigParser(strict=False, interpolation=None)
    try:
        parser.read_string("[npmrc]\n" + npmrc.read_text(encoding="utf-8"))
    except (OSError, configparser.Error) as exc:
        logger.debug("Ignoring unreadable %s: %s", npmrc, exc)
        return False
    return parser.get("npmrc", "package-lock", fallback="").strip().lower() == "false"
