"""Setup questions.

Answers come from one of three places, checked in order:

1. the ``TEST_OPTIONS`` environment variable (a JSON object, used by the
   end-to-end tests of this tool),
2. ``--quiet`` defaults derived from the CLI options,
3. interactive questions asked with ``rich.prompt``.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Mapping

from rich.prompt import Confirm, Prompt

from create_playwright.config import Config
from create_playwright.package_manager import PackageManager
from create_playwright.scaffolder.models import Answers, Framework, Language
from create_playwright.utils import console

TEST_OPTIONS_ENV = "TEST_OPTIONS"


def default_test_dir(root_dir: Path) -> str:
    """``e2e`` when a ``tests`` directory already exists, else ``tests``."""
    return "e2e" if (root_dir / "tests").exists() else "tests"


def quiet_answers(config: Config) -> Answers:
    """Answers for ``--quiet`` runs, taken from the CLI options alone."""
    options = config.options
    return Answers(
        test_dir=default_test_dir(config.root_dir),
        language=Language.JAVASCRIPT if options.lang == "js" else Language.TYPESCRIPT,
        framework=None,
        install_github_actions=options.gha,
        install_playwright_dependencies=options.install_deps,
        install_playwright_browsers=not options.no_browsers,
    )


def collect_answers(
    config: Config,
    package_manager: PackageManager,
    environ: Mapping[str, str] | None = None,
) -> Answers:
    """Resolve the setup answers for *config*."""
    environ = os.environ if environ is None else environ
    if environ.get(TEST_OPTIONS_ENV):
        return Answers.model_validate_json(environ[TEST_OPTIONS_ENV])
    if config.options.quiet:
        return quiet_answers(config)
    return ask_questions(config, package_manager)


def ask_questions(config: Config, package_manager: PackageManager) -> Answers:
    """Ask the setup questions interactively."""
    options = config.options
    root = config.root_dir
    pm = package_manager
    values: dict[str, object] = {}

    if (root / "tsconfig.json").exists():
        values["language"] = Language.TYPESCRIPT
    elif options.lang:
        values["language"] = Language.JAVASCRIPT if options.lang == "js" else Language.TYPESCRIPT
    else:
        choice = Prompt.ask(
            "Do you want to use TypeScript or JavaScript?",
            choices=[lang.value for lang in Language],
            default=Language.TYPESCRIPT.value,
            console=console,
        )
        values["language"] = Language(choice)

    if options.ct:
        choice = Prompt.ask(
            "Which framework do you use? (experimental) "
            + ", ".join(f"{f.value}={f.label}" for f in Framework),
            choices=[f.value for f in Framework],
            default=Framework.REACT.value,
            console=console,
        )
        values["framework"] = Framework(choice)
    else:
        values["test_dir"] = Prompt.ask(
            "Where to put your end-to-end tests?",
            default=default_test_dir(root),
            console=console,
        )
        values["install_github_actions"] = options.gha or Confirm.ask(
            "Add a GitHub Actions workflow?", default=False, console=console
        )

    if options.no_browsers or options.browsers:
        values["install_playwright_browsers"] = not options.no_browsers
    else:
        values["install_playwright_browsers"] = Confirm.ask(
            "Install Playwright browsers (can be done manually via "
            f"'{pm.npx('playwright', 'install')}')?",
            default=True,
            console=console,
        )

    # OS dependencies only exist on Linux.
    if sys.platform.startswith("linux"):
        values["install_playwright_dependencies"] = options.install_deps or Confirm.ask(
            "Install Playwright operating system dependencies (requires sudo / root - "
            f"can be done manually via 'sudo {pm.npx('playwright', 'install-deps')}')?",
            default=False,
            console=console,
        )

    return Answers(**values)
