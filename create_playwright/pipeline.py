"""create-playwright pipeline orchestrator.

Scaffolds a Playwright Test project in a fixed sequence of stages:

Init           -- Collect answers, inspect the target, identify every change.
PreCommands    -- Initialise the project and install dependencies.
WriteFiles     -- Write the generated config, examples and workflow files.
PatchIgnore    -- Add the Playwright entries to ``.gitignore``.
PatchManifest  -- Tidy ``package.json`` scripts.
PostCommands   -- Download browsers.

The first failure moves the run to ``Failed``; remaining stages are skipped
and nothing already written is rolled back.

Usage::

    create-playwright my-project
    create-playwright . --quiet --browser chromium --gha
    python -m create_playwright.pipeline my-project --ct
"""

from __future__ import annotations

import asyncio
import logging
import os
import sys
import time
import traceback
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel

import create_playwright
from create_playwright.config import Config, browsers_from_env
from create_playwright.package_manager import PackageManager, determine_package_manager
from create_playwright.prompts import collect_answers
from create_playwright.scaffolder.changes import ChangeSet, identify_changes, inspect_environment
from create_playwright.scaffolder.engine import AssetLoader
from create_playwright.scaffolder.errors import ScaffoldError
from create_playwright.scaffolder.files import write_all
from create_playwright.scaffolder.models import Answers, BROWSERS, EnvironmentFacts, Options
from create_playwright.scaffolder.patches import apply_ignore_patch, apply_manifest_patch
from create_playwright.scaffolder.planner import execute_commands
from create_playwright.scaffolder.templates import TemplateRenderer
from create_playwright.utils import (
    console,
    display_path,
    format_duration,
    print_error,
    print_stage_header,
    print_success,
    print_summary_table,
    print_warning,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Stages
# ---------------------------------------------------------------------------


class Stage(str, Enum):
    INIT = "Init"
    PRE_COMMANDS = "PreCommands"
    WRITE_FILES = "WriteFiles"
    PATCH_IGNORE = "PatchIgnore"
    PATCH_MANIFEST = "PatchManifest"
    POST_COMMANDS = "PostCommands"
    DONE = "Done"
    FAILED = "Failed"


STAGE_ORDER: tuple[Stage, ...] = (
    Stage.INIT,
    Stage.PRE_COMMANDS,
    Stage.WRITE_FILES,
    Stage.PATCH_IGNORE,
    Stage.PATCH_MANIFEST,
    Stage.POST_COMMANDS,
)


class RunResult(BaseModel):
    """Outcome of one :meth:`Generator.run`."""

    stage: Stage = Field(default=Stage.INIT, description="Terminal stage")
    completed: list[Stage] = Field(default_factory=list)
    failed_stage: Stage | None = Field(default=None)
    error: str | None = Field(default=None)
    written: list[str] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)
    duration: str = Field(default="")

    @property
    def success(self) -> bool:
        return self.stage is Stage.DONE


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------


class Generator:
    """Drives one scaffolding run against ``config.root_dir``.

    Attributes:
        config: Run configuration.
        package_manager: Command-string builder for the target project.
        answers: Setup answers; collected during Init when not supplied.
        changes: Files and commands identified during Init.
    """

    _STAGE_METHODS: dict[Stage, str] = {
        Stage.INIT: "_init",
        Stage.PRE_COMMANDS: "_pre_commands",
        Stage.WRITE_FILES: "_write_files",
        Stage.PATCH_IGNORE: "_patch_ignore",
        Stage.PATCH_MANIFEST: "_patch_manifest",
        Stage.POST_COMMANDS: "_post_commands",
    }

    def __init__(
        self,
        config: Config,
        answers: Answers | None = None,
        package_manager: PackageManager | None = None,
    ) -> None:
        self.config = config
        config.ensure_root()
        self.package_manager = package_manager or determine_package_manager(config.root_dir)
        self.answers = answers
        self.facts: EnvironmentFacts | None = None
        self.changes: ChangeSet | None = None
        self.loader = AssetLoader(config.assets_dir)
        self.renderer = TemplateRenderer()
        self.result = RunResult()

    @property
    def root_dir(self) -> Path:
        return self.config.root_dir

    # ------------------------------------------------------------------
    # Stage dispatch
    # ------------------------------------------------------------------

    async def run(self) -> RunResult:
        """Execute every stage in order, stopping at the first failure."""
        start = time.monotonic()
        self._print_prologue()

        for number, stage in enumerate(STAGE_ORDER, start=1):
            self.result.stage = stage
            print_stage_header(number, stage.value)
            try:
                await getattr(self, self._STAGE_METHODS[stage])()
            except ScaffoldError as exc:
                self._fail(stage, str(exc))
                break
            except Exception as exc:
                self._fail(stage, str(exc))
                console.print(f"[dim]{escape(traceback.format_exc())}[/dim]")
                break
            self.result.completed.append(stage)
            logger.info("Stage %s completed", stage.value)
        else:
            self.result.stage = Stage.DONE

        self.result.duration = format_duration(time.monotonic() - start)
        if self.result.success:
            self._print_epilogue()
        else:
            self._print_failure()
        return self.result

    def _fail(self, stage: Stage, message: str) -> None:
        self.result.stage = Stage.FAILED
        self.result.failed_stage = stage
        self.result.error = message
        logger.debug("Run failed in %s: %s", stage.value, message)
        print_error(f"{stage.value} failed: {escape(message)}")

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    async def _init(self) -> None:
        if self.answers is None:
            self.answers = collect_answers(self.config, self.package_manager)
        self.facts = inspect_environment(self.root_dir)
        self.changes = identify_changes(
            self.answers,
            self.facts,
            self.package_manager,
            self.loader,
            self.config.options,
        )
        console.print(
            f"  {len(self.changes.files)} file(s) to write, "
            f"{len(self.changes.plan.pre)} command(s) before and "
            f"{len(self.changes.plan.post)} after"
        )

    async def _pre_commands(self) -> None:
        assert self.changes is not None
        await execute_commands(self.root_dir, self.changes.plan.pre)

    async def _write_files(self) -> None:
        assert self.changes is not None
        report = await write_all(self.root_dir, self.changes.files)
        self.result.written.extend(report.written)
        self.result.skipped.extend(report.skipped)
        for path in report.written:
            console.print(f"  [dim]Writing {escape(path)}[/dim]")
        for path in report.skipped:
            print_warning(f"  {escape(path)} already exists, skipped")

    async def _patch_ignore(self) -> None:
        changed = await apply_ignore_patch(self.config.gitignore_path)
        console.print("  .gitignore updated" if changed else "  .gitignore already up to date")

    async def _patch_manifest(self) -> None:
        assert self.answers is not None
        ct_extension = self.answers.file_extension if self.answers.is_component_testing else None
        changed = await apply_manifest_patch(self.config.manifest_path, ct_extension)
        console.print("  package.json updated" if changed else "  package.json already up to date")

    async def _post_commands(self) -> None:
        assert self.changes is not None
        await execute_commands(self.root_dir, self.changes.plan.post)

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    def _print_prologue(self) -> None:
        console.print(
            Panel(
                "[yellow]Getting started with writing [bold]end-to-end[/bold] tests "
                "with [bold]Playwright[/bold]:[/yellow]\n"
                f"Initializing project in '{escape(display_path(self.root_dir))}'",
                title=f"[bold]create-playwright v{create_playwright.__version__}[/bold]",
                border_style="bright_cyan",
            )
        )

    def _print_epilogue(self) -> None:
        assert self.answers is not None
        console.print()
        print_summary_table(
            {
                "Files written": str(len(self.result.written)),
                "Files skipped": str(len(self.result.skipped)),
                "Duration": self.result.duration,
            },
            title="create-playwright",
        )
        console.print(self.render_epilogue(), highlight=False)
        print_success(f"Done in {self.result.duration}")

    def render_epilogue(self) -> str:
        """The "next steps" summary for the finished run."""
        assert self.answers is not None
        pm = self.package_manager
        root = str(self.root_dir.resolve())

        if self.answers.is_component_testing:
            return self.renderer.render(
                "epilogue_ct.txt.j2",
                {
                    "root_dir": root,
                    "first_command": f"{pm.cli} run test-ct",
                    "commands": [
                        (f"{pm.cli} run test-ct", "Runs the component tests."),
                        (
                            f"{pm.cli} run test-ct -- --project=chromium",
                            "Runs the tests only on Desktop Chrome.",
                        ),
                        (f"{pm.cli} run test-ct App.test.ts", "Runs the tests in the specific file."),
                        (f"{pm.cli} run test-ct -- --debug", "Runs the tests in debug mode."),
                    ],
                },
            )

        cd_path = display_path(self.root_dir)
        prefix = "" if cd_path == "." else cd_path
        ext = self.answers.file_extension

        def _shown(relative: str) -> str:
            return os.path.join(".", prefix, relative)

        return self.renderer.render(
            "epilogue.txt.j2",
            {
                "root_dir": root,
                "cd_path": prefix,
                "first_command": pm.run_playwright_test(),
                "commands": [
                    (pm.run_playwright_test(), "Runs the end-to-end tests."),
                    (pm.run_playwright_test("--ui"), "Starts the interactive UI mode."),
                    (
                        pm.run_playwright_test("--project=chromium"),
                        "Runs the tests only on Desktop Chrome.",
                    ),
                    (pm.run_playwright_test("example"), "Runs the tests in a specific file."),
                    (pm.run_playwright_test("--debug"), "Runs the tests in debug mode."),
                    (pm.npx("playwright", "codegen"), "Auto generate tests with Codegen."),
                ],
                "files": [
                    (
                        _shown(f"{self.answers.test_dir}/example.spec.{ext}"),
                        "Example end-to-end test",
                    ),
                    (
                        _shown(f"tests-examples/demo-todo-app.spec.{ext}"),
                        "Demo Todo App end-to-end tests",
                    ),
                    (_shown(f"playwright.config.{ext}"), "Playwright Test configuration"),
                ],
            },
        )

    def _print_failure(self) -> None:
        completed = ", ".join(s.value for s in self.result.completed) or "none"
        console.print()
        console.print(
            Panel(
                "\n".join(
                    [
                        "[bold red]SCAFFOLDING FAILED[/bold red]",
                        "",
                        f"Stage     : {self.result.failed_stage.value if self.result.failed_stage else '?'}",
                        f"Completed : {completed}",
                        f"Error     : {escape(self.result.error or '')}",
                        f"Duration  : {self.result.duration}",
                    ]
                ),
                title="[bold]create-playwright[/bold]",
                border_style="bold red",
            )
        )


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """Route ``logging`` records through Rich."""
    level = logging.DEBUG if debug else logging.INFO if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=debug)],
        force=True,
    )


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``create-playwright``."""
    import argparse

    parser = argparse.ArgumentParser(
        prog="create-playwright",
        description="Getting started with writing end-to-end tests with Playwright.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  create-playwright my-project\n"
            "  create-playwright . --quiet --browser chromium --gha\n"
            "  create-playwright my-components --ct\n"
        ),
    )
    parser.add_argument(
        "root_dir",
        nargs="?",
        default=None,
        help="Target directory (default: $CREATE_PLAYWRIGHT_ROOT_DIR or .)",
    )
    parser.add_argument(
        "--browser",
        action="append",
        choices=BROWSERS,
        default=[],
        help="Browser to set up; repeat for several (default: $CREATE_PLAYWRIGHT_BROWSERS or all)",
    )
    parser.add_argument("--no-browsers", action="store_true", help="Do not download browsers")
    parser.add_argument("--no-examples", action="store_true", help="Do not create example tests")
    parser.add_argument("--next", action="store_true", help="Install the @next version")
    parser.add_argument("--beta", action="store_true", help="Install the @beta version")
    parser.add_argument("--ct", action="store_true", help="Set up component testing")
    parser.add_argument("--quiet", action="store_true", help="Do not ask questions")
    parser.add_argument("--gha", action="store_true", help="Add a GitHub Actions workflow")
    parser.add_argument(
        "--install-deps", action="store_true", help="Install OS dependencies for the browsers"
    )
    parser.add_argument("--lang", choices=("ts", "js"), default=None, help="Language")
    parser.add_argument("--verbose", "-v", action="store_true", help="Informational logging")
    parser.add_argument("--debug", action="store_true", help="Debug logging")

    args = parser.parse_args(argv)
    setup_logging(verbose=args.verbose, debug=args.debug)

    overrides: dict[str, Any] = {}
    if args.root_dir is not None:
        overrides["root_dir"] = Path(args.root_dir)

    try:
        config = Config.from_env(
            **overrides,
            options=Options(
                browsers=args.browser or browsers_from_env(),
                no_browsers=args.no_browsers,
                no_examples=args.no_examples,
                next=args.next,
                beta=args.beta,
                ct=args.ct,
                quiet=args.quiet,
                gha=args.gha,
                install_deps=args.install_deps,
                lang=args.lang,
            ),
        )
    except ValidationError as exc:
        console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
        sys.exit(2)

    generator = Generator(config)
    result = asyncio.run(generator.run())
    if not result.success:
        sys.exit(1)


if __name__ == "__main__":
    main()
