"""Command planning and execution.

:func:`plan_commands` turns the setup answers into two ordered command
sequences: ``pre`` commands run before any file is written (project init,
dependency installs) and ``post`` commands run after every file has been
written and patched (browser downloads).  :func:`execute_commands` runs a
sequence to completion, one command at a time, stopping at the first failure.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Sequence

from rich.markup import escape

from create_playwright.utils import console, run_command

from .errors import CommandError
from .models import Answers, Command, CommandPlan, EnvironmentFacts, Options, Phase

if TYPE_CHECKING:
    from create_playwright.package_manager import PackageManager

logger = logging.getLogger(__name__)

TEST_PACKAGE = "@playwright/test"
DOTENV_PACKAGE = "dotenv"
TOOLS_PACKAGE = "@dxp/playwright-tools"
CT_PACKAGE_PREFIX = "@playwright/experimental-ct-"
NODE_TYPES_PACKAGE = "@types/node"


def ct_package_name(answers: Answers) -> str | None:
    """Component-testing package for the selected framework, if any."""
    if answers.framework is None:
        return None
    return f"{CT_PACKAGE_PREFIX}{answers.framework.value}"


def plan_commands(
    answers: Answers,
    facts: EnvironmentFacts,
    package_manager: PackageManager,
    options: Options | None = None,
) -> CommandPlan:
    """Build the ordered command plan for one run.

    Args:
        answers: Resolved setup choices.
        facts: What already exists in the target directory.
        package_manager: Source of every shell string.
        options: CLI selections (package tag, browser subset).

    Returns:
        A :class:`CommandPlan`; each sequence keeps insertion order.
    """
    options = options or Options()
    tag = options.package_tag
    pm = package_manager
    plan = CommandPlan()

    if not facts.has_manifest:
        plan.add(Command(name=f"Initializing {pm.name} project", command=pm.init()))

    if not answers.is_component_testing:
        plan.add(
            Command(
                name="Installing Playwright Test",
                command=pm.install_dev_dependency(f"{TEST_PACKAGE}{tag}"),
            )
        )
        plan.add(
            Command(
                name="Installing dotenv",
                command=pm.install_dev_dependency(DOTENV_PACKAGE),
            )
        )
        plan.add(
            Command(
                name="Installing dxp/playwright-tools",
                command=pm.install_dev_dependency(f"{TOOLS_PACKAGE}{tag}"),
            )
        )
    else:
        plan.add(
            Command(
                name="Installing Playwright Component Testing",
                command=pm.install_dev_dependency(f"{ct_package_name(answers)}{tag}"),
            )
        )

    if not facts.has_node_types:
        plan.add(
            Command(
                name="Installing Types",
                command=pm.install_dev_dependency(NODE_TYPES_PACKAGE),
            )
        )

    if answers.install_playwright_browsers:
        command = pm.npx("playwright", "install")
        if answers.install_playwright_dependencies:
            command += " --with-deps"
        if options.browsers:
            command += " " + " ".join(options.browsers)
        plan.add(Command(name="Downloading browsers", command=command, phase=Phase.POST))

    logger.debug("Planned %d pre and %d post commands", len(plan.pre), len(plan.post))
    return plan


async def execute_commands(cwd: str | Path, commands: Sequence[Command]) -> None:
    """Run *commands* in order, each to completion.

    Output is streamed to the terminal.  There is no timeout: a hung command
    blocks the run.

    Raises:
        CommandError: On the first non-zero exit; later commands do not run.
    """
    for command in commands:
        console.print(
            f"[bold]{escape(command.name)}[/bold] [dim]({escape(command.command)})[/dim]"
        )
        returncode, _, _ = await run_command(
            command.command, cwd=cwd, timeout=None, capture=False
        )
        if returncode != 0:
            raise CommandError(command.name, command.command, returncode)
        logger.info("%s finished", command.name)
