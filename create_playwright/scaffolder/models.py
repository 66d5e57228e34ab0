"""Pydantic v2 models for the Playwright project scaffolder.

Defines the value objects that flow between the prompt collaborator, the
command planner, the file patch applier and the orchestrator: setup answers,
CLI options, environment facts, commands and the command plan.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class Language(str, Enum):
    """Language of the generated configuration and example files."""
    TYPESCRIPT = "TypeScript"
    JAVASCRIPT = "JavaScript"

    @property
    def extension(self) -> str:
        return "ts" if self is Language.TYPESCRIPT else "js"


class Framework(str, Enum):
    """UI frameworks supported by Playwright component testing."""
    REACT = "react"
    REACT17 = "react17"
    VUE = "vue"
    VUE2 = "vue2"
    SVELTE = "svelte"
    SOLID = "solid"

    @property
    def label(self) -> str:
        labels: dict[Framework, str] = {
            Framework.REACT: "React 18",
            Framework.REACT17: "React 17",
            Framework.VUE: "Vue 3",
            Framework.VUE2: "Vue 2",
            Framework.SVELTE: "Svelte",
            Framework.SOLID: "Solid",
        }
        return labels[self]

    @property
    def uses_jsx(self) -> bool:
        return self in (Framework.REACT, Framework.REACT17, Framework.SOLID)


class Phase(str, Enum):
    """When a command runs relative to file generation."""
    PRE = "pre"
    POST = "post"


class SectionState(str, Enum):
    """Inclusion mode of a marked template section."""
    SHOW = "show"
    HIDE = "hide"
    COMMENT = "comment"


BROWSERS: tuple[str, ...] = ("chromium", "firefox", "webkit")


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------

class Answers(BaseModel):
    """Resolved setup choices.

    Field aliases match the camelCase keys accepted through the
    ``TEST_OPTIONS`` environment variable.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    test_dir: str = Field(default="tests", alias="testDir")
    language: Language = Field(default=Language.TYPESCRIPT)
    framework: Optional[Framework] = Field(default=None)
    install_github_actions: bool = Field(default=False, alias="installGitHubActions")
    install_playwright_dependencies: bool = Field(
        default=False, alias="installPlaywrightDependencies"
    )
    install_playwright_browsers: bool = Field(
        default=True, alias="installPlaywrightBrowsers"
    )

    @property
    def is_component_testing(self) -> bool:
        return self.framework is not None

    @property
    def file_extension(self) -> str:
        return self.language.extension

    @property
    def ct_file_extension(self) -> str:
        """Extension of the component-testing bootstrap script."""
        jsx = self.framework is not None and self.framework.uses_jsx
        if self.language is Language.TYPESCRIPT:
            return "tsx" if jsx else "ts"
        return "jsx" if jsx else "js"


class Options(BaseModel):
    """Command-line selections that shape the plan beyond the answers."""
    model_config = ConfigDict(frozen=True)

    browsers: list[str] = Field(
        default_factory=list, description="Restrict browsers to this subset"
    )
    no_browsers: bool = Field(default=False, description="Skip browser download")
    no_examples: bool = Field(default=False, description="Skip example test files")
    next: bool = Field(default=False, description="Install @next packages")
    beta: bool = Field(default=False, description="Install @beta packages")
    ct: bool = Field(default=False, description="Set up component testing")
    quiet: bool = Field(default=False, description="Do not ask questions")
    gha: bool = Field(default=False, description="Add a GitHub Actions workflow")
    install_deps: bool = Field(default=False, description="Install OS dependencies")
    lang: Optional[str] = Field(default=None, description="'ts' or 'js'")

    @property
    def package_tag(self) -> str:
        if self.next:
            return "@next"
        if self.beta:
            return "@beta"
        return ""

    def section_directives(self) -> dict[str, SectionState]:
        """Per-browser section states: unselected browsers are commented out."""
        return {
            browser: (
                SectionState.SHOW
                if not self.browsers or browser in self.browsers
                else SectionState.COMMENT
            )
            for browser in BROWSERS
        }


class EnvironmentFacts(BaseModel):
    """Facts about the target directory that steer the command plan."""
    model_config = ConfigDict(frozen=True)

    has_manifest: bool = False
    has_node_types: bool = False
    package_lock_disabled: bool = False


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

class Command(BaseModel):
    """A named shell invocation tagged with its phase."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Human-readable label")
    command: str = Field(..., description="Shell invocation")
    phase: Phase = Field(default=Phase.PRE)


class CommandPlan(BaseModel):
    """Ordered pre- and post-phase command sequences."""

    pre: list[Command] = Field(default_factory=list)
    post: list[Command] = Field(default_factory=list)

    def add(self, command: Command) -> None:
        if command.phase is Phase.PRE:
            self.pre.append(command)
        else:
            self.post.append(command)

    def ordered(self) -> list[Command]:
        """All commands in execution order."""
        return [*self.pre, *self.post]

    def __len__(self) -> int:
        return len(self.pre) + len(self.post)
