"""create-playwright configuration.

Typed configuration for one scaffolding run. Settings use Pydantic v2 models
so they are validated at construction time and can be overridden from
environment variables without boiler-plate.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator

from create_playwright.scaffolder.models import BROWSERS, Options

DEFAULT_ASSETS_DIR = Path(__file__).parent / "assets"


class Config(BaseModel):
    """Global configuration for a run.

    Instances are created once by the CLI entry point (or by tests) and
    passed to the :class:`~create_playwright.pipeline.Generator`.
    """

    root_dir: Path = Field(default=Path("."), description="Project to scaffold into")
    assets_dir: Path = Field(
        default=DEFAULT_ASSETS_DIR, description="Directory holding template assets"
    )
    options: Options = Field(default_factory=Options)

    @field_validator("options")
    @classmethod
    def _known_browsers(cls, options: Options) -> Options:
        unknown = [b for b in options.browsers if b not in BROWSERS]
        if unknown:
            raise ValueError(
                f"Unknown browser(s): {', '.join(unknown)} "
                f"(expected one of {', '.join(BROWSERS)})"
            )
        return options

    # ------------------------------------------------------------------
    # Derived paths (read-only properties)
    # ------------------------------------------------------------------

    @property
    def manifest_path(self) -> Path:
        """Path to the target project's ``package.json``."""
        return self.root_dir / "package.json"

    @property
    def gitignore_path(self) -> Path:
        """Path to the target project's ``.gitignore``."""
        return self.root_dir / ".gitignore"

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    @classmethod
    def from_env(cls, **overrides: Any) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            CREATE_PLAYWRIGHT_ROOT_DIR, CREATE_PLAYWRIGHT_ASSETS_DIR,
            CREATE_PLAYWRIGHT_BROWSERS (comma-separated).

        Keyword *overrides* win over the environment.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("CREATE_PLAYWRIGHT_ROOT_DIR"):
            kwargs["root_dir"] = Path(os.environ["CREATE_PLAYWRIGHT_ROOT_DIR"])
        if os.environ.get("CREATE_PLAYWRIGHT_ASSETS_DIR"):
            kwargs["assets_dir"] = Path(os.environ["CREATE_PLAYWRIGHT_ASSETS_DIR"])
        browsers = browsers_from_env()
        if browsers:
            kwargs["options"] = Options(browsers=browsers)
        kwargs.update(overrides)
        return cls(**kwargs)

    def ensure_root(self) -> None:
        """Create the target directory if it does not exist yet."""
        self.root_dir.mkdir(parents=True, exist_ok=True)


def browsers_from_env() -> list[str]:
    """Browsers listed in ``CREATE_PLAYWRIGHT_BROWSERS`` (comma-separated)."""
    raw = os.environ.get("CREATE_PLAYWRIGHT_BROWSERS", "")
    return [b.strip() for b in raw.split(",") if b.strip()]
