"""Placeholder and section rendering for template assets.

Assets are plain text files containing ``{{name}}`` placeholders and
section markers (see :mod:`.sections`).  Rendering resolves sections first
and then substitutes placeholders in a single pass, so values are never
re-scanned and can never introduce markers of their own.  Placeholders with
no matching variable are kept verbatim, which also leaves GitHub Actions
expressions such as ``${{ !cancelled() }}`` untouched.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Mapping

from .errors import AssetError
from .models import SectionState
from .sections import filter_sections


_PLACEHOLDER_RE = re.compile(r"\{\{([A-Za-z_][A-Za-z0-9_]*)\}\}")


def substitute(template: str, variables: Mapping[str, str]) -> str:
    """Replace known ``{{name}}`` placeholders; leave unknown ones as-is."""

    def _replace(match: re.Match[str]) -> str:
        name = match.group(1)
        if name in variables:
            return str(variables[name])
        return match.group(0)

    return _PLACEHOLDER_RE.sub(_replace, template)


def render(
    template: str,
    variables: Mapping[str, str] | None = None,
    sections: Mapping[str, SectionState] | None = None,
    *,
    source: str | None = None,
) -> str:
    """Render *template* with *variables* and section *sections*.

    Args:
        template: Asset text.
        variables: Placeholder name to value.
        sections: Section name to state; unnamed sections are shown.
        source: Asset name used in error messages.

    Raises:
        TemplateSyntaxError: If the section markers do not pair up.
    """
    filtered = filter_sections(template, sections or {}, source)
    return substitute(filtered, variables or {})


# ---------------------------------------------------------------------------
# AssetLoader
# ---------------------------------------------------------------------------


class AssetLoader:
    """Reads and renders template assets from an explicit directory."""

    def __init__(self, assets_dir: str | Path) -> None:
        self.assets_dir = Path(assets_dir)

    def read(self, name: str) -> str:
        """Return the text of asset *name* (a path relative to the asset dir)."""
        path = self.assets_dir / name
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise AssetError(f"Template asset not found: {path}") from exc

    def render(
        self,
        name: str,
        variables: Mapping[str, str] | None = None,
        sections: Mapping[str, SectionState] | None = None,
    ) -> str:
        """Read asset *name* and render it."""
        return render(self.read(name), variables, sections, source=name)

    def list_assets(self) -> list[str]:
        """Sorted asset paths relative to the asset directory."""
        if not self.assets_dir.is_dir():
            return []
        return sorted(
            p.relative_to(self.assets_dir).as_posix()
            for p in self.assets_dir.rglob("*")
            if p.is_file()
        )
