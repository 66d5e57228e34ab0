"""Incremental patches for files the user already owns.

Two documents are patched rather than overwritten:

- ``.gitignore`` -- modelled as an :class:`IgnoreFile` (ordered lines).
  Required entries are matched by pattern, so equivalent spellings such as
  ``node_modules`` and ``/node_modules/`` count as present.  Missing entries
  are appended under a single ``# Playwright`` heading.
- ``package.json`` -- modelled as a :class:`Manifest` (ordered JSON object).
  The placeholder ``test`` script is dropped and the component-testing script
  is registered.

Both patch operations are idempotent.
"""

from __future__ import annotations

import asyncio
import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Sequence

from .errors import ManifestError

logger = logging.getLogger(__name__)

IGNORE_HEADING = "# Playwright"
PLACEHOLDER_TEST_SCRIPT = "no test specified"
CT_SCRIPT_NAME = "test-ct"
DEPENDENCY_SECTIONS = ("dependencies", "devDependencies", "optionalDependencies")


# ---------------------------------------------------------------------------
# .gitignore
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class IgnoreEntry:
    """A line to ensure in ``.gitignore`` and the pattern that satisfies it."""
    literal: str
    pattern: re.Pattern[str]

    def __post_init__(self) -> None:
        if not self.pattern.fullmatch(self.literal):
            raise ValueError(f"Pattern {self.pattern.pattern!r} does not match {self.literal!r}")

    @classmethod
    def tolerant(cls, literal: str) -> "IgnoreEntry":
        """Entry whose pattern accepts an optional leading and trailing slash."""
        core = re.escape(literal.strip("/"))
        return cls(literal, re.compile(rf"^[ \t]*/?{core}/?[ \t]*$", re.MULTILINE))


DEFAULT_IGNORE_ENTRIES: tuple[IgnoreEntry, ...] = (
    IgnoreEntry.tolerant("node_modules/"),
    IgnoreEntry.tolerant("/test-results/"),
    IgnoreEntry.tolerant("/playwright-report/"),
    IgnoreEntry.tolerant("/blob-report/"),
    IgnoreEntry.tolerant("/playwright/.cache/"),
)


class IgnoreFile:
    """An ignore file as an ordered list of lines."""

    def __init__(self, lines: Sequence[str] = ()) -> None:
        self.lines = list(lines)

    @classmethod
    def parse(cls, text: str) -> "IgnoreFile":
        return cls(text.splitlines())

    def text(self) -> str:
        return "".join(f"{line}\n" for line in self.lines)

    def satisfies(self, entry: IgnoreEntry) -> bool:
        return any(entry.pattern.fullmatch(line) for line in self.lines)

    def missing(self, entries: Sequence[IgnoreEntry]) -> list[IgnoreEntry]:
        return [entry for entry in entries if not self.satisfies(entry)]

    def merge(self, entries: Sequence[IgnoreEntry]) -> "IgnoreFile":
        """Return a copy with every missing entry appended under the heading."""
        missing = self.missing(entries)
        lines = list(self.lines)
        if not missing:
            return IgnoreFile(lines)
        while lines and not lines[-1].strip():
            lines.pop()
        if lines:
            lines.append("")
        lines.append(IGNORE_HEADING)
        lines.extend(entry.literal for entry in missing)
        return IgnoreFile(lines)


def patch_ignore_file(
    existing: str, entries: Sequence[IgnoreEntry] = DEFAULT_IGNORE_ENTRIES
) -> str:
    """Ensure every entry of *entries* is present in *existing*.

    Content that already satisfies every entry is returned unchanged.
    """
    document = IgnoreFile.parse(existing)
    if not document.missing(entries):
        return existing
    return document.merge(entries).text()


async def apply_ignore_patch(
    path: str | Path, entries: Sequence[IgnoreEntry] = DEFAULT_IGNORE_ENTRIES
) -> bool:
    """Patch the ignore file at *path* in place. Returns ``True`` if it changed."""
    path = Path(path)
    existing = path.read_text(encoding="utf-8") if path.exists() else ""
    patched = patch_ignore_file(existing, entries)
    if path.exists() and patched == existing:
        return False
    await asyncio.to_thread(path.write_text, patched, "utf-8")
    return True


# ---------------------------------------------------------------------------
# package.json
# ---------------------------------------------------------------------------

def ct_script(extension: str) -> str:
    """The ``test-ct`` script for a ``playwright-ct.config.<extension>``."""
    return f"playwright test -c playwright-ct.config.{extension}"


class Manifest:
    """``package.json`` as an ordered JSON object."""

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self.data: dict[str, Any] = dict(data or {})

    @classmethod
    def parse(cls, text: str) -> "Manifest":
        """Parse manifest text.

        Raises:
            ManifestError: If *text* is not a JSON object.
        """
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ManifestError(f"package.json is not valid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise ManifestError("package.json must contain a JSON object")
        return cls(data)

    @classmethod
    def load(cls, path: str | Path) -> "Manifest | None":
        """Read a manifest, returning ``None`` when missing or unreadable."""
        try:
            return cls.parse(Path(path).read_text(encoding="utf-8"))
        except (OSError, ManifestError) as exc:
            logger.debug("Treating %s as empty: %s", path, exc)
            return None

    def dumps(self) -> str:
        """Serialise with two-space indentation and npm's trailing newline."""
        return json.dumps(self.data, indent=2, ensure_ascii=False) + "\n"

    @property
    def scripts(self) -> dict[str, Any]:
        scripts = self.data.get("scripts")
        if not isinstance(scripts, dict):
            scripts = {}
            self.data["scripts"] = scripts
        return scripts

    def has_dependency(self, name: str) -> bool:
        for section in DEPENDENCY_SECTIONS:
            declared = self.data.get(section)
            if isinstance(declared, dict) and declared.get(name):
                return True
        return False


def patch_manifest(manifest: Manifest, ct_extension: str | None = None) -> Manifest:
    """Return a patched copy of *manifest*.

    Drops the placeholder ``test`` script and, when *ct_extension* is given,
    sets ``test-ct``.  Top-level key order is kept.
    """
    patched = Manifest(json.loads(json.dumps(manifest.data)))
    scripts = patched.data.get("scripts")
    if isinstance(scripts, dict):
        test = scripts.get("test")
        if isinstance(test, str) and PLACEHOLDER_TEST_SCRIPT in test:
            del scripts["test"]
    if ct_extension:
        patched.scripts[CT_SCRIPT_NAME] = ct_script(ct_extension)
    return patched


def has_dependency(root: str | Path, name: str) -> bool:
    """Whether the manifest under *root* declares *name* in any section.

    A missing or corrupt manifest counts as declaring nothing.
    """
    manifest = Manifest.load(Path(root) / "package.json")
    return manifest is not None and manifest.has_dependency(name)


async def apply_manifest_patch(path: str | Path, ct_extension: str | None = None) -> bool:
    """Patch the ``package.json`` at *path* in place. Returns ``True`` if it changed.

    A manifest that exists but cannot be parsed is left untouched and a
    warning is logged.
    """
    path = Path(path)
    existing = path.read_text(encoding="utf-8") if path.exists() else None
    try:
        manifest = Manifest.parse(existing) if existing is not None else Manifest()
    except ManifestError as exc:
        logger.warning("Not patching %s: %s", path, exc)
        return False
    output = patch_manifest(manifest, ct_extension).dumps()
    if output == existing:
        return False
    await asyncio.to_thread(path.write_text, output, "utf-8")
    return True
