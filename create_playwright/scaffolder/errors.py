"""Exception hierarchy for the scaffolder."""

from __future__ import annotations


class ScaffoldError(Exception):
    """Base class for every fatal scaffolding failure."""


class AssetError(ScaffoldError):
    """A template asset is missing or malformed."""


class TemplateSyntaxError(AssetError):
    """Section markers in a template do not pair up."""

    def __init__(self, message: str, line: int, source: str | None = None) -> None:
        self.line = line
        self.source = source
        where = f"{source}:{line}" if source else f"line {line}"
        super().__init__(f"{where}: {message}")


class DuplicateFileError(ScaffoldError):
    """Two planning steps tried to generate the same path."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"File generated twice: {path}")


class CommandError(ScaffoldError):
    """A planned shell command exited with a non-zero status."""

    def __init__(self, name: str, command: str, returncode: int) -> None:
        self.name = name
        self.command = command
        self.returncode = returncode
        super().__init__(f"{name} failed (exit {returncode}): {command}")


class ManifestError(ScaffoldError):
    """``package.json`` exists but is not a JSON object."""


class UnsafePathError(ScaffoldError):
    """A generated path is absolute or climbs out of the project root."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Generated path must stay inside the project: {path}")
