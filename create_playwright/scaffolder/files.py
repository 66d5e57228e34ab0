"""Generated file collection and wholesale writing."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Union

from .errors import DuplicateFileError, UnsafePathError

logger = logging.getLogger(__name__)

FileContent = Union[str, bytes]


class FileMap:
    """Ordered mapping of relative output path to file content.

    Each path may be added once; a second add raises
    :class:`DuplicateFileError`.  Paths are relative to the project root and
    may not be absolute or contain ``..``.
    """

    def __init__(self) -> None:
        self._files: dict[str, FileContent] = {}

    def add(self, path: str | Path, content: FileContent) -> None:
        relative = Path(path)
        if relative.anchor or ".." in relative.parts:
            raise UnsafePathError(str(path))
        key = relative.as_posix()
        if key in self._files:
            raise DuplicateFileError(key)
        self._files[key] = content

    def __contains__(self, path: object) -> bool:
        if isinstance(path, (str, Path)):
            return Path(path).as_posix() in self._files
        return False

    def __getitem__(self, path: str) -> FileContent:
        return self._files[Path(path).as_posix()]

    def __iter__(self) -> Iterator[str]:
        return iter(self._files)

    def __len__(self) -> int:
        return len(self._files)

    def items(self) -> list[tuple[str, FileContent]]:
        return list(self._files.items())


@dataclass
class WriteReport:
    """Paths written and skipped by :func:`write_all`."""
    written: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)


async def write_all(
    root: str | Path, files: FileMap, *, force: bool = False
) -> WriteReport:
    """Write every file of *files* under *root*.

    Parent directories are created as needed.  Files that already exist are
    left alone unless *force* is set, so a re-run after a partial failure
    only fills in what is missing.  Paths are disjoint, so the writes run
    concurrently; every write settles before the first error is raised.
    """
    root_path = Path(root)
    report = WriteReport()

    async def _write(relative: str, content: FileContent) -> None:
        target = root_path / relative
        if target.exists() and not force:
            logger.info("File %s already exists, skipping", relative)
            report.skipped.append(relative)
            return
        await asyncio.to_thread(_write_file, target, content)
        report.written.append(relative)

    outcomes = await asyncio.gather(
        *(_write(rel, content) for rel, content in files.items()),
        return_exceptions=True,
    )
    for outcome in outcomes:
        if isinstance(outcome, BaseException):
            raise outcome
    order = list(files)
    report.written.sort(key=order.index)
    report.skipped.sort(key=order.index)
    return report


def _write_file(path: Path, content: FileContent) -> None:
    """Synchronous helper: create parent dirs and write content."""
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(content, bytes):
        path.write_bytes(content)
    else:
        path.write_text(content, encoding="utf-8")
