"""Conditional section markers for template assets.

A section is a flat block of lines bounded by a begin/end marker pair written
as a line comment in the host file's own syntax::

    //--begin-chromium          (JavaScript / TypeScript)
    #--begin-chromium           (YAML, shell, .gitignore)
    <!--begin-chromium-->       (HTML)

Templates are scanned once into a sequence of :class:`Literal` and
:class:`SectionBlock` segments.  Resolution is a separate step that maps each
block to its :class:`SectionState`: shown verbatim, hidden, or commented out
with the dialect the marker was written in.  Marker pairing problems surface
as :class:`TemplateSyntaxError` during the scan.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Union

from .errors import TemplateSyntaxError
from .models import SectionState


_MARKER_RE = re.compile(
    r"^(?P<indent>[ \t]*)"
    r"(?:(?P<open>//|#)[ \t]*--|(?P<markup><!--)[ \t]*(?:--)?)"
    r"(?P<kind>begin|end)-(?P<name>\w+(?:[.-]\w+)*)"
    r"[ \t]*(?(markup)-->)[ \t]*$"
)


# ---------------------------------------------------------------------------
# Comment dialects
# ---------------------------------------------------------------------------

class Dialect(str, Enum):
    """Line-comment syntax a marker was written in."""
    SCRIPT = "//"
    HASH = "#"
    MARKUP = "<!--"

    def comment(self, body: str) -> str:
        """Turn *body* (indentation already removed) into an inert comment."""
        if self is Dialect.MARKUP:
            return f"<!-- {body} -->" if body else "<!-- -->"
        return f"{self.value} {body}" if body else self.value


# ---------------------------------------------------------------------------
# Segments
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Literal:
    """Template text outside of any section."""
    text: str


@dataclass(frozen=True)
class SectionBlock:
    """The inner lines of one marked section (markers excluded)."""
    name: str
    lines: tuple[str, ...]
    indent: str
    dialect: Dialect
    line: int

    @property
    def inner_text(self) -> str:
        return "".join(self.lines)


Segment = Union[Literal, SectionBlock]


def parse_segments(template: str, source: str | None = None) -> list[Segment]:
    """Scan *template* into literal and section segments.

    Raises:
        TemplateSyntaxError: On an ``end`` without ``begin``, an ``end``
            naming a different section, a ``begin`` inside an open section
            (nesting is not supported) or a section left open at the end.
    """
    segments: list[Segment] = []
    literal: list[str] = []
    open_match: re.Match[str] | None = None
    open_line = 0
    inner: list[str] = []

    for lineno, line in enumerate(template.splitlines(keepends=True), start=1):
        match = _MARKER_RE.match(line.rstrip("\r\n"))
        if match is None:
            (inner if open_match else literal).append(line)
            continue

        name = match.group("name")
        if match.group("kind") == "begin":
            if open_match is not None:
                raise TemplateSyntaxError(
                    f"section '{name}' begins inside open section "
                    f"'{open_match.group('name')}' (opened on line {open_line})",
                    lineno,
                    source,
                )
            if literal:
                segments.append(Literal("".join(literal)))
                literal = []
            open_match, open_line, inner = match, lineno, []
            continue

        if open_match is None:
            raise TemplateSyntaxError(
                f"end of section '{name}' without a matching begin", lineno, source
            )
        if name != open_match.group("name"):
            raise TemplateSyntaxError(
                f"end of section '{name}' does not match open section "
                f"'{open_match.group('name')}' (opened on line {open_line})",
                lineno,
                source,
            )
        segments.append(
            SectionBlock(
                name=name,
                lines=tuple(inner),
                indent=open_match.group("indent"),
                dialect=Dialect(open_match.group("open") or open_match.group("markup")),
                line=open_line,
            )
        )
        open_match = None

    if open_match is not None:
        raise TemplateSyntaxError(
            f"section '{open_match.group('name')}' is never closed", open_line, source
        )
    if literal:
        segments.append(Literal("".join(literal)))
    return segments


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------

def resolve_segments(
    segments: list[Segment], sections: Mapping[str, SectionState]
) -> str:
    """Join *segments* back into text, applying each section's state.

    Sections missing from *sections* are shown.
    """
    out: list[str] = []
    for segment in segments:
        if isinstance(segment, Literal):
            out.append(segment.text)
            continue
        state = SectionState(sections.get(segment.name, SectionState.SHOW))
        if state is SectionState.SHOW:
            out.append(segment.inner_text)
        elif state is SectionState.COMMENT:
            out.extend(_comment_out(line, segment) for line in segment.lines)
    return "".join(out)


def filter_sections(
    template: str,
    sections: Mapping[str, SectionState],
    source: str | None = None,
) -> str:
    """Parse and resolve every marked section of *template*."""
    return resolve_segments(parse_segments(template, source), sections)


def _comment_out(line: str, block: SectionBlock) -> str:
    body = line.rstrip("\r\n")
    eol = line[len(body):]
    indent = block.indent
    if not body.startswith(indent):
        indent = body[: len(body) - len(body.lstrip())]
    return indent + block.dialect.comment(body[len(indent):].rstrip()) + eol
