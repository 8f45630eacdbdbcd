"""Line-level Markdown renderer for the preview pane.

Every physical line becomes exactly one block, classified by prefix
(first match wins)
------------------------------------------------------------------
- blank line                  -> ``Spacer``
- ``### `` / ``## `` / ``# `` -> ``Heading`` (level 3, 2, 1)
- ``- `` or ``* ``            -> ``ListItem``
- ``> ``                      -> ``Quote``
- `````` ``` ``````           -> ``CodeFenceStart``
- anything else               -> ``Paragraph`` (trimmed)

There is no inline parsing, nesting or escaping.  Lines between an opening
fence and the next line ending in `````` ``` `````` come out as plain
paragraphs; the closing line is a ``CodeFenceEnd``.
"""

from __future__ import annotations

import re
from dataclasses import asdict, dataclass, field
from typing import Any, Union

_FENCE = "```"
# Only \r\n, \r and \n end a line
_NEWLINE_RE = re.compile(r"\r\n|\r|\n")

# Checked in order; "### " must come before "## " and "# "
_PREFIXES: list[tuple[str, str, int]] = [
    ("### ", "heading", 3),
    ("## ", "heading", 2),
    ("# ", "heading", 1),
    ("- ", "list_item", 0),
    ("* ", "list_item", 0),
    ("> ", "quote", 0),
]


# ---------------------------------------------------------------------------
# Blocks
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Spacer:
    kind: str = field(default="spacer", init=False, repr=False)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Heading:
    level: int
    text: str
    kind: str = field(default="heading", init=False, repr=False)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ListItem:
    text: str
    kind: str = field(default="list_item", init=False, repr=False)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Quote:
    text: str
    kind: str = field(default="quote", init=False, repr=False)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class CodeFenceStart:
    #: Text after the opening backticks, e.g. ``python``
    info: str = ""
    kind: str = field(default="code_fence_start", init=False, repr=False)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class CodeFenceEnd:
    kind: str = field(default="code_fence_end", init=False, repr=False)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Paragraph:
    text: str
    kind: str = field(default="paragraph", init=False, repr=False)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


Block = Union[Spacer, Heading, ListItem, Quote, CodeFenceStart, CodeFenceEnd, Paragraph]


# ---------------------------------------------------------------------------
# Renderer
# ---------------------------------------------------------------------------


def _classify(line: str) -> Block:
    if not line.strip():
        return Spacer()
    for prefix, kind, level in _PREFIXES:
        if line.startswith(prefix):
            rest = line[len(prefix) :].strip()
            if kind == "heading":
                return Heading(level, rest)
            if kind == "list_item":
                return ListItem(rest)
            return Quote(rest)
    if line.startswith(_FENCE):
        return CodeFenceStart(line[len(_FENCE) :].strip())
    return Paragraph(line.strip())


def render(text: str) -> list[Block]:
    """Turn *text* into one block per line.  Never raises."""
    blocks: list[Block] = []
    in_fence = False
    lines = _NEWLINE_RE.split(text)
    if len(lines) > 1 and lines[-1] == "":
        lines.pop()
    for line in lines:
        if in_fence:
            if line.rstrip().endswith(_FENCE):
                blocks.append(CodeFenceEnd())
                in_fence = False
            else:
                blocks.append(Paragraph(line.strip()))
            continue

        block = _classify(line)
        if isinstance(block, CodeFenceStart):
            in_fence = True
        blocks.append(block)
    return blocks
