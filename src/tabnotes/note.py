"""Core Note dataclass."""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

# Process-wide id source; ids are never reused, even after a note is deleted.
_ids = itertools.count(1)


def next_note_id() -> int:
    return next(_ids)


@dataclass(eq=False)
class Note:
    """A single markdown note backed by one ``.md`` file."""

    path: Path
    title: str
    content: str = ""
    dirty: bool = False
    #: Clock reading (seconds) of the last successful write
    last_saved_at: float = 0.0
    id: int = field(default_factory=next_note_id)

    @property
    def word_count(self) -> int:
        return len(self.content.split())

    @property
    def char_count(self) -> int:
        return len(self.content)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "path": str(self.path),
            "dirty": self.dirty,
            "words": self.word_count,
            "chars": self.char_count,
        }
