"""NoteStore: the authoritative collection of notes and their files."""

from __future__ import annotations

import logging
import re
import time
from collections.abc import Callable, Iterator
from pathlib import Path

from tabnotes.note import Note

logger = logging.getLogger(__name__)

# Anything outside [A-Za-z0-9_] becomes an underscore
_UNSAFE_RE = re.compile(r"[^A-Za-z0-9_]")


def sanitize_title(text: str) -> str:
    """Replace every character outside ``[A-Za-z0-9_]`` with ``_``."""
    return _UNSAFE_RE.sub("_", text)


def matches(note: Note, query: str) -> bool:
    """Case-folded substring match against title or content."""
    q = query.casefold()
    return not q or q in note.title.casefold() or q in note.content.casefold()


class NoteStore:
    """Owns every :class:`Note` and performs file operations on the notes directory.

    All I/O failures are absorbed here: callers see ``False``/``None`` or
    unchanged state, never an exception.
    """

    def __init__(self, directory: Path, clock: Callable[[], float] = time.time) -> None:
        self.directory = Path(directory)
        self.clock = clock
        self.notes: list[Note] = []

    def __len__(self) -> int:
        return len(self.notes)

    def __iter__(self) -> Iterator[Note]:
        return iter(self.notes)

    def __contains__(self, note: object) -> bool:
        return any(n is note for n in self.notes)

    # ------------------------------------------------------------------
    # Load / ordering
    # ------------------------------------------------------------------

    def load(self, directory: Path | None = None) -> list[Note]:
        """(Re-)scan the notes directory, replacing the in-memory collection.

        Unreadable files are skipped individually.
        """
        if directory is not None:
            self.directory = Path(directory)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            logger.warning("Cannot use notes directory %s: %s", self.directory, exc)
            self.notes = []
            return []

        now = self.clock()
        notes: list[Note] = []
        for path in sorted(self.directory.glob("*.md")):
            if not path.is_file():
                continue
            try:
                content = path.read_bytes().decode("utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                logger.warning("Skipping unreadable note %s: %s", path.name, exc)
                continue
            notes.append(Note(path=path.resolve(), title=path.stem, content=content, last_saved_at=now))

        self.notes = notes
        self._sort()
        logger.debug("Loaded %d notes from %s", len(notes), self.directory)
        return list(self.notes)

    def _sort(self) -> None:
        self.notes.sort(key=lambda n: n.title.lower())

    def get(self, note_id: int) -> Note | None:
        for note in self.notes:
            if note.id == note_id:
                return note
        return None

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def create(self) -> Note | None:
        """Create an empty ``Note_<N>.md`` and add it to the collection.

        Returns ``None`` when the file cannot be written.
        """
        n = len(self.notes) + 1
        while True:
            title = sanitize_title(f"Note_{n}")
            path = self.directory / f"{title}.md"
            try:
                with path.open("xb"):
                    pass
            except FileExistsError:
                n += 1
                continue
            except OSError as exc:
                logger.warning("Could not create note %s: %s", path.name, exc)
                return None
            break

        note = Note(path=path.resolve(), title=title, last_saved_at=self.clock())
        self.notes.append(note)
        self._sort()
        logger.info("Created note %s", title)
        return note

    def rename(self, note: Note, new_title: str) -> bool:
        """Rename *note* and its file; the note is untouched unless the rename succeeds."""
        if not new_title:
            logger.debug("Ignoring rename of %s to an empty title", note.title)
            return False
        title = sanitize_title(new_title)
        if title == sanitize_title(note.title):
            logger.debug("Ignoring rename of %s to its current title", note.title)
            return False

        target = note.path.with_name(f"{title}.md")
        if target.exists():
            logger.warning("Cannot rename %s: %s already exists", note.path.name, target.name)
            return False
        try:
            note.path.rename(target)
        except OSError as exc:
            logger.warning("Could not rename %s to %s: %s", note.path.name, target.name, exc)
            return False

        logger.info("Renamed note %s to %s", note.title, title)
        note.title = title
        note.path = target
        note.dirty = True
        self._sort()
        return True

    def delete(self, note: Note) -> bool:
        """Remove *note*'s file (best-effort) and drop it from the collection."""
        if note not in self:
            return False
        try:
            note.path.unlink(missing_ok=True)
        except OSError as exc:
            logger.warning("Could not remove %s: %s", note.path.name, exc)
        self.notes = [n for n in self.notes if n is not note]
        logger.info("Deleted note %s", note.title)
        return True

    def save(self, note: Note) -> bool:
        """Write *note*'s content to disk; ``dirty`` stays set on failure."""
        try:
            note.path.write_bytes(note.content.encode("utf-8"))
        except OSError as exc:
            logger.warning("Could not save %s: %s", note.path.name, exc)
            return False
        note.dirty = False
        note.last_saved_at = self.clock()
        return True

    def edit(self, note: Note, text: str) -> None:
        if text != note.content:
            note.content = text
            note.dirty = True

    # ------------------------------------------------------------------
    # Query helpers
    # ------------------------------------------------------------------

    def search(self, query: str) -> list[Note]:
        """Case-insensitive search across title and content, in collection order."""
        return [n for n in self.notes if matches(n, query)]
