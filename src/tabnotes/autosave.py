"""Autosave: a polled sweep that flushes dirty notes once they are old enough.

The scheduler owns no thread.  The shell calls :meth:`AutosaveScheduler.tick`
once per loop iteration; editing only sets ``dirty``, so ``last_saved_at``
moves forward only when a save actually succeeds.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tabnotes.note import Note
    from tabnotes.store import NoteStore

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = 30.0


class AutosaveScheduler:
    def __init__(
        self,
        store: "NoteStore",
        interval: float = DEFAULT_INTERVAL,
        clock: Callable[[], float] | None = None,
    ) -> None:
        if interval <= 0:
            raise ValueError(f"autosave interval must be positive, got {interval!r}")
        self.store = store
        self.interval = interval
        self.clock = clock or store.clock

    def due(self, note: "Note", now: float) -> bool:
        return note.dirty and now - note.last_saved_at >= self.interval

    def tick(self, now: float | None = None) -> list["Note"]:
        """Save every due note; return the ones that were written."""
        if now is None:
            now = self.clock()
        saved: list["Note"] = []
        for note in list(self.store):
            if not self.due(note, now):
                continue
            if self.store.save(note):
                saved.append(note)
            else:
                logger.warning("Autosave failed for %s; will retry next tick", note.title)
        if saved:
            logger.debug("Autosaved %d note(s)", len(saved))
        return saved
