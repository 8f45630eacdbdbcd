"""TabManager: open tabs and the current selection, keyed by note id."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tabnotes.confirm import ConfirmationWorkflow
    from tabnotes.note import Note
    from tabnotes.store import NoteStore

logger = logging.getLogger(__name__)


class TabManager:
    """Keeps ``tabs`` and ``selected`` consistent with the store's notes.

    ``tabs`` is in opening order.  When the selected tab goes away, the
    selection moves to whichever tab is now last, not to its neighbour.
    """

    def __init__(self, store: "NoteStore", confirmations: "ConfirmationWorkflow") -> None:
        self.store = store
        self.confirmations = confirmations
        self.tabs: list[int] = []
        self.selected: int | None = None

    @property
    def current(self) -> "Note | None":
        return self.store.get(self.selected) if self.selected is not None else None

    @property
    def open_notes(self) -> list["Note"]:
        notes = (self.store.get(i) for i in self.tabs)
        return [n for n in notes if n is not None]

    # ------------------------------------------------------------------
    # Intents
    # ------------------------------------------------------------------

    def open(self, note_id: int) -> None:
        if self.store.get(note_id) is None:
            logger.debug("open(): no note %d", note_id)
            return
        if note_id not in self.tabs:
            self.tabs.append(note_id)
        self.selected = note_id

    def select(self, note_id: int) -> None:
        if note_id in self.tabs:
            self.selected = note_id

    def close(self, note_id: int) -> bool:
        """Close a clean tab, or ask for confirmation when it has unsaved changes."""
        if note_id not in self.tabs:
            return False
        note = self.store.get(note_id)
        if note is not None and note.dirty:
            self.confirmations.request_close_unsaved(note)
            return False
        self._remove(note_id)
        return True

    def force_close(self, note_id: int) -> None:
        self._remove(note_id)

    def on_note_deleted(self, note_id: int) -> None:
        self._remove(note_id)

    def _remove(self, note_id: int) -> None:
        if note_id not in self.tabs:
            return
        self.tabs.remove(note_id)
        if self.selected == note_id:
            self.selected = self.tabs[-1] if self.tabs else None
