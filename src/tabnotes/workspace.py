"""Workspace: the single owning context for one run of the app.

Wires the store, tabs, confirmation workflow and autosave together and
exposes every intent the shell can send.  Intents take note ids; an id that
is no longer in the store is ignored.

Usage::

    ws = Workspace.open_directory("notes")
    note = ws.create()
    ws.edit(note.id, "# Hello")
    ws.request_delete(note.id)
    ws.confirm()
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any

import polars as pl

from tabnotes.autosave import AutosaveScheduler
from tabnotes.config import AppConfig
from tabnotes.confirm import ConfirmationKind, ConfirmationRequest, ConfirmationWorkflow
from tabnotes.markdown import Block, render
from tabnotes.note import Note
from tabnotes.store import NoteStore
from tabnotes.table import notes_frame
from tabnotes.tabs import TabManager

logger = logging.getLogger(__name__)


class Workspace:
    def __init__(self, config: AppConfig, clock: Callable[[], float] | None = None) -> None:
        self.config = config.validate()
        self.theme = config.theme
        self.preview_mode = config.preview

        self.store = NoteStore(config.notes_dir, clock or time.time)
        self.confirmations = ConfirmationWorkflow(
            {
                ConfirmationKind.DELETE_NOTE: self._delete_confirmed,
                ConfirmationKind.CLOSE_UNSAVED_TAB: self._close_confirmed,
            }
        )
        self.tabs = TabManager(self.store, self.confirmations)
        self.autosave = AutosaveScheduler(self.store, config.autosave_interval)
        self.store.load()

    @classmethod
    def open_directory(cls, notes_dir: Path | str, **overrides: Any) -> "Workspace":
        return cls(AppConfig(notes_dir=Path(notes_dir), **overrides))

    def _note(self, note_id: int) -> Note | None:
        note = self.store.get(note_id)
        if note is None:
            logger.debug("Ignoring intent for unknown note %d", note_id)
        return note

    # ------------------------------------------------------------------
    # State for the shell
    # ------------------------------------------------------------------

    @property
    def notes(self) -> list[Note]:
        return list(self.store.notes)

    @property
    def current(self) -> Note | None:
        return self.tabs.current

    @property
    def pending(self) -> ConfirmationRequest | None:
        return self.confirmations.pending

    def search(self, query: str) -> list[Note]:
        return self.store.search(query)

    def stats(self, note_id: int) -> dict[str, Any] | None:
        note = self._note(note_id)
        if note is None:
            return None
        return {"words": note.word_count, "chars": note.char_count, "dirty": note.dirty}

    def preview(self, note_id: int) -> list[Block]:
        note = self._note(note_id)
        return render(note.content) if note is not None else []

    def table(self, query: str = "") -> pl.DataFrame:
        return notes_frame(self.search(query), self.tabs.tabs, self.tabs.selected)

    # ------------------------------------------------------------------
    # Intents
    # ------------------------------------------------------------------

    def create(self) -> Note | None:
        """Create a note and open it in a new tab."""
        note = self.store.create()
        if note is not None:
            self.tabs.open(note.id)
        return note

    def open(self, note_id: int) -> None:
        self.tabs.open(note_id)

    def select(self, note_id: int) -> None:
        self.tabs.select(note_id)

    def request_close(self, note_id: int) -> bool:
        return self.tabs.close(note_id)

    def request_delete(self, note_id: int) -> None:
        note = self._note(note_id)
        if note is not None:
            self.confirmations.request_delete(note)

    def rename(self, note_id: int, new_title: str) -> bool:
        note = self._note(note_id)
        return note is not None and self.store.rename(note, new_title)

    def edit(self, note_id: int, text: str) -> None:
        note = self._note(note_id)
        if note is not None:
            self.store.edit(note, text)

    def save(self, note_id: int) -> bool:
        note = self._note(note_id)
        return note is not None and self.store.save(note)

    def save_all(self) -> list[Note]:
        """Save every dirty note now, regardless of the autosave interval."""
        return [n for n in self.notes if n.dirty and self.store.save(n)]

    def confirm(self) -> ConfirmationRequest | None:
        return self.confirmations.confirm()

    def cancel(self) -> ConfirmationRequest | None:
        return self.confirmations.cancel()

    def tick(self, now: float | None = None) -> list[Note]:
        return self.autosave.tick(now)

    def reload(self) -> list[Note]:
        """Re-scan the notes directory; tabs for vanished files are closed.

        Dirty notes are saved first.  If any of them cannot be saved the
        rescan is refused and the collection is returned unchanged.  Every
        note gets a fresh id, so open tabs are re-attached by path.
        """
        self.save_all()
        unsaved = [n.title for n in self.notes if n.dirty]
        if unsaved:
            logger.warning("Not reloading: unsaved changes in %s", ", ".join(unsaved))
            return self.notes

        open_paths = [n.path for n in self.tabs.open_notes]
        selected = self.current.path if self.current is not None else None
        self.confirmations.cancel()
        self.store.load()

        by_path = {n.path: n.id for n in self.store}
        self.tabs.tabs = [by_path[p] for p in open_paths if p in by_path]
        self.tabs.selected = by_path.get(selected) if selected is not None else None
        if self.tabs.selected not in self.tabs.tabs:
            self.tabs.selected = self.tabs.tabs[-1] if self.tabs.tabs else None
        return self.notes

    def toggle_theme(self) -> str:
        self.theme = "light" if self.theme == "dark" else "dark"
        return self.theme

    def toggle_preview(self) -> bool:
        self.preview_mode = not self.preview_mode
        return self.preview_mode

    # ------------------------------------------------------------------
    # Confirmed actions
    # ------------------------------------------------------------------

    def _delete_confirmed(self, note_id: int) -> None:
        note = self._note(note_id)
        if note is not None:
            self.store.delete(note)
        self.tabs.on_note_deleted(note_id)

    def _close_confirmed(self, note_id: int) -> None:
        self.tabs.force_close(note_id)
