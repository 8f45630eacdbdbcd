"""Confirmation workflow for destructive actions.

Deleting a note and closing a tab with unsaved changes both go through a
single pending-request slot::

    Idle --request_*--> Pending(request) --confirm/cancel--> Idle

A new request replaces whatever was pending; nothing is queued.  Confirming
runs the handler registered for the request's kind.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from tabnotes.note import Note

logger = logging.getLogger(__name__)


class ConfirmationKind(enum.Enum):
    DELETE_NOTE = "delete_note"
    CLOSE_UNSAVED_TAB = "close_unsaved_tab"


@dataclass(frozen=True)
class ConfirmationRequest:
    kind: ConfirmationKind
    note_id: int
    prompt: str


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Pending:
    request: ConfirmationRequest


ConfirmationState = Union[Idle, Pending]
Handler = Callable[[int], None]
Listener = Callable[[ConfirmationState], None]


class ConfirmationWorkflow:
    """Single-slot gate in front of destructive actions."""

    def __init__(self, handlers: Mapping[ConfirmationKind, Handler]) -> None:
        self._handlers = dict(handlers)
        self._state: ConfirmationState = Idle()
        self._listeners: list[Listener] = []

    @property
    def state(self) -> ConfirmationState:
        return self._state

    @property
    def pending(self) -> ConfirmationRequest | None:
        return self._state.request if isinstance(self._state, Pending) else None

    @property
    def is_pending(self) -> bool:
        return isinstance(self._state, Pending)

    def subscribe(self, listener: Listener) -> None:
        """Call *listener* with the new state after every transition."""
        self._listeners.append(listener)

    def _transition(self, state: ConfirmationState) -> None:
        self._state = state
        for listener in self._listeners:
            listener(state)

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------

    def _request(self, request: ConfirmationRequest) -> None:
        if self.pending is not None:
            logger.debug("Replacing pending %s for note %d", self.pending.kind.value, self.pending.note_id)
        self._transition(Pending(request))

    def request_delete(self, note: "Note") -> None:
        self._request(
            ConfirmationRequest(
                ConfirmationKind.DELETE_NOTE,
                note.id,
                f"Delete '{note.title}'? This cannot be undone.",
            )
        )

    def request_close_unsaved(self, note: "Note") -> None:
        self._request(
            ConfirmationRequest(
                ConfirmationKind.CLOSE_UNSAVED_TAB,
                note.id,
                f"'{note.title}' has unsaved changes. Close it anyway?",
            )
        )

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def confirm(self) -> ConfirmationRequest | None:
        """Run the pending action and return its request; no-op when idle."""
        request = self.pending
        if request is None:
            logger.debug("confirm() with nothing pending")
            return None
        self._transition(Idle())
        self._handlers[request.kind](request.note_id)
        return request

    def cancel(self) -> ConfirmationRequest | None:
        """Drop the pending request without acting on it."""
        request = self.pending
        if request is not None:
            self._transition(Idle())
        return request
