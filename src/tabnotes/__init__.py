"""Tabnotes: a tabbed Markdown note library."""

from tabnotes.autosave import AutosaveScheduler
from tabnotes.config import AppConfig, load_config
from tabnotes.confirm import ConfirmationKind, ConfirmationRequest, ConfirmationWorkflow
from tabnotes.markdown import render
from tabnotes.note import Note
from tabnotes.store import NoteStore, sanitize_title
from tabnotes.tabs import TabManager
from tabnotes.workspace import Workspace

__all__ = [
    "Note",
    "NoteStore",
    "sanitize_title",
    "TabManager",
    "AutosaveScheduler",
    "ConfirmationKind",
    "ConfirmationRequest",
    "ConfirmationWorkflow",
    "render",
    "AppConfig",
    "load_config",
    "Workspace",
]
