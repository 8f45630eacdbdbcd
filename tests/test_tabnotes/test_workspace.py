"""Integration tests for tabnotes.workspace.Workspace."""

import random
from pathlib import Path

import polars as pl
import pytest

from tabnotes.config import AppConfig
from tabnotes.confirm import ConfirmationKind
from tabnotes.markdown import Heading, Paragraph
from tabnotes.workspace import Workspace


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def ws(tmp_path: Path, clock: FakeClock) -> Workspace:
    (tmp_path / "Alpha.md").write_text("# Alpha\nbody", encoding="utf-8")
    (tmp_path / "beta.md").write_text("beta words here", encoding="utf-8")
    return Workspace(AppConfig(notes_dir=tmp_path, autosave_interval=10), clock=clock)


def _by_title(ws: Workspace, title: str):
    return next(n for n in ws.notes if n.title == title)


def _assert_consistent(ws: Workspace) -> None:
    keys = [n.title.lower() for n in ws.notes]
    assert keys == sorted(keys)
    ids = {n.id for n in ws.notes}
    assert set(ws.tabs.tabs) <= ids
    assert len(ws.tabs.tabs) == len(set(ws.tabs.tabs))
    if ws.tabs.tabs:
        assert ws.tabs.selected in ws.tabs.tabs
    else:
        assert ws.tabs.selected is None


# ---------------------------------------------------------------------------
# Startup / create
# ---------------------------------------------------------------------------


class TestStartup:
    def test_loads_directory(self, ws: Workspace):
        assert [n.title for n in ws.notes] == ["Alpha", "beta"]
        assert ws.current is None
        assert ws.pending is None

    def test_open_directory_helper(self, tmp_path: Path):
        ws = Workspace.open_directory(tmp_path / "fresh", theme="light")
        assert ws.notes == []
        assert ws.theme == "light"
        assert (tmp_path / "fresh").is_dir()

    def test_notes_dir_that_is_a_file(self, tmp_path: Path):
        target = tmp_path / "notes.md"
        target.write_text("", encoding="utf-8")
        ws = Workspace.open_directory(target)
        assert ws.notes == []
        assert ws.current is None

    def test_create_opens_and_selects(self, ws: Workspace):
        note = ws.create()
        assert note.title == "Note_3"
        assert ws.tabs.tabs == [note.id]
        assert ws.current is note


# ---------------------------------------------------------------------------
# Delete flow
# ---------------------------------------------------------------------------


class TestDeleteFlow:
    def test_request_then_confirm_deletes(self, ws: Workspace, tmp_path: Path):
        alpha = _by_title(ws, "Alpha")
        ws.open(alpha.id)
        ws.request_delete(alpha.id)
        assert alpha in ws.notes
        ws.confirm()
        assert alpha not in ws.notes
        assert not (tmp_path / "Alpha.md").exists()
        assert ws.current is None

    def test_only_latest_request_is_confirmed(self, ws: Workspace):
        alpha, beta = _by_title(ws, "Alpha"), _by_title(ws, "beta")
        ws.request_delete(alpha.id)
        ws.request_delete(beta.id)
        assert ws.pending.note_id == beta.id
        ws.confirm()
        assert [n.title for n in ws.notes] == ["Alpha"]

    def test_cancel_keeps_note(self, ws: Workspace):
        alpha = _by_title(ws, "Alpha")
        ws.request_delete(alpha.id)
        ws.cancel()
        assert alpha in ws.notes
        assert ws.pending is None

    def test_deleting_selected_selects_last_tab(self, ws: Workspace):
        alpha, beta = _by_title(ws, "Alpha"), _by_title(ws, "beta")
        extra = ws.create()
        ws.open(alpha.id)
        ws.open(beta.id)
        ws.select(alpha.id)
        ws.request_delete(alpha.id)
        ws.confirm()
        assert ws.tabs.tabs == [extra.id, beta.id]
        assert ws.tabs.selected == beta.id

    def test_dirty_note_deleted_without_second_prompt(self, ws: Workspace):
        alpha = _by_title(ws, "Alpha")
        ws.open(alpha.id)
        ws.edit(alpha.id, "unsaved")
        ws.request_delete(alpha.id)
        ws.confirm()
        assert ws.pending is None
        assert ws.tabs.tabs == []

    def test_confirm_after_note_vanished(self, ws: Workspace):
        alpha = _by_title(ws, "Alpha")
        ws.request_delete(alpha.id)
        ws.store.delete(alpha)
        ws.confirm()
        assert ws.pending is None


# ---------------------------------------------------------------------------
# Close flow
# ---------------------------------------------------------------------------


class TestCloseFlow:
    def test_clean_close_is_immediate(self, ws: Workspace):
        alpha = _by_title(ws, "Alpha")
        ws.open(alpha.id)
        assert ws.request_close(alpha.id)
        assert ws.pending is None
        assert ws.tabs.tabs == []

    def test_dirty_close_needs_confirmation(self, ws: Workspace):
        alpha = _by_title(ws, "Alpha")
        ws.open(alpha.id)
        ws.edit(alpha.id, "changed")
        assert not ws.request_close(alpha.id)
        assert ws.pending.kind is ConfirmationKind.CLOSE_UNSAVED_TAB
        ws.confirm()
        assert ws.tabs.tabs == []
        # closing a tab never deletes the note
        assert alpha in ws.notes
        assert alpha.dirty

    def test_cancel_keeps_dirty_tab(self, ws: Workspace):
        alpha = _by_title(ws, "Alpha")
        ws.open(alpha.id)
        ws.edit(alpha.id, "changed")
        ws.request_close(alpha.id)
        ws.cancel()
        assert ws.tabs.tabs == [alpha.id]


# ---------------------------------------------------------------------------
# Editing, saving, autosave
# ---------------------------------------------------------------------------


class TestEditing:
    def test_rename_keeps_tab(self, ws: Workspace):
        alpha = _by_title(ws, "Alpha")
        ws.open(alpha.id)
        assert ws.rename(alpha.id, "zulu")
        assert ws.current.title == "zulu"
        assert [n.title for n in ws.notes] == ["beta", "zulu"]

    def test_stats(self, ws: Workspace):
        beta = _by_title(ws, "beta")
        assert ws.stats(beta.id) == {"words": 3, "chars": 15, "dirty": False}

    def test_preview(self, ws: Workspace):
        alpha = _by_title(ws, "Alpha")
        assert ws.preview(alpha.id) == [Heading(1, "Alpha"), Paragraph("body")]

    def test_save_all(self, ws: Workspace, tmp_path: Path):
        alpha, beta = _by_title(ws, "Alpha"), _by_title(ws, "beta")
        ws.edit(alpha.id, "new alpha")
        assert ws.save_all() == [alpha]
        assert (tmp_path / "Alpha.md").read_text(encoding="utf-8") == "new alpha"
        assert not beta.dirty

    def test_tick_uses_configured_interval(self, ws: Workspace, clock: FakeClock):
        alpha = _by_title(ws, "Alpha")
        ws.edit(alpha.id, "later")
        clock.now += 9
        assert ws.tick() == []
        clock.now += 1
        assert ws.tick() == [alpha]

    def test_search_and_table(self, ws: Workspace):
        beta = _by_title(ws, "beta")
        ws.open(beta.id)
        df = ws.table("WORDS")
        assert isinstance(df, pl.DataFrame)
        assert df["title"].to_list() == ["beta"]
        assert df["selected"].to_list() == [True]

    def test_toggles(self, ws: Workspace):
        assert ws.toggle_theme() == "light"
        assert ws.toggle_theme() == "dark"
        assert ws.toggle_preview() is True


# ---------------------------------------------------------------------------
# Stale references / reload
# ---------------------------------------------------------------------------


class TestInvalidReferences:
    def test_unknown_ids_are_noops(self, ws: Workspace):
        ws.open(-1)
        ws.select(-1)
        ws.edit(-1, "x")
        ws.request_delete(-1)
        assert not ws.request_close(-1)
        assert not ws.rename(-1, "x")
        assert not ws.save(-1)
        assert ws.stats(-1) is None
        assert ws.preview(-1) == []
        assert ws.pending is None
        assert ws.tabs.tabs == []

    def test_reload_reattaches_tabs_by_path(self, ws: Workspace, tmp_path: Path):
        alpha, beta = _by_title(ws, "Alpha"), _by_title(ws, "beta")
        ws.open(alpha.id)
        ws.open(beta.id)
        ws.select(alpha.id)
        (tmp_path / "beta.md").unlink()
        ws.reload()
        new_alpha = _by_title(ws, "Alpha")
        assert ws.tabs.tabs == [new_alpha.id]
        assert ws.tabs.selected == new_alpha.id

    def test_reload_moves_selection_when_selected_file_vanishes(self, ws: Workspace, tmp_path: Path):
        alpha, beta = _by_title(ws, "Alpha"), _by_title(ws, "beta")
        ws.open(alpha.id)
        ws.open(beta.id)
        (tmp_path / "beta.md").unlink()
        ws.reload()
        assert ws.current.title == "Alpha"

    def test_reload_saves_unsaved_edits_first(self, ws: Workspace, tmp_path: Path):
        alpha = _by_title(ws, "Alpha")
        ws.open(alpha.id)
        ws.edit(alpha.id, "kept edit")
        ws.reload()
        assert (tmp_path / "Alpha.md").read_text(encoding="utf-8") == "kept edit"
        new_alpha = _by_title(ws, "Alpha")
        assert new_alpha.content == "kept edit"
        assert not new_alpha.dirty
        assert ws.current is new_alpha

    def test_reload_refused_when_save_fails(self, ws: Workspace, tmp_path: Path):
        alpha = _by_title(ws, "Alpha")
        ws.open(alpha.id)
        ws.edit(alpha.id, "cannot land")
        alpha.path = tmp_path / "gone" / "Alpha.md"
        (tmp_path / "late.md").write_text("", encoding="utf-8")
        ws.reload()
        assert [n.title for n in ws.notes] == ["Alpha", "beta"]
        assert _by_title(ws, "Alpha") is alpha
        assert alpha.content == "cannot land"
        assert alpha.dirty
        assert ws.current is alpha


# ---------------------------------------------------------------------------
# Random intent sequences
# ---------------------------------------------------------------------------


class TestInvariants:
    @pytest.mark.parametrize("seed", range(5))
    def test_random_sequences_stay_consistent(self, ws: Workspace, seed: int):
        rng = random.Random(seed)
        names = ["alpha", "Beta", "gamma", "a b", "ZED", "mid"]
        for _ in range(120):
            ids = [n.id for n in ws.notes]
            action = rng.choice(["create", "open", "close", "delete", "rename", "edit", "confirm", "cancel"])
            target = rng.choice(ids) if ids else -1
            if action == "create":
                ws.create()
            elif action == "open":
                ws.open(target)
            elif action == "close":
                ws.request_close(target)
            elif action == "delete":
                ws.request_delete(target)
            elif action == "rename":
                ws.rename(target, rng.choice(names))
            elif action == "edit":
                ws.edit(target, rng.choice(names))
            elif action == "confirm":
                ws.confirm()
            else:
                ws.cancel()
            _assert_consistent(ws)
