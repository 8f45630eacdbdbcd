import marimo

__generated_with = "0.13.10"
app = marimo.App(width="full", app_title="Tabnotes")


@app.cell
def _imports():
    import marimo as mo

    return (mo,)


# ---------------------------------------------------------------------------
# Bootstrap: config, logging, workspace
# ---------------------------------------------------------------------------


@app.cell
def _setup():
    import logging
    import sys
    from pathlib import Path

    ROOT = Path(__file__).parent.parent
    SRC = ROOT / "src"

    if str(SRC) not in sys.path:
        sys.path.insert(0, str(SRC))

    from tabnotes.config import CONFIG_FILENAME, load_config
    from tabnotes.workspace import Workspace

    config = load_config(ROOT / CONFIG_FILENAME)
    logging.basicConfig(
        level=config.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    ws = Workspace(config)
    return (ws,)


# ---------------------------------------------------------------------------
# Reactive state
# ---------------------------------------------------------------------------


@app.cell
def _state(mo):
    # Bumped after every intent that changes the collection, tabs or dialog
    get_version, set_version = mo.state(0)
    # Bumped on keystrokes and autosaves; drives the dirty markers and status bar
    get_edits, set_edits = mo.state(0)

    def bump():
        set_version(lambda v: v + 1)

    return bump, get_edits, get_version, set_edits


@app.cell
def _dialog_state(mo, ws):
    # Mirrors the pending confirmation; set by the workflow on every transition
    get_dialog, set_dialog = mo.state(ws.pending)
    ws.confirmations.subscribe(lambda state: set_dialog(ws.pending))
    return (get_dialog,)


# ---------------------------------------------------------------------------
# Autosave timer
# ---------------------------------------------------------------------------


@app.cell
def _autosave_timer(mo):
    autosave_timer = mo.ui.refresh(
        options=["1s", "5s", "10s"],
        default_interval="5s",
        label="autosave check",
    )
    return (autosave_timer,)


@app.cell
def _autosave(autosave_timer, set_edits, ws):
    autosave_timer.value  # noqa: B018  re-run on every refresh tick
    if ws.tick():
        set_edits(lambda v: v + 1)
    return


# ---------------------------------------------------------------------------
# Toolbar
# ---------------------------------------------------------------------------


@app.cell
def _toolbar(mo, ws, bump):
    new_btn = mo.ui.button(
        label="+ New Note",
        on_click=lambda _: (ws.create(), bump()),
        kind="success",
    )
    save_btn = mo.ui.button(label="Save all", on_click=lambda _: (ws.save_all(), bump()))
    reload_btn = mo.ui.button(label="Reload", on_click=lambda _: (ws.reload(), bump()))
    theme_btn = mo.ui.button(label="Theme", on_click=lambda _: (ws.toggle_theme(), bump()))
    preview_btn = mo.ui.button(label="Preview", on_click=lambda _: (ws.toggle_preview(), bump()))
    search_input = mo.ui.text(placeholder="Search notes…", label="", full_width=True)

    toolbar = mo.hstack(
        [new_btn, save_btn, reload_btn, search_input, preview_btn, theme_btn],
        gap="8px",
        align="center",
    )
    return search_input, toolbar


# ---------------------------------------------------------------------------
# Sidebar: note browser
# ---------------------------------------------------------------------------


@app.cell
def _sidebar(mo, ws, bump, get_edits, get_version, search_input):
    get_edits()
    get_version()
    results = ws.search(search_input.value.strip())

    open_buttons = mo.ui.array(
        [
            mo.ui.button(
                label=f"{'● ' if n.dirty else ''}{n.title}",
                on_click=lambda _, i=n.id: (ws.open(i), bump()),
                kind="ghost",
                full_width=True,
            )
            for n in results
        ]
    )
    delete_buttons = mo.ui.array(
        [
            mo.ui.button(label="🗑", on_click=lambda _, i=n.id: (ws.request_delete(i), bump()), kind="ghost")
            for n in results
        ]
    )

    sidebar = mo.vstack(
        [
            mo.md("## Notes"),
            *[
                mo.hstack([open_btn, del_btn], gap="2px", align="center")
                for open_btn, del_btn in zip(open_buttons, delete_buttons)
            ],
        ]
        if results
        else [mo.md("## Notes"), mo.md("_No notes match._")],
        gap="4px",
    )
    return delete_buttons, open_buttons, sidebar


# ---------------------------------------------------------------------------
# Tab bar
# ---------------------------------------------------------------------------


@app.cell
def _tab_bar(mo, ws, bump, get_edits, get_version):
    get_edits()
    get_version()
    tab_notes = ws.tabs.open_notes
    selected_id = ws.tabs.selected

    tab_buttons = mo.ui.array(
        [
            mo.ui.button(
                label=f"{'▸ ' if n.id == selected_id else ''}{n.title}{' *' if n.dirty else ''}",
                on_click=lambda _, i=n.id: (ws.select(i), bump()),
                kind="neutral" if n.id == selected_id else "ghost",
            )
            for n in tab_notes
        ]
    )
    close_buttons = mo.ui.array(
        [
            mo.ui.button(label="×", on_click=lambda _, i=n.id: (ws.request_close(i), bump()), kind="ghost")
            for n in tab_notes
        ]
    )

    tab_bar = mo.hstack(
        [mo.hstack([t, c], gap="0") for t, c in zip(tab_buttons, close_buttons)],
        gap="6px",
        justify="start",
        wrap=True,
    )
    return close_buttons, tab_bar, tab_buttons


# ---------------------------------------------------------------------------
# Confirmation dialog
# ---------------------------------------------------------------------------


@app.cell
def _confirmation(mo, ws, bump, get_dialog):
    request = get_dialog()

    confirm_btn = mo.ui.button(label="Confirm", on_click=lambda _: (ws.confirm(), bump()), kind="danger")
    cancel_btn = mo.ui.button(label="Cancel", on_click=lambda _: (ws.cancel(), bump()))

    if request is None:
        dialog = mo.md("")
    else:
        dialog = mo.callout(
            mo.vstack([mo.md(f"**{request.prompt}**"), mo.hstack([confirm_btn, cancel_btn], gap="8px")]),
            kind="warn",
        )
    return cancel_btn, confirm_btn, dialog


# ---------------------------------------------------------------------------
# Editor / preview
# ---------------------------------------------------------------------------


@app.cell
def _editor(mo, ws, get_version, set_edits):
    get_version()
    note = ws.current

    def _edit(text, note_id=note.id if note else None):
        ws.edit(note_id, text)
        set_edits(lambda v: v + 1)

    def _block_md(block):
        if block.kind == "heading":
            return f"{'#' * block.level} {block.text}"
        if block.kind == "list_item":
            return f"- {block.text}"
        if block.kind == "quote":
            return f"> {block.text}"
        if block.kind == "code_fence_start":
            return f"`{block.info or 'code'}`"
        if block.kind == "code_fence_end":
            return "`end`"
        if block.kind == "spacer":
            return "&nbsp;"
        return block.text

    if note is None:
        title_input = mo.ui.text(value="", disabled=True)
        editor = mo.md("_No note open. Create a new note or open an existing one._")
    else:
        title_input = mo.ui.text(value=note.title, label="Title")
        if ws.preview_mode:
            editor = mo.vstack([mo.md(_block_md(b)) for b in ws.preview(note.id)], gap="2px")
        else:
            editor = mo.ui.text_area(
                value=note.content,
                on_change=_edit,
                full_width=True,
                rows=28,
            )
    return editor, title_input


@app.cell
def _rename(mo, ws, bump, title_input):
    # Renames only on click; the title field itself never touches the file
    rename_btn = mo.ui.button(
        label="Rename",
        on_click=lambda _, i=ws.tabs.selected: (ws.rename(i, title_input.value), bump()),
        disabled=ws.current is None,
    )
    return (rename_btn,)


@app.cell
def _status_bar(mo, ws, get_edits, get_version):
    get_edits()
    get_version()
    current = ws.current
    if current is None:
        status_bar = mo.md(f"{len(ws.notes)} notes · theme: {ws.theme}")
    else:
        stats = ws.stats(current.id)
        status_bar = mo.md(
            f"{stats['words']} words · {stats['chars']} chars"
            f" · {'unsaved changes' if stats['dirty'] else 'saved'} · theme: {ws.theme}"
        )
    return (status_bar,)


# ---------------------------------------------------------------------------
# Library table
# ---------------------------------------------------------------------------


@app.cell
def _library(mo, ws, get_edits, get_version, search_input):
    get_edits()
    get_version()
    library = mo.accordion({"Library": mo.ui.table(ws.table(search_input.value.strip()))})
    return (library,)


# ---------------------------------------------------------------------------
# Main layout
# ---------------------------------------------------------------------------


@app.cell
def _main_layout(
    mo,
    ws,
    toolbar,
    sidebar,
    tab_bar,
    dialog,
    title_input,
    rename_btn,
    editor,
    library,
    status_bar,
    autosave_timer,
):
    palette = (
        {"background": "#1e1e1e", "color": "#e0e0e0"}
        if ws.theme == "dark"
        else {"background": "#ffffff", "color": "#202020"}
    )

    layout = mo.vstack(
        [
            toolbar,
            dialog,
            mo.hstack(
                [
                    mo.vstack(
                        [sidebar],
                        style={"width": "220px", "min-width": "120px", "padding": "8px"},
                    ),
                    mo.vstack(
                        [tab_bar, mo.md("---"), mo.hstack([title_input, rename_btn], gap="8px", align="end"), editor],
                        style={"flex": "1", "padding": "8px"},
                    ),
                ],
                align="start",
                gap="0",
            ),
            library,
            mo.hstack([status_bar, autosave_timer], justify="space-between"),
        ],
        gap="4px",
    ).style(palette)
    return (layout,)


@app.cell
def _render(layout):
    layout  # noqa: B018  marimo displays the last expression as cell output
    return


if __name__ == "__main__":
    app.run()
