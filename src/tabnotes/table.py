"""Tabular view of the note collection for the note browser.

Returns :mod:`polars` DataFrames so the shell can hand them straight to
``mo.ui.table``.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

import polars as pl

if TYPE_CHECKING:
    from tabnotes.note import Note

SCHEMA: dict[str, pl.DataType] = {
    "id": pl.Int64(),
    "title": pl.Utf8(),
    "words": pl.Int64(),
    "chars": pl.Int64(),
    "dirty": pl.Boolean(),
    "open": pl.Boolean(),
    "selected": pl.Boolean(),
}


def notes_frame(
    notes: Iterable["Note"],
    open_ids: Iterable[int] = (),
    selected: int | None = None,
) -> pl.DataFrame:
    """One row per note, in the order given."""
    open_set = set(open_ids)
    rows = [
        {
            "id": n.id,
            "title": n.title,
            "words": n.word_count,
            "chars": n.char_count,
            "dirty": n.dirty,
            "open": n.id in open_set,
            "selected": n.id == selected,
        }
        for n in notes
    ]
    return pl.DataFrame(rows, schema=SCHEMA)
