"""Shared fixtures for Playwright UI tests.

Starts the Marimo notes app as a subprocess against a throwaway notes
directory and provides a ``live_url`` fixture that gives the base URL to
each test.  The server is started once per session to keep test runs fast.
"""

from __future__ import annotations

import os
import subprocess
import sys
import time
from pathlib import Path

import pytest
import requests

_ROOT = Path(__file__).parent.parent.parent
_APP = _ROOT / "notebooks" / "notes_app.py"
_PORT = 2718

SAMPLE_NOTES = {
    "Getting_Started": "# Getting Started\n\nWelcome to your notes.\n- one\n- two\n",
    "shopping": "milk\neggs\n",
}


@pytest.fixture(scope="session")
def notes_dir(tmp_path_factory) -> Path:
    directory = tmp_path_factory.mktemp("notes")
    for title, content in SAMPLE_NOTES.items():
        (directory / f"{title}.md").write_text(content, encoding="utf-8")
    return directory


@pytest.fixture(scope="session")
def marimo_server(notes_dir: Path):
    """Start the marimo app server; yield the process; terminate on teardown."""
    env = {**os.environ, "TABNOTES_DIR": str(notes_dir), "TABNOTES_AUTOSAVE": "1"}
    proc = subprocess.Popen(
        [
            sys.executable,
            "-m",
            "marimo",
            "run",
            str(_APP),
            "--port",
            str(_PORT),
            "--headless",
        ],
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        cwd=str(_ROOT),
        env=env,
    )

    # Wait up to 20 s for the server to be ready
    deadline = time.time() + 20
    while time.time() < deadline:
        try:
            r = requests.get(f"http://localhost:{_PORT}/", timeout=1)
            if r.status_code < 500:
                break
        except requests.RequestException:
            time.sleep(0.5)
    else:
        proc.terminate()
        stdout, stderr = proc.communicate(timeout=5)
        pytest.fail(
            f"Marimo server did not start within 20 s.\n"
            f"stdout: {stdout.decode()}\nstderr: {stderr.decode()}"
        )

    yield proc

    proc.terminate()
    try:
        proc.wait(timeout=5)
    except subprocess.TimeoutExpired:
        proc.kill()


@pytest.fixture(scope="session")
def live_url(marimo_server) -> str:  # noqa: ARG001
    return f"http://localhost:{_PORT}"
