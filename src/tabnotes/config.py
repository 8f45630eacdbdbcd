"""Application configuration.

Settings come from an optional YAML file, then from the environment::

    # tabnotes.yaml
    notes_dir: notes          # relative to this file
    autosave_interval: 30     # seconds
    theme: dark               # or "light"
    preview: false            # open in preview mode
    log_level: WARNING

Environment overrides: ``TABNOTES_DIR``, ``TABNOTES_AUTOSAVE``,
``TABNOTES_THEME``, ``TABNOTES_LOG_LEVEL``.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from tabnotes.autosave import DEFAULT_INTERVAL

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "tabnotes.yaml"
THEMES = ("dark", "light")


@dataclass
class AppConfig:
    notes_dir: Path = field(default_factory=lambda: Path.cwd() / "notes")
    autosave_interval: float = DEFAULT_INTERVAL
    theme: str = "dark"
    preview: bool = False
    log_level: str = "WARNING"

    def validate(self) -> "AppConfig":
        if self.autosave_interval <= 0:
            raise ValueError(f"autosave_interval must be positive, got {self.autosave_interval!r}")
        if self.theme not in THEMES:
            raise ValueError(f"theme must be one of {THEMES}, got {self.theme!r}")
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ValueError(f"unknown log_level {self.log_level!r}")
        return self

    def to_dict(self) -> dict[str, Any]:
        return {
            "notes_dir": str(self.notes_dir),
            "autosave_interval": self.autosave_interval,
            "theme": self.theme,
            "preview": self.preview,
            "log_level": self.log_level,
        }


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        logger.warning("Ignoring malformed config %s: %s", path, exc)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring config %s: expected a mapping", path)
        return {}
    return data


def load_config(path: Path | None = None, env: Mapping[str, str] | None = None) -> AppConfig:
    """Build an :class:`AppConfig` from *path* (if it exists) and the environment.

    Parameters
    ----------
    path:
        YAML file to read.  Defaults to ``tabnotes.yaml`` in the working
        directory; a missing file just means defaults.
    env:
        Mapping to read overrides from.  Defaults to ``os.environ``.
    """
    env = os.environ if env is None else env
    path = Path(path) if path is not None else Path.cwd() / CONFIG_FILENAME
    base_dir = path.parent

    data = _read_yaml(path) if path.is_file() else {}
    config = AppConfig()

    if "notes_dir" in data:
        config.notes_dir = base_dir / Path(str(data["notes_dir"])).expanduser()
    if "autosave_interval" in data:
        config.autosave_interval = float(data["autosave_interval"])
    if "theme" in data:
        config.theme = str(data["theme"])
    if "preview" in data:
        config.preview = bool(data["preview"])
    if "log_level" in data:
        config.log_level = str(data["log_level"])

    if env.get("TABNOTES_DIR"):
        config.notes_dir = Path(env["TABNOTES_DIR"]).expanduser()
    if env.get("TABNOTES_AUTOSAVE"):
        config.autosave_interval = float(env["TABNOTES_AUTOSAVE"])
    if env.get("TABNOTES_THEME"):
        config.theme = env["TABNOTES_THEME"]
    if env.get("TABNOTES_LOG_LEVEL"):
        config.log_level = env["TABNOTES_LOG_LEVEL"]

    return config.validate()
