"""Configuration utilities for extracting file histories."""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict

from .logging import get_logger

logger = get_logger(__name__)

DEFAULT_DATE_FORMAT = "%d %B %Y"


@dataclass(slots=True)
class HistoryConfig:
    """Runtime configuration.

    Attributes
    ----------
    base_dir:
        Directory holding the optional ``config.json`` file. Defaults to
        ``~/.edithistory``.
    date_format:
        ``strftime`` pattern used for human readable edit dates.
    search_parent_directories:
        Whether repository discovery walks up from the file's directory. When
        disabled, only the file's own directory may hold the repository.
    log_level:
        Default logging level for the command line tool.
    log_format:
        ``console`` for human readable log lines or ``json`` for JSON lines.
    """

    base_dir: Path = field(default_factory=lambda: Path.home() / ".edithistory")
    date_format: str = DEFAULT_DATE_FORMAT
    search_parent_directories: bool = True
    log_level: str = "WARNING"
    log_format: str = "console"

    def config_path(self) -> Path:
        """Return path to the JSON configuration file."""
        return self.base_dir / "config.json"

    def update(self, values: Dict[str, Any]) -> None:
        """Apply known settings from ``values``; unknown keys are ignored."""
        known = {f.name for f in fields(self)}
        for name, value in values.items():
            if name not in known:
                logger.debug("config_key_ignored", key=name)
                continue
            if name == "base_dir":
                value = Path(value).expanduser()
            setattr(self, name, value)

    @classmethod
    def load(cls, path: Path | None = None) -> "HistoryConfig":
        """Load configuration from ``path`` (defaults to ``config_path()``).

        A missing file yields the defaults. An unreadable or malformed file is
        reported and the defaults are used instead.
        """

        config = cls()
        config_path = path or config.config_path()
        if not config_path.exists():
            return config

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                values = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("config_unreadable", path=str(config_path), error=str(e))
            return config

        if not isinstance(values, dict):
            logger.warning("config_not_an_object", path=str(config_path))
            return config
        config.update(values)
        return config


DEFAULT_CONFIG = HistoryConfig()
