"""
Local Preferences.

Per-device settings persisted as JSON under ``~/.inkline/``: the sort
configuration of each list view, the editor font size and the saved
session token. Unreadable or invalid values fall back to defaults.
"""

import json
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from inkline.backend.core.logging import get_logger, log_with_source
from inkline.client.projection import SortConfig

logger = get_logger(__name__)

DEFAULT_DIRECTORY = Path.home() / ".inkline"
PREFERENCES_FILE = "preferences.json"

FONT_SIZE_KEY = "editor_font_size"
TOKEN_KEY = "access_token"
DEFAULT_FONT_SIZE = 16
MIN_FONT_SIZE = 12
MAX_FONT_SIZE = 32


class ListView(str, Enum):
    NOTES = "notes"
    ARCHIVED = "archived_notes"

    @property
    def storage_key(self) -> str:
        return f"{self.value}_sort_config"


def clamp_font_size(size: int) -> int:
    return max(MIN_FONT_SIZE, min(MAX_FONT_SIZE, size))


class PreferenceStore:
    """JSON-file backed preferences. Every setter writes through to disk."""

    def __init__(self, directory: Path | None = None) -> None:
        self.directory = directory or DEFAULT_DIRECTORY
        self.path = self.directory / PREFERENCES_FILE
        self._data: dict[str, Any] = self._read()

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            log_with_source(
                logger, "client", "warning", "Preferences unreadable, using defaults",
                path=str(self.path), error=str(e),
            )
            return {}
        if not isinstance(data, dict):
            return {}
        return data

    def _write(self) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self._data, indent=2), encoding="utf-8")

    def get_sort_config(self, view: ListView) -> SortConfig:
        raw = self._data.get(view.storage_key)
        if raw is None:
            return SortConfig()
        try:
            return SortConfig.model_validate(raw)
        except ValidationError:
            log_with_source(
                logger, "client", "warning", "Ignoring invalid sort preference",
                view=view.value,
            )
            return SortConfig()

    def set_sort_config(self, view: ListView, config: SortConfig) -> None:
        self._data[view.storage_key] = config.model_dump(mode="json")
        self._write()

    @property
    def font_size(self) -> int:
        raw = self._data.get(FONT_SIZE_KEY)
        if isinstance(raw, int) and not isinstance(raw, bool):
            return clamp_font_size(raw)
        if raw is not None:
            log_with_source(logger, "client", "warning", "Ignoring invalid font size", value=raw)
        return DEFAULT_FONT_SIZE

    @font_size.setter
    def font_size(self, size: int) -> None:
        self._data[FONT_SIZE_KEY] = clamp_font_size(size)
        self._write()

    @property
    def access_token(self) -> str | None:
        token = self._data.get(TOKEN_KEY)
        return token if isinstance(token, str) and token else None

    @access_token.setter
    def access_token(self, token: str | None) -> None:
        if token is None:
            self._data.pop(TOKEN_KEY, None)
        else:
            self._data[TOKEN_KEY] = token
        self._write()
