"""On-device key-value storage.

Each key is one flat file under a configurable base directory; the file
holds the raw string value. There is no database; reads and writes go
through three helper methods, the same surface a browser's localStorage
offers.

    {base}/
      survivalfox_session_id
      survivalfox_thread_id
      survivalfox_messages_v1     ← JSON array of ChatMessage
      survivalfox_game_id
"""

from __future__ import annotations

import re
from pathlib import Path

LS_SESSION = "survivalfox_session_id"
LS_THREAD = "survivalfox_thread_id"
LS_MESSAGES = "survivalfox_messages_v1"
LS_GAME_ID = "survivalfox_game_id"

_KEY_RE = re.compile(r"^[A-Za-z0-9_.-]+$")


class LocalStorage:
    """Synchronous string store keyed by name.

    ``set_item`` and ``remove_item`` let ``OSError`` propagate (disk full,
    read-only directory); callers decide whether that matters.
    """

    def __init__(self, base_path: Path) -> None:
        self._base = base_path
        self._base.mkdir(parents=True, exist_ok=True)

    @property
    def base_path(self) -> Path:
        return self._base

    def _path(self, key: str) -> Path:
        if not _KEY_RE.match(key):
            raise ValueError(f"Invalid storage key {key!r}")
        return self._base / key

    def get_item(self, key: str) -> str | None:
        path = self._path(key)
        if not path.is_file():
            return None
        return path.read_text(encoding="utf-8")

    def set_item(self, key: str, value: str) -> None:
        self._path(key).write_text(value, encoding="utf-8")

    def remove_item(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)
