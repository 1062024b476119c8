"""Session and thread identifiers.

Reads and writes are best effort. An unreadable file counts as absent; a
failed write is logged and the caller keeps the value in memory for the
running session.
"""

from __future__ import annotations

import logging
import uuid

from .core import LS_SESSION, LS_THREAD, LocalStorage

logger = logging.getLogger(__name__)


class IdentityStore:
    def __init__(self, storage: LocalStorage) -> None:
        self._storage = storage

    def get_or_create_session_id(self) -> str:
        """Return the device's session id, minting and persisting one if absent."""
        existing = self._read(LS_SESSION)
        if existing:
            return existing

        session_id = str(uuid.uuid4())
        self._write(LS_SESSION, session_id)
        logger.debug("minted session id %s", session_id)
        return session_id

    def save_session_id(self, session_id: str) -> None:
        self._write(LS_SESSION, session_id)

    def load_thread_id(self) -> str | None:
        return self._read(LS_THREAD)

    def save_thread_id(self, thread_id: str | None) -> None:
        """Overwrite the thread id; ``None`` or empty clears it."""
        try:
            if not thread_id:
                self._storage.remove_item(LS_THREAD)
            else:
                self._storage.set_item(LS_THREAD, thread_id)
        except OSError:
            logger.warning("Could not persist thread id", exc_info=True)

    def _read(self, key: str) -> str | None:
        try:
            return self._storage.get_item(key) or None
        except (OSError, UnicodeDecodeError):
            logger.warning("Could not read %s, treating it as absent", key, exc_info=True)
            return None

    def _write(self, key: str, value: str) -> None:
        try:
            self._storage.set_item(key, value)
        except OSError:
            logger.warning("Could not persist %s", key, exc_info=True)
