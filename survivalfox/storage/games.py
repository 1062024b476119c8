"""Selected game id."""

from __future__ import annotations

import logging

from survivalfox.games import DEFAULT_GAME_ID

from .core import LS_GAME_ID, LocalStorage

logger = logging.getLogger(__name__)


class GameStore:
    def __init__(self, storage: LocalStorage) -> None:
        self._storage = storage

    def current_game_id(self) -> str | None:
        """The persisted selection, without applying the default.

        An unreadable file counts as no selection.
        """
        try:
            return self._storage.get_item(LS_GAME_ID) or None
        except (OSError, UnicodeDecodeError):
            logger.warning("Could not read game id", exc_info=True)
            return None

    def load_game_id(self) -> str:
        """Return the persisted selection, persisting the default if there is none."""
        existing = self.current_game_id()
        if existing:
            return existing
        self.save_game_id(DEFAULT_GAME_ID)
        return DEFAULT_GAME_ID

    def save_game_id(self, game_id: str) -> None:
        try:
            self._storage.set_item(LS_GAME_ID, game_id)
        except OSError:
            logger.warning("Could not persist game id", exc_info=True)
