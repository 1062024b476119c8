"""Chat message storage (append-only log).

Availability wins over integrity here: a corrupt log reads as an empty
history and a failed write is logged and dropped. The caller's in-memory
list stays authoritative for the running session.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence

from pydantic import TypeAdapter, ValidationError

from survivalfox.models import ChatMessage

from .core import LS_MESSAGES, LocalStorage

logger = logging.getLogger(__name__)

_MESSAGES = TypeAdapter(list[ChatMessage])


class ConversationStore:
    def __init__(self, storage: LocalStorage) -> None:
        self._storage = storage

    def load_messages(self) -> list[ChatMessage]:
        """Load the log. Returns [] if missing or unreadable."""
        try:
            raw = self._storage.get_item(LS_MESSAGES)
        except (OSError, UnicodeDecodeError):
            logger.warning("Could not read message log", exc_info=True)
            return []
        if not raw:
            return []
        try:
            return _MESSAGES.validate_json(raw)
        except ValidationError as e:
            logger.warning("Discarding corrupt message log: %s", e.errors()[:1])
            return []

    def save_messages(self, messages: Sequence[ChatMessage]) -> None:
        """Persist the whole log, swallowing write failures."""
        data = [m.model_dump(by_alias=True, exclude_none=True) for m in messages]
        try:
            self._storage.set_item(LS_MESSAGES, json.dumps(data, ensure_ascii=False))
        except OSError:
            logger.warning("Could not persist %d messages", len(data), exc_info=True)

    def append_message(self, message: ChatMessage) -> list[ChatMessage]:
        """Append one message and return the updated log."""
        messages = self.load_messages()
        messages.append(message)
        self.save_messages(messages)
        return messages

    def clear(self) -> None:
        self.save_messages([])
