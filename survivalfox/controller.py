"""Conversation controller — runs one ask end-to-end.

Ask flow:
  1. Guard: non-empty query, a session id, nothing already in flight.
  2. Enter Sending: clear the last error, append + persist the user
     message, clear the input text.
  3. Call the gateway with the session id, thread id and spoiler level.
  4. Success: adopt the server's session id and thread id (persisted),
     append + persist the assistant message, back to Idle.
     Failure: enter Failed(error). The user message stays in the log.

State is a tagged variant rather than a loading flag plus a nullable
error:

    Idle ──ask──▶ Sending ──ok──▶ Idle
                     └────error──▶ Failed ──ask──▶ Sending

Failed accepts asks exactly like Idle; it only carries the error to show.

The controller owns the in-memory session id, thread id and message log.
The stores are written through on every mutation; their failures are
swallowed there, so memory stays authoritative for the running session.
"""

from __future__ import annotations

import logging
import time
import uuid
from typing import Any, Literal

from pydantic import BaseModel, ValidationError

from survivalfox.games import get_theme, normalize_game_id
from survivalfox.gateway import Gateway
from survivalfox.models import (
    AnswerFailure,
    AnswerRequest,
    AnswerResponse,
    ChatMessage,
    ChatRole,
    GameTheme,
    RagApiError,
    SourceRecord,
)
from survivalfox.sources import DETAIL_SOURCE_LIMIT, cap_sources, dedupe_sources
from survivalfox.spoiler import DEFAULT_SPOILER_LEVEL, snap_spoiler_level, spoiler_label
from survivalfox.storage import ConversationStore, GameStore, IdentityStore

logger = logging.getLogger(__name__)

UNKNOWN_ERROR_MESSAGE = "Unbekannter Fehler"


# ---------------------------------------------------------------------------
# Ask state
# ---------------------------------------------------------------------------

class Idle(BaseModel):
    phase: Literal["idle"] = "idle"


class Sending(BaseModel):
    phase: Literal["sending"] = "sending"
    query: str


class Failed(BaseModel):
    phase: Literal["failed"] = "failed"
    error: RagApiError


AskState = Idle | Sending | Failed


def new_message(
    role: ChatRole,
    content: str,
    *,
    sources: list[SourceRecord] | None = None,
    interaction_id: str | None = None,
) -> ChatMessage:
    return ChatMessage(
        id=str(uuid.uuid4()),
        role=role,
        content=content,
        created_at=int(time.time() * 1000),
        sources=sources,
        interaction_id=interaction_id,
    )


class ConversationController:
    """Owns conversation state and orchestrates asks.

    Args:
        identity, conversation, games: the on-device stores.
        gateway:               anything implementing ``Gateway``.
        default_spoiler_level: starting level, snapped. Not persisted.
        request_options:       extra AnswerRequest fields sent with every ask
                               (match_count, doc_filter, developer_mode).
    """

    def __init__(
        self,
        *,
        identity: IdentityStore,
        conversation: ConversationStore,
        games: GameStore,
        gateway: Gateway,
        default_spoiler_level: int = DEFAULT_SPOILER_LEVEL,
        request_options: dict[str, Any] | None = None,
    ) -> None:
        self._identity = identity
        self._conversation = conversation
        self._games = games
        self._gateway = gateway
        self._request_options = dict(request_options or {})

        self._session_id = ""
        self._thread_id: str | None = None
        self._messages: list[ChatMessage] = []
        self._game_id = ""
        self._spoiler_level = snap_spoiler_level(default_spoiler_level)
        self._state: AskState = Idle()
        self._sources_for: str | None = None
        # Bumped by reset_thread(); a response from an older epoch is dropped.
        self._epoch = 0

        self.input_text = ""

    def start(self) -> None:
        """Load identity, history and game selection from the stores."""
        self._session_id = self._identity.get_or_create_session_id()
        self._thread_id = self._identity.load_thread_id()
        self._messages = self._conversation.load_messages()
        self._game_id = self._games.load_game_id()
        logger.info(
            "conversation started session=%s thread=%s messages=%d game=%s",
            self._session_id[:8], (self._thread_id or "-")[:8], len(self._messages), self._game_id,
        )

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def state(self) -> AskState:
        return self._state

    @property
    def is_sending(self) -> bool:
        return isinstance(self._state, Sending)

    @property
    def error(self) -> RagApiError | None:
        return self._state.error if isinstance(self._state, Failed) else None

    @property
    def messages(self) -> tuple[ChatMessage, ...]:
        return tuple(self._messages)

    @property
    def session_id(self) -> str:
        return self._session_id

    @property
    def thread_id(self) -> str | None:
        return self._thread_id

    @property
    def game_id(self) -> str:
        return self._game_id

    @property
    def theme(self) -> GameTheme:
        return get_theme(self._game_id)

    @property
    def spoiler_level(self) -> int:
        return self._spoiler_level

    @property
    def spoiler_label(self) -> str:
        return spoiler_label(self._spoiler_level)

    @property
    def can_send(self) -> bool:
        return bool(self.input_text.strip()) and bool(self._session_id) and not self.is_sending

    # ------------------------------------------------------------------
    # Ask
    # ------------------------------------------------------------------

    async def ask(self, query: str | None = None) -> ChatMessage | None:
        """Send one question. Returns the assistant message, or None.

        ``query`` defaults to the current input text. A no-op (returning
        None without touching any state) when the query is blank, there is
        no session id yet, or another ask is in flight.
        """
        q = (self.input_text if query is None else query).strip()
        if not q or not self._session_id or self.is_sending:
            logger.debug("ask ignored (blank=%s sending=%s)", not q, self.is_sending)
            return None

        self._state = Sending(query=q)
        epoch = self._epoch
        self._append(new_message("user", q))
        self.input_text = ""

        try:
            request = AnswerRequest(
                session_id=self._session_id,
                thread_id=self._thread_id,
                query=q,
                spoiler_level=self._spoiler_level,
                **self._request_options,
            )
            result = await self._gateway.ask(request)

            if epoch != self._epoch:
                logger.info("thread was reset while waiting; dropping response")
                self._state = Idle()
                return None

            if isinstance(result, AnswerFailure):
                self._state = Failed(error=result.error)
                return None

            try:
                response = AnswerResponse.model_validate(result.data)
            except ValidationError as e:
                logger.warning("unusable answer payload: %s", e.errors()[:1])
                self._state = Failed(error=RagApiError(
                    message=UNKNOWN_ERROR_MESSAGE,
                    body=result.data,
                    kind="unknown",
                ))
                return None

            return self._apply_answer(response)
        except Exception as e:
            logger.exception("ask failed unexpectedly")
            self._state = Failed(error=RagApiError(
                message=UNKNOWN_ERROR_MESSAGE,
                body=str(e),
                kind="unknown",
            ))
            return None
        finally:
            if isinstance(self._state, Sending):
                self._state = Idle()

    def _apply_answer(self, response: AnswerResponse) -> ChatMessage:
        # The server may rotate the session id; its value wins.
        self._session_id = response.session_id
        self._identity.save_session_id(response.session_id)

        self._thread_id = response.thread_id
        self._identity.save_thread_id(response.thread_id)

        assistant = new_message(
            "assistant",
            response.answer or "",
            sources=dedupe_sources(response.sources),
            interaction_id=response.interaction_id,
        )
        self._append(assistant)
        self._state = Idle()
        return assistant

    def _append(self, message: ChatMessage) -> None:
        self._messages.append(message)
        self._conversation.save_messages(self._messages)

    # ------------------------------------------------------------------
    # Thread, game, spoiler, sources
    # ------------------------------------------------------------------

    def reset_thread(self) -> None:
        """Start a fresh conversation. The session id is kept."""
        self._epoch += 1
        self._thread_id = None
        self._identity.save_thread_id(None)

        self._messages = []
        self._conversation.save_messages(self._messages)

        if isinstance(self._state, Failed):
            self._state = Idle()
        self.input_text = ""
        self._sources_for = None

    def select_game(self, game_id: str) -> None:
        """Switch game; a game other than the active one resets the thread."""
        current = normalize_game_id(self._game_id)
        if current != normalize_game_id(game_id):
            self.reset_thread()
        self._games.save_game_id(game_id)
        self._game_id = game_id

    def set_spoiler_level(self, raw: float) -> int:
        self._spoiler_level = snap_spoiler_level(raw)
        return self._spoiler_level

    def show_sources(self, message_id: str | None) -> None:
        self._sources_for = message_id

    @property
    def active_sources(self) -> list[SourceRecord]:
        """Sources of the message picked with show_sources(), capped for display."""
        if not self._sources_for:
            return []
        for message in self._messages:
            if message.id == self._sources_for:
                return cap_sources(message.sources or [], DETAIL_SOURCE_LIMIT)
        return []
