"""Core domain models.

The stores, the gateway and the controller all operate on these types.
Pydantic is used for validation and serialisation at every data boundary:
the persisted message log, the outbound request and the inbound answer.
"""

from __future__ import annotations

import re
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

ChatRole = Literal["user", "assistant"]

ErrorKind = Literal["transport", "invalid_payload", "missing_ids", "unknown"]

_UUID_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
    re.IGNORECASE,
)


def is_valid_uuid(value: Any) -> bool:
    """True for a well-formed UUID string (version 1-5, RFC 4122 variant)."""
    return isinstance(value, str) and _UUID_RE.match(value) is not None


class SourceRecord(BaseModel):
    """An attribution entry accompanying a generated answer."""

    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    title: str | None = None
    url: str | None = None
    source: str | None = None
    chunk_id: str | None = None
    author: str | None = None
    license_name: str | None = None
    license_url: str | None = None


class ChatMessage(BaseModel):
    """A single entry in the append-only chat log.

    ``created_at`` is epoch milliseconds and is stored as ``createdAt`` so
    logs written by the web client load unchanged.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    role: ChatRole
    content: str
    created_at: int = Field(alias="createdAt")
    sources: list[SourceRecord] | None = None  # assistant only
    interaction_id: str | None = None  # assistant only


class GameTheme(BaseModel):
    """Display theme for one game selection."""

    id: str
    label: str
    accent: str


# ---------------------------------------------------------------------------
# Wire contract of the rag-answer function
# ---------------------------------------------------------------------------

class AnswerRequest(BaseModel):
    """Outbound ask.

    ``doc_filter`` distinguishes "not given" (omitted from the body) from an
    explicit ``None`` (sent as ``null``); check ``model_fields_set``.
    """

    session_id: str
    thread_id: str | None = None
    query: str
    spoiler_level: int = Field(ge=0, le=100)
    match_count: int | None = None
    doc_filter: str | None = None
    developer_mode: bool | None = None


class AnswerResponse(BaseModel):
    """Inbound answer, validated by the controller after the gateway checks ids."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    ok: bool | None = None
    session_id: str
    thread_id: str
    answer: str | None = None
    sources: list[SourceRecord] = Field(default_factory=list)
    interaction_id: str | None = None
    meta: dict[str, Any] | None = None

    @field_validator("sources", mode="before")
    @classmethod
    def _null_sources(cls, value: Any) -> Any:
        return [] if value is None else value


class RagApiError(BaseModel):
    """The single normalized error shape for every failed ask."""

    name: str = "RagApiError"
    message: str = "Request failed"
    status: int | None = None
    status_text: str | None = None
    body: Any = None
    kind: ErrorKind = "unknown"


class AnswerSuccess(BaseModel):
    kind: Literal["ok"] = "ok"
    data: dict[str, Any]


class AnswerFailure(BaseModel):
    kind: Literal["error"] = "error"
    error: RagApiError


AnswerResult = AnswerSuccess | AnswerFailure
