"""Plain-text rendering of the chat transcript."""

from __future__ import annotations

import json
from collections.abc import Sequence
from datetime import datetime

from survivalfox.models import ChatMessage, GameTheme, RagApiError, SourceRecord
from survivalfox.sources import (
    DEFAULT_LICENSE_NAME,
    INLINE_SOURCE_LIMIT,
    cap_sources,
    first_link,
    license_link,
    source_label,
)

EMPTY_TRANSCRIPT = "Unten im Chat kannst du dem SurvivalFox Fragen stellen."
USER_NAME = "Du"
ASSISTANT_NAME = "Fuchs"


def format_time(ts_ms: int) -> str:
    """Local HH:MM for an epoch-milliseconds timestamp, "" if out of range."""
    try:
        return datetime.fromtimestamp(ts_ms / 1000).strftime("%H:%M")
    except (OverflowError, OSError, ValueError):
        return ""


def short_id(value: str | None) -> str:
    return f"{value[:8]}…" if value else "—"


def header_line(theme: GameTheme, session_id: str, thread_id: str | None) -> str:
    return f"{theme.label} · Session: {short_id(session_id)} · Thread: {short_id(thread_id)}"


def message_header(message: ChatMessage) -> str:
    name = USER_NAME if message.role == "user" else ASSISTANT_NAME
    header = f"{name} · {format_time(message.created_at)}"
    if message.role == "assistant" and message.interaction_id:
        header += f" · {message.interaction_id}"
    return header


def attribution_footer(sources: Sequence[SourceRecord]) -> str | None:
    """One line: labels (or the first link), then the first record's license."""
    shown = cap_sources(sources, INLINE_SOURCE_LIMIT)
    if not shown:
        return None

    parts: list[str] = []
    text = " · ".join(source_label(s) for s in shown)
    link = first_link(shown)
    if link:
        parts.append(f"Quelle: {text or link} <{link}>")
    else:
        parts.append(f"Quelle: {text}")

    lic = license_link(shown)
    if lic:
        parts.append(f"Lizenz: {lic[0]} <{lic[1]}>")
    return " | ".join(parts)


def render_message(message: ChatMessage) -> str:
    lines = [message_header(message), message.content]
    if message.role == "assistant":
        footer = attribution_footer(message.sources or [])
        if footer:
            lines.append(footer)
    return "\n".join(lines)


def render_transcript(messages: Sequence[ChatMessage]) -> str:
    if not messages:
        return EMPTY_TRANSCRIPT
    return "\n\n".join(render_message(m) for m in messages)


def render_sources(sources: Sequence[SourceRecord]) -> str:
    """Numbered detail list, one record per line."""
    lines = []
    for i, s in enumerate(sources, start=1):
        line = f"{i}. {source_label(s)}"
        if s.url:
            line += f" <{s.url}>"
        if s.author:
            line += f" von {s.author}"
        if s.license_url:
            line += f" ({s.license_name or DEFAULT_LICENSE_NAME})"
        lines.append(line)
    return "\n".join(lines)


def format_error(error: RagApiError) -> str:
    """The whole error, raw body included, as indented JSON."""
    return json.dumps(
        error.model_dump(exclude_none=True), indent=2, ensure_ascii=False, default=str,
    )
