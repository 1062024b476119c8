"""Tests for transcript rendering."""

import json
from datetime import datetime

from survivalfox.games import get_theme
from survivalfox.models import ChatMessage, RagApiError, SourceRecord
from survivalfox.render import (
    EMPTY_TRANSCRIPT,
    attribution_footer,
    format_error,
    format_time,
    header_line,
    message_header,
    render_sources,
    render_transcript,
)

TS = int(datetime(2026, 1, 1, 14, 5).timestamp() * 1000)


def _assistant(**kw) -> ChatMessage:
    return ChatMessage(id="a", role="assistant", content="Near the shore.", created_at=TS, **kw)


def test_format_time():
    assert format_time(TS) == "14:05"


def test_format_time_out_of_range():
    assert format_time(10**20) == ""


def test_header_line_shortens_ids():
    line = header_line(get_theme("valheim"), "5b1e0c8a-2f4d-4c6e-9a1b-3d5f7e9c1a2b", None)
    assert line == "VALHEIM · Session: 5b1e0c8a… · Thread: —"


def test_message_headers():
    user = ChatMessage(id="u", role="user", content="q", created_at=TS)
    assert message_header(user) == "Du · 14:05"
    assert message_header(_assistant(interaction_id="i-7")) == "Fuchs · 14:05 · i-7"


def test_footer_lists_labels_and_link():
    sources = [SourceRecord(title="Wiki", url="https://x"), SourceRecord(source="Guide")]
    assert attribution_footer(sources) == "Quelle: Wiki · Guide <https://x>"


def test_footer_without_link():
    assert attribution_footer([SourceRecord(title="Wiki")]) == "Quelle: Wiki"


def test_footer_with_license():
    sources = [SourceRecord(title="Wiki", url="https://x", license_url="https://cc")]
    assert attribution_footer(sources).endswith("Lizenz: CC BY-SA <https://cc>")


def test_footer_shows_at_most_five():
    sources = [SourceRecord(title=f"S{i}") for i in range(7)]
    assert attribution_footer(sources) == "Quelle: S0 · S1 · S2 · S3 · S4"


def test_no_footer_without_sources():
    assert attribution_footer([]) is None


def test_empty_transcript():
    assert render_transcript([]) == EMPTY_TRANSCRIPT


def test_transcript_in_order():
    user = ChatMessage(id="u", role="user", content="Where is the forge?", created_at=TS)
    text = render_transcript([user, _assistant(sources=[SourceRecord(title="Wiki")])])
    assert text.index("Where is the forge?") < text.index("Near the shore.")
    assert text.endswith("Quelle: Wiki")


def test_render_sources_numbered():
    text = render_sources([
        SourceRecord(title="Wiki", url="https://x", author="Ann", license_url="https://cc"),
        SourceRecord(chunk_id="c1"),
    ])
    assert text.splitlines() == [
        "1. Wiki <https://x> von Ann (CC BY-SA)",
        "2. Unbekannte Quelle",
    ]


def test_format_error_includes_raw_body():
    error = RagApiError(message="Invalid response payload", status=500, body=["raw"], kind="invalid_payload")
    data = json.loads(format_error(error))
    assert data == {
        "name": "RagApiError",
        "message": "Invalid response payload",
        "status": 500,
        "body": ["raw"],
        "kind": "invalid_payload",
    }
