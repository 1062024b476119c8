"""Source attribution: dedup keys, labels and display caps.

Dedup key priority is url → title → source → chunk_id, falling back to a
canonical JSON dump of the whole record. Two records with no identifying
field and identical remaining fields collide; that is accepted.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Sequence

from survivalfox.models import SourceRecord

DETAIL_SOURCE_LIMIT = 8
INLINE_SOURCE_LIMIT = 5

UNKNOWN_SOURCE_LABEL = "Unbekannte Quelle"
DEFAULT_LICENSE_NAME = "CC BY-SA"


def _first_non_empty(*values: str | None) -> str | None:
    for value in values:
        if value and value.strip():
            return value.strip()
    return None


def source_key(record: SourceRecord) -> str:
    key = _first_non_empty(record.url, record.title, record.source, record.chunk_id)
    if key is not None:
        return key
    return json.dumps(record.model_dump(exclude_none=True), sort_keys=True, default=str)


def source_label(record: SourceRecord) -> str:
    return _first_non_empty(record.title, record.source, record.url) or UNKNOWN_SOURCE_LABEL


def dedupe_sources(records: Iterable[SourceRecord]) -> list[SourceRecord]:
    """Keep the first record per dedup key, in input order."""
    seen: dict[str, SourceRecord] = {}
    for record in records:
        seen.setdefault(source_key(record), record)
    return list(seen.values())


def cap_sources(records: Iterable[SourceRecord], limit: int) -> list[SourceRecord]:
    """Dedupe, then truncate for display. The underlying list is untouched."""
    return dedupe_sources(records)[:limit]


def first_link(records: Sequence[SourceRecord]) -> str | None:
    """Prefer the first http(s) url, else any non-empty url."""
    for record in records:
        if (record.url or "").startswith("http"):
            return record.url
    for record in records:
        if record.url:
            return record.url
    return None


def license_link(records: Sequence[SourceRecord]) -> tuple[str, str] | None:
    """(name, url) of the first record's license, if it links one."""
    if not records or not records[0].license_url:
        return None
    first = records[0]
    return first.license_name or DEFAULT_LICENSE_NAME, first.license_url
