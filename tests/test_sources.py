"""Tests for source dedup, labels and display helpers."""

from survivalfox.models import SourceRecord
from survivalfox.sources import (
    DETAIL_SOURCE_LIMIT,
    INLINE_SOURCE_LIMIT,
    UNKNOWN_SOURCE_LABEL,
    cap_sources,
    dedupe_sources,
    first_link,
    license_link,
    source_key,
    source_label,
)


class TestSourceKey:
    def test_url_wins(self) -> None:
        assert source_key(SourceRecord(url="u", title="t", source="s", chunk_id="c")) == "u"

    def test_priority_order(self) -> None:
        assert source_key(SourceRecord(title="t", source="s", chunk_id="c")) == "t"
        assert source_key(SourceRecord(source="s", chunk_id="c")) == "s"
        assert source_key(SourceRecord(chunk_id="c")) == "c"

    def test_blank_values_are_skipped(self) -> None:
        assert source_key(SourceRecord(url="   ", title=" Wiki ")) == "Wiki"

    def test_numeric_chunk_id_is_text(self) -> None:
        assert source_key(SourceRecord.model_validate({"chunk_id": 42})) == "42"

    def test_fallback_is_structural(self) -> None:
        a = SourceRecord(author="Ann")
        b = SourceRecord(author="Bob")
        assert source_key(a) != source_key(b)
        assert source_key(a) == source_key(SourceRecord(author="Ann"))


class TestDedupe:
    def test_drops_later_duplicates(self) -> None:
        records = [SourceRecord(url="a"), SourceRecord(url="a"), SourceRecord(title="b")]
        result = dedupe_sources(records)
        assert result == [SourceRecord(url="a"), SourceRecord(title="b")]

    def test_keeps_first_occurrence(self) -> None:
        first = SourceRecord(url="a", title="First")
        second = SourceRecord(url="a", title="Second")
        assert dedupe_sources([first, second]) == [first]

    def test_preserves_first_seen_order(self) -> None:
        records = [SourceRecord(url=u) for u in ["c", "a", "c", "b", "a"]]
        assert [r.url for r in dedupe_sources(records)] == ["c", "a", "b"]

    def test_idempotent(self) -> None:
        records = [SourceRecord(url="a"), SourceRecord(title="a"), SourceRecord(source="x"), SourceRecord(url="x")]
        once = dedupe_sources(records)
        assert dedupe_sources(once) == once

    def test_empty(self) -> None:
        assert dedupe_sources([]) == []


class TestLabel:
    def test_title_first(self) -> None:
        assert source_label(SourceRecord(title="Wiki", source="s", url="u")) == "Wiki"

    def test_then_source_then_url(self) -> None:
        assert source_label(SourceRecord(source="s", url="u")) == "s"
        assert source_label(SourceRecord(url="u")) == "u"

    def test_unknown(self) -> None:
        assert source_label(SourceRecord(chunk_id="c")) == UNKNOWN_SOURCE_LABEL


class TestDisplayHelpers:
    def test_caps(self) -> None:
        records = [SourceRecord(url=str(i)) for i in range(12)]
        assert len(cap_sources(records, DETAIL_SOURCE_LIMIT)) == 8
        assert len(cap_sources(records, INLINE_SOURCE_LIMIT)) == 5
        assert len(records) == 12

    def test_cap_applies_after_dedupe(self) -> None:
        records = [SourceRecord(url="same")] * 6 + [SourceRecord(url="other")]
        assert [r.url for r in cap_sources(records, INLINE_SOURCE_LIMIT)] == ["same", "other"]

    def test_first_link_prefers_http(self) -> None:
        records = [SourceRecord(url="wiki/page"), SourceRecord(url="https://x")]
        assert first_link(records) == "https://x"

    def test_first_link_falls_back_to_any_url(self) -> None:
        assert first_link([SourceRecord(title="t"), SourceRecord(url="wiki/page")]) == "wiki/page"
        assert first_link([SourceRecord(title="t")]) is None

    def test_license_link_defaults_name(self) -> None:
        assert license_link([SourceRecord(license_url="https://cc")]) == ("CC BY-SA", "https://cc")
        assert license_link([SourceRecord(license_name="MIT", license_url="https://m")]) == ("MIT", "https://m")

    def test_license_link_only_looks_at_first_record(self) -> None:
        assert license_link([SourceRecord(title="t"), SourceRecord(license_url="https://cc")]) is None
        assert license_link([]) is None
