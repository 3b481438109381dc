"""
Tests for the TriggerMatcher.
"""

import pytest
from pydantic import ValidationError

from skillbook.config.schema import MatcherConfig
from skillbook.documents import DocumentMetadata
from skillbook.matcher import TriggerMatcher, tokenize
from skillbook.store import DocumentStore


def _meta(name: str, description: str, kind: str = "skill") -> DocumentMetadata:
    return DocumentMetadata(name=name, description=description, kind=kind)


@pytest.fixture
def widgets() -> list[DocumentMetadata]:
    return [
        _meta("alpha", "guide for widgets"),
        _meta("beta", "guide for gadgets"),
    ]


class TestTokenize:
    def test_lowercases_and_splits(self):
        assert tokenize("Clean-Architecture, Use Cases!") == ["clean", "architecture", "use", "cases"]

    def test_underscores_split(self):
        assert tokenize("snake_case") == ["snake", "case"]

    def test_unicode_letters_and_digits(self):
        assert tokenize("Guía de café, paso 2") == ["guía", "de", "café", "paso", "2"]


class TestMatch:
    def test_single_match(self, widgets):
        assert TriggerMatcher(MatcherConfig(min_token_overlap=1)).match("widgets", widgets) == ["alpha"]

    def test_no_match_returns_empty(self, widgets):
        assert TriggerMatcher().match("gizmos", widgets) == []

    def test_case_insensitive(self, widgets):
        assert TriggerMatcher().match("WIDGETS", widgets) == ["alpha"]

    def test_substring_match(self, widgets):
        assert TriggerMatcher().match("widget", widgets) == ["alpha"]

    def test_short_tokens_need_exact_match(self, widgets):
        assert TriggerMatcher().match("wi", widgets) == []

    def test_stop_words_ignored(self, widgets):
        assert TriggerMatcher().match("for", widgets) == []

    def test_empty_query(self, widgets):
        assert TriggerMatcher().match("", widgets) == []
        assert TriggerMatcher().match("  ?! ", widgets) == []

    def test_repeated_query_tokens_count_once(self, widgets):
        matcher = TriggerMatcher(MatcherConfig(min_token_overlap=2))
        assert matcher.match("widgets widgets", widgets) == []


class TestRanking:
    def test_higher_overlap_first(self):
        metadata = [
            _meta("one", "widgets"),
            _meta("two", "widgets and gadgets together"),
        ]
        assert TriggerMatcher().match("widgets gadgets", metadata) == ["two", "one"]

    def test_shorter_description_breaks_ties(self):
        metadata = [
            _meta("alpha", "pdf tools for every kind of document"),
            _meta("zeta", "pdf tools"),
        ]
        assert TriggerMatcher().match("pdf", metadata) == ["zeta", "alpha"]

    def test_name_breaks_remaining_ties(self, widgets):
        assert TriggerMatcher().match("guide", widgets) == ["alpha", "beta"]

    def test_ranking_is_deterministic_regardless_of_input_order(self, widgets):
        matcher = TriggerMatcher()
        assert matcher.match("guide", list(reversed(widgets))) == ["alpha", "beta"]

    def test_min_token_overlap_threshold(self):
        metadata = [
            _meta("one", "widgets"),
            _meta("two", "widgets and gadgets"),
        ]
        matcher = TriggerMatcher(MatcherConfig(min_token_overlap=2))
        assert matcher.match("widgets gadgets", metadata) == ["two"]

    def test_limit(self, widgets):
        matcher = TriggerMatcher(MatcherConfig(limit=1))
        assert matcher.match("guide", widgets) == ["alpha"]

    def test_rank_reports_matched_tokens(self, widgets):
        candidates = TriggerMatcher().rank("widget guide", widgets)
        assert candidates[0].name == "alpha"
        assert candidates[0].overlap == 2
        assert candidates[0].matched_tokens == ("widget", "guide")


class TestMetadataOnly:
    def test_references_excluded_by_default(self):
        metadata = [
            _meta("skill", "widgets"),
            _meta("skill/references/widgets.md", "widgets reference", kind="reference"),
        ]
        assert TriggerMatcher().match("widgets", metadata) == ["skill"]

    def test_references_included_on_request(self):
        metadata = [
            _meta("skill", "widgets"),
            _meta("skill/references/widgets.md", "widgets reference", kind="reference"),
        ]
        matcher = TriggerMatcher(MatcherConfig(include_references=True))
        assert matcher.match("widgets", metadata) == ["skill", "skill/references/widgets.md"]

    def test_body_changes_do_not_alter_ranking(self):
        def build(body_alpha: str, body_beta: str) -> DocumentStore:
            store = DocumentStore()
            store.load_all({
                "alpha/SKILL.md": f"---\nname: alpha\ndescription: guide for widgets\n---\n{body_alpha}",
                "beta/SKILL.md": f"---\nname: beta\ndescription: guide for gadgets\n---\n{body_beta}",
            })
            return store

        matcher = TriggerMatcher()
        original = build("short", "short")
        mutated = build("gadgets gadgets gadgets " * 100, "widgets everywhere " * 100)

        for query in ("widgets", "gadgets", "guide", "gizmos", "guide widgets"):
            assert matcher.match(query, original.metadata()) == matcher.match(
                query, mutated.metadata()
            )


class TestMatcherConfig:
    def test_min_token_overlap_must_be_positive(self):
        with pytest.raises(ValidationError):
            MatcherConfig(min_token_overlap=0)

    def test_stop_words_lowercased(self):
        config = MatcherConfig(stop_words=["The", "GUIDE"])
        assert TriggerMatcher(config).match("Guide", [_meta("a", "guide")]) == []
