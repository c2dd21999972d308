"""
Tests for the stereotype Pattern Matcher.
"""

from kreolsafe.patterns import STEREOTYPE_PATTERN, PatternMatcher, StereotypePattern


matcher = PatternMatcher()


class TestStereotypeWindow:

    def test_full_span_reported(self):
        assert list(matcher.finditer("zom toultan parese")) == [(0, 18)]

    def test_span_covers_subject_through_pejorative(self):
        text = "bann immigran zot toultan parese."
        assert list(matcher.finditer(text)) == [(5, 32)]

    def test_sentence_terminator_breaks_window(self):
        assert list(matcher.finditer("zom. toultan parese")) == []
        assert list(matcher.finditer("zom toultan! parese")) == []

    def test_newline_breaks_window(self):
        assert list(matcher.finditer("zom\ntoultan parese")) == []

    def test_window_limit(self):
        far = "zom " + "x" * 70 + " toultan parese"
        assert list(matcher.finditer(far)) == []

    def test_within_window(self):
        near = "zom " + "x" * 50 + " toultan parese"
        assert list(matcher.finditer(near)) == [(0, len(near))]

    def test_order_matters(self):
        assert list(matcher.finditer("parese toultan zom")) == []

    def test_english_terms(self):
        text = "immigrants must be lazy"
        assert list(matcher.finditer(text)) == [(0, len(text))]

    def test_default_kind(self):
        assert matcher.kind == "bias"


class TestConfiguration:

    def test_empty_list_never_matches(self):
        empty = PatternMatcher(StereotypePattern(subjects=(), modals=("zot",), pejoratives=("bet",)))
        assert list(empty.finditer("zom zot bet")) == []

    def test_custom_kind(self):
        custom = PatternMatcher(StereotypePattern(
            subjects=STEREOTYPE_PATTERN.subjects,
            modals=STEREOTYPE_PATTERN.modals,
            pejoratives=STEREOTYPE_PATTERN.pejoratives,
            kind="stereotype",
        ))
        assert custom.kind == "stereotype"

    def test_custom_window(self):
        tight = PatternMatcher(StereotypePattern(
            subjects=("zom",), modals=("zot",), pejoratives=("bet",), window=2,
        ))
        assert list(tight.finditer("zom zot bet")) == [(0, 11)]
        assert list(tight.finditer("zom  xx zot bet")) == []
