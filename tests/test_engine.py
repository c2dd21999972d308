"""
Tests for the Hint Engine — detection on canonical text, offsets on raw text.
"""

from dataclasses import replace

import pytest

from kreolsafe.engine import EngineConfig, HintEngine, hint_engine
from kreolsafe.models import Hint
from kreolsafe.normalize import NormalizeOptions
from kreolsafe.patterns import STEREOTYPE_PATTERN


class TestLexiconHints:

    def test_insult_scenario(self):
        hints = hint_engine.build_hints("Twa to enn bourik")
        assert hints == [Hint(start=11, end=17, kind="harassment", quote="bourik")]

    def test_quote_is_raw_slice(self):
        text = "Twa to enn BOURÏK!"
        hints = hint_engine.build_hints(text)
        assert len(hints) == 1
        assert hints[0].quote == "BOURÏK"
        assert text[hints[0].start:hints[0].end] == hints[0].quote

    def test_decomposed_accent_offsets(self):
        text = "enn bouri\u0301k"  # combining mark inside the word
        hints = hint_engine.build_hints(text)
        assert [(h.start, h.end) for h in hints] == [(4, 11)]

    def test_abbreviation_hint(self):
        hints = hint_engine.build_hints("ki sa flmm la")
        assert [(h.kind, h.quote) for h in hints] == [("hate", "flmm")]

    def test_bucket_order_then_position(self):
        hints = hint_engine.build_hints("mo pou touy twa, bourik")
        assert [h.kind for h in hints] == ["harassment", "violence"]
        assert [h.quote for h in hints] == ["bourik", "touy"]

    def test_no_hints_on_clean_text(self):
        assert hint_engine.build_hints("Bonzour, ki manier?") == []

    def test_empty_text(self):
        assert hint_engine.build_hints("") == []


class TestRepeatCollapse:

    def test_doubled_vowel_does_not_match_base_term(self):
        # "baaaat" -> canonical "baat"; the term "bat" does not match
        assert hint_engine.build_hints("baaaat li!") == []

    def test_repeat_max_one_matches(self):
        config = replace(EngineConfig(), normalize=NormalizeOptions(repeat_max=1))
        engine = HintEngine(config)
        hints = engine.build_hints("baaaat li!")
        assert hints == [Hint(start=0, end=6, kind="violence", quote="baaaat")]

    def test_long_consonant_run_kept_to_two(self):
        # canonical "bourikk" is not "bourik"
        assert hint_engine.build_hints("bourikkkk") == []


class TestStereotypeHints:

    def test_stereotype_hint_covers_whole_span(self):
        text = "Bann immigran zot toultan parese."
        hints = hint_engine.build_hints(text)
        assert hints == [Hint(start=5, end=32, kind="bias", quote="immigran zot toultan parese")]

    def test_stereotype_after_lexicon(self):
        hints = hint_engine.build_hints("Bourik! Zom toultan bet.")
        assert [h.kind for h in hints] == ["harassment", "harassment", "bias"]

    def test_stereotype_kind_configurable(self):
        config = replace(EngineConfig(), stereotype=replace(STEREOTYPE_PATTERN, kind="stereotype"))
        engine = HintEngine(config)
        hints = engine.build_hints("zom toultan parese")
        assert hints[0].kind == "stereotype"

    def test_invalid_stereotype_kind_rejected(self):
        config = replace(EngineConfig(), stereotype=replace(STEREOTYPE_PATTERN, kind="nonsense"))
        with pytest.raises(ValueError):
            HintEngine(config)


class TestConfiguration:

    def test_custom_lexicon(self):
        engine = HintEngine(EngineConfig(
            lexicon={"spam": ["promo"]},
            offense_for_bucket={"spam": "spam"},
        ))
        hints = engine.build_hints("Gran PROMO zordi")
        assert [(h.kind, h.quote) for h in hints] == [("spam", "PROMO")]

    def test_empty_lexicon_is_valid(self):
        engine = HintEngine(EngineConfig(lexicon={}, offense_for_bucket={"insults": "harassment"}))
        assert engine.build_hints("bourik") == []

    def test_describe_lists_buckets(self):
        surface = hint_engine.describe()
        assert [s["bucket"] for s in surface][:4] == ["insults", "threats", "violence", "slur_bias"]
        assert surface[-1]["offense"] == "bias"

    def test_engine_is_reusable(self):
        first = hint_engine.build_hints("bourik")
        second = hint_engine.build_hints("bourik")
        assert first == second
