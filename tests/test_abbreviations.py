"""
Tests for the Abbreviation Expander.
"""

from kreolsafe.abbreviations import (
    consonant_skeleton,
    expand,
    strip_vowels,
    token_initials,
)


class TestGenerators:

    def test_consonant_skeleton(self):
        assert consonant_skeleton("falourmama") == "flmm"

    def test_skeleton_keeps_leading_consonant_only_once(self):
        assert consonant_skeleton("bete") == "bt"

    def test_skeleton_skips_leading_vowel(self):
        assert consonant_skeleton("idiot") == "d"

    def test_y_is_a_vowel(self):
        assert consonant_skeleton("kouyon") == "k"

    def test_strip_vowels_removes_every_vowel(self):
        assert strip_vowels("gogote") == "ggt"
        assert strip_vowels("falourmama") == "flrmm"

    def test_token_initials(self):
        assert token_initials("La Mor") == "lm"
        assert token_initials("  zot   bann  ") == "zb"


class TestExpand:

    def test_falourmama(self):
        assert expand("falourmama") == {"flmm", "flrmm"}

    def test_duplicate_variants_collapse(self):
        assert expand("gogote") == {"ggt"}

    def test_accented_term(self):
        assert expand("Gogoté") == {"ggt"}

    def test_short_term_has_no_variants(self):
        assert expand("bet") == frozenset()

    def test_short_skeleton_dropped(self):
        # skeleton "br" is too short, "brk" survives
        assert expand("bourik") == {"brk"}

    def test_multi_word_initials(self):
        assert expand("la mor") == {"l mr", "lm"}

    def test_single_word_never_gets_initials(self):
        assert "b" not in expand("bachara")

    def test_all_vowels(self):
        assert expand("yaya") == frozenset()

    def test_deterministic(self):
        assert expand("likimama") == expand("likimama") == {"lkmm"}
