"""
Abbreviation Expander

Informal Kreol writing drops vowels and abbreviates multi-word insults.
For each lexicon term this module derives extra short spellings so the
lexicon matcher catches them without a slang dictionary:

  - consonant skeleton:  first consonant + every consonant followed by a vowel
                         ("falourmama" -> "flmm")
  - vowel-stripped:      every vowel removed ("gogote" -> "ggt")
  - initials:            first letter of each word ("la mor" -> "lm")

Variants that are too short or identical to the term are discarded.
"""

from __future__ import annotations

from kreolsafe.normalize import canonical_term, is_letter

VOWELS = frozenset("aeiouy")

MIN_SKELETON_LEN = 3
MIN_INITIALS_LEN = 2


def is_vowel(ch: str) -> bool:
    return ch in VOWELS


def is_consonant(ch: str) -> bool:
    return is_letter(ch) and not is_vowel(ch)


def consonant_skeleton(word: str) -> str:
    """Keep the first char if it is a consonant, then each consonant before a vowel."""
    out = []
    for i, c in enumerate(word):
        nxt = word[i + 1] if i + 1 < len(word) else ""
        if i == 0 and is_consonant(c):
            out.append(c)
        elif is_consonant(c) and is_vowel(nxt):
            out.append(c)
    return "".join(out)


def strip_vowels(word: str) -> str:
    return "".join(c for c in word if not is_vowel(c))


def token_initials(term: str) -> str:
    """First canonical character of each whitespace-separated token."""
    initials = []
    for token in term.split():
        canon = canonical_term(token)
        if canon:
            initials.append(canon[0])
    return "".join(initials)


def expand(term: str) -> frozenset[str]:
    """Derive the abbreviation variants of a raw lexicon term."""
    base = canonical_term(term)
    variants: set[str] = set()

    skeleton = consonant_skeleton(base)
    if len(skeleton) >= MIN_SKELETON_LEN and skeleton != base:
        variants.add(skeleton)

    no_vowels = strip_vowels(base)
    if len(no_vowels) >= MIN_SKELETON_LEN and no_vowels != base:
        variants.add(no_vowels)

    if " " in term:
        initials = token_initials(term)
        if len(initials) >= MIN_INITIALS_LEN and initials != base:
            variants.add(initials)

    return frozenset(variants)
