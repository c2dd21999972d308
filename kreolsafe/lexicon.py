"""
Lexicon Matcher

Per-bucket term sets compiled into boundary-aware matchers that scan
canonical text. Each bucket maps to exactly one offense kind.

Boundaries are defined by the ``is_letter`` predicate: a match may not be
immediately preceded or followed by a Unicode letter. Digits, punctuation
and whitespace all count as boundaries.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator, Mapping, Optional, Sequence

from kreolsafe.abbreviations import expand
from kreolsafe.models import OFFENSE_KINDS
from kreolsafe.normalize import canonical_term, is_letter


# ============================================================
# DEFAULT LEXICON (Kreol Morisien seed words + English)
# ============================================================

OFFENSE_FOR_BUCKET: dict[str, str] = {
    "insults": "harassment",
    "threats": "violence",
    "violence": "violence",
    "slur_bias": "hate",
}

# Seed words: no accents, lowercase, singular where possible
LEXICON: dict[str, tuple[str, ...]] = {
    "insults": (
        "bet", "bete", "kouyon", "koyon", "kretin", "bourik", "idiot",
        "stupide", "moron", "perdant", "loser", "sal", "malprop", "trash",
        "garbag", "clueless",
    ),
    "threats": (
        "touy", "tue", "kill", "bat", "bate", "atake", "attack", "brile", "burn",
        "tir", "tire", "shoot", "detwi", "detruire", "destroy", "menas", "menace",
    ),
    "violence": (
        "vyolans", "violence", "mor", "lamor", "mori", "die", "death", "lynch",
        "linch",
    ),
    "slur_bias": (
        "falourmama", "gogote", "pilone", "madras", "nation", "lascar", "torma",
        "torpa", "morma", "morpa", "liki", "likimama", "kkliki", "bachara",
    ),
}


# ============================================================
# BUCKET MATCHER
# ============================================================

@dataclass(frozen=True)
class BucketMatcher:
    """Compiled matcher for one bucket.

    ``alternatives`` are canonical strings ordered longest first, so at any
    position the longest alternative that satisfies both boundaries wins.
    """
    bucket: str
    offense: str
    alternatives: tuple[str, ...]
    _candidates: Optional[re.Pattern]

    @classmethod
    def compile(cls, bucket: str, offense: str, terms: Sequence[str]) -> "BucketMatcher":
        if offense not in OFFENSE_KINDS:
            raise ValueError(f"Unknown offense kind for bucket {bucket!r}: {offense!r}")

        alts: set[str] = set()
        for term in terms:
            base = canonical_term(term)
            if base:
                alts.add(base)
            alts.update(expand(term))

        ordered = tuple(sorted(alts, key=lambda a: (-len(a), a)))
        candidates = (
            re.compile("|".join(re.escape(a) for a in ordered)) if ordered else None
        )
        return cls(bucket=bucket, offense=offense, alternatives=ordered, _candidates=candidates)

    def _match_at(self, text: str, pos: int) -> int:
        """Length of the boundary-satisfying alternative at ``pos``, or 0."""
        if pos > 0 and is_letter(text[pos - 1]):
            return 0
        for alt in self.alternatives:
            end = pos + len(alt)
            if text.startswith(alt, pos) and (end >= len(text) or not is_letter(text[end])):
                return len(alt)
        return 0

    def finditer(self, text: str) -> Iterator[tuple[int, int]]:
        """Yield non-overlapping leftmost ``(start, end)`` matches in canonical text."""
        if self._candidates is None:
            return
        pos = 0
        while pos < len(text):
            m = self._candidates.search(text, pos)
            if m is None:
                return
            start = m.start()
            length = self._match_at(text, start)
            if length:
                yield start, start + length
                pos = start + length
            else:
                pos = start + 1


def compile_lexicon(
    lexicon: Mapping[str, Sequence[str]] = LEXICON,
    offense_for_bucket: Mapping[str, str] = OFFENSE_FOR_BUCKET,
) -> tuple[BucketMatcher, ...]:
    """Compile every bucket that has an offense mapping, in mapping order.

    A bucket without terms still compiles; it never matches.
    """
    return tuple(
        BucketMatcher.compile(bucket, offense, lexicon.get(bucket, ()))
        for bucket, offense in offense_for_bucket.items()
    )
