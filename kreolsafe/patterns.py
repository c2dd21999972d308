"""
Pattern Matcher — stereotype framing by proximity co-occurrence.

A stereotype is flagged when a group subject, a generalizing modal and a
pejorative appear in that order within one sentence:

    <subject> [up to 60 chars] <modal> [up to 60 chars] <pejorative>

Sentence terminators (. ! ? newline) bound the window. The hint covers the
whole matched span, subject through pejorative.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator, Optional


SENTENCE_TERMINATORS = ".!?\n"


@dataclass(frozen=True)
class StereotypePattern:
    """Term lists for the stereotype window.

    Terms are regex fragments over canonical (lowercased, unaccented) text.
    """
    subjects: tuple[str, ...]
    modals: tuple[str, ...]
    pejoratives: tuple[str, ...]
    window: int = 60
    kind: str = "bias"


STEREOTYPE_PATTERN = StereotypePattern(
    subjects=(
        r"dimounn?n?", "fam", "zom", r"immigran(?:t)?s?", "minorite", "relizyon",
        "religion", "ras", "etnisite", "ethnicite",
    ),
    modals=(
        "zot", "bizin", "doit", "should", "must", "toultan", "toujours", "jamais",
        "zame",
    ),
    pejoratives=(
        "parese", "lazy", "bet", "stupid", "inferyer", "inferieur", "kriminel",
        r"criminals?", "feb", "faible", "weak",
    ),
)


class PatternMatcher:
    """Compiled stereotype window. Never matches if any term list is empty."""

    def __init__(self, pattern: StereotypePattern = STEREOTYPE_PATTERN):
        self.pattern = pattern
        self.kind = pattern.kind
        self._regex = self._compile(pattern)

    @staticmethod
    def _compile(pattern: StereotypePattern) -> Optional[re.Pattern]:
        if not (pattern.subjects and pattern.modals and pattern.pejoratives):
            return None
        gap = f"[^{re.escape(SENTENCE_TERMINATORS)}]{{0,{pattern.window}}}"
        return re.compile(
            f"({'|'.join(pattern.subjects)})"
            f"{gap}"
            f"({'|'.join(pattern.modals)})"
            f"{gap}"
            f"({'|'.join(pattern.pejoratives)})"
        )

    def finditer(self, text: str) -> Iterator[tuple[int, int]]:
        """Yield ``(start, end)`` of each full stereotype match in canonical text."""
        if self._regex is None:
            return
        for m in self._regex.finditer(text):
            if m.end() > m.start():
                yield m.start(), m.end()
