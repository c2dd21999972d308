"""
Normalizer — canonical matching text with a map back to raw offsets.

The canonical form is what every matcher scans:
  - compatibility decomposition (NFKD) with combining marks stripped
  - lowercased
  - runs of the same canonical character truncated to ``repeat_max``

``NormalizedText.index_map[i]`` is the raw index that produced canonical
character ``i``. The map is non-decreasing and always exactly as long as
the canonical text. A raw character that folds to nothing (a lone
combining mark) contributes no entry.
"""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass


@dataclass(frozen=True)
class NormalizeOptions:
    fold_diacritics: bool = True
    lowercase: bool = True
    repeat_max: int = 2

    def __post_init__(self):
        if self.repeat_max < 1:
            object.__setattr__(self, "repeat_max", 1)


@dataclass(frozen=True)
class NormalizedText:
    text: str
    index_map: tuple[int, ...]

    def __len__(self) -> int:
        return len(self.text)


DEFAULT_OPTIONS = NormalizeOptions()


def is_letter(ch: str) -> bool:
    """True if ``ch`` is a single code point in a Unicode letter category (L*)."""
    return len(ch) == 1 and unicodedata.category(ch).startswith("L")


def is_mark(ch: str) -> bool:
    return unicodedata.category(ch).startswith("M")


def _fold(ch: str, options: NormalizeOptions) -> str:
    """Fold one raw code point into zero or more canonical characters."""
    if options.fold_diacritics:
        ch = "".join(c for c in unicodedata.normalize("NFKD", ch) if not is_mark(c))
    if options.lowercase:
        ch = ch.lower()
        if options.fold_diacritics:
            # str.lower() can reintroduce a mark (e.g. U+0130)
            ch = "".join(c for c in ch if not is_mark(c))
    return ch


def normalize(raw: str, options: NormalizeOptions = DEFAULT_OPTIONS) -> NormalizedText:
    """Fold ``raw`` into canonical text, building the index map in lock-step."""
    out: list[str] = []
    index_map: list[int] = []

    prev = ""
    run_len = 0

    for i, ch in enumerate(raw):
        for c in _fold(ch, options):
            if c == prev:
                if run_len < options.repeat_max:
                    out.append(c)
                    index_map.append(i)
                    run_len += 1
            else:
                prev = c
                run_len = 1
                out.append(c)
                index_map.append(i)

    return NormalizedText(text="".join(out), index_map=tuple(index_map))


_LETTER_RUN = re.compile(r"([^\W\d_])\1+")


def canonical_term(term: str) -> str:
    """Canonical form of a lexicon term.

    Same folding as the text normalizer, but every run of a repeated
    letter collapses to a single letter ("kkliki" -> "kliki").
    """
    folded = "".join(
        c for c in unicodedata.normalize("NFKD", term) if not is_mark(c)
    ).lower()
    return _LETTER_RUN.sub(
        lambda m: m.group(1) if is_letter(m.group(1)) else m.group(0), folded
    )
