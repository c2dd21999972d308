"""
Hint Engine — the deterministic detection layer.

    raw text -> normalize -> {lexicon, stereotype} on canonical text
             -> canonical ranges -> raw offsets -> hints

Everything is compiled once in the constructor. A HintEngine holds no
mutable state after that, so one instance is shared by all requests.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Mapping, Sequence

from kreolsafe.config import settings
from kreolsafe.lexicon import LEXICON, OFFENSE_FOR_BUCKET, BucketMatcher, compile_lexicon
from kreolsafe.models import OFFENSE_KINDS, Hint
from kreolsafe.normalize import NormalizeOptions, NormalizedText, normalize
from kreolsafe.patterns import STEREOTYPE_PATTERN, PatternMatcher, StereotypePattern
from kreolsafe.spans import to_raw_span

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EngineConfig:
    """Static detection configuration, built once at startup."""
    normalize: NormalizeOptions = field(default_factory=NormalizeOptions)
    lexicon: Mapping[str, Sequence[str]] = field(default_factory=lambda: LEXICON)
    offense_for_bucket: Mapping[str, str] = field(default_factory=lambda: OFFENSE_FOR_BUCKET)
    stereotype: StereotypePattern = STEREOTYPE_PATTERN

    @classmethod
    def from_settings(cls) -> "EngineConfig":
        kind = settings.STEREOTYPE_KIND
        if kind not in ("bias", "stereotype"):
            logger.warning("Unsupported stereotype kind %r, using 'bias'", kind)
            kind = "bias"
        pattern = StereotypePattern(
            subjects=STEREOTYPE_PATTERN.subjects,
            modals=STEREOTYPE_PATTERN.modals,
            pejoratives=STEREOTYPE_PATTERN.pejoratives,
            window=STEREOTYPE_PATTERN.window,
            kind=kind,
        )
        return cls(
            normalize=NormalizeOptions(
                fold_diacritics=settings.FOLD_DIACRITICS,
                lowercase=settings.LOWERCASE,
                repeat_max=settings.REPEAT_MAX,
            ),
            stereotype=pattern,
        )


class HintEngine:
    """Compiled lexicon + stereotype matchers over normalized text."""

    def __init__(self, config: EngineConfig = EngineConfig()):
        if config.stereotype.kind not in OFFENSE_KINDS:
            raise ValueError(f"Unknown stereotype kind: {config.stereotype.kind!r}")
        self.config = config
        self.buckets: tuple[BucketMatcher, ...] = compile_lexicon(
            config.lexicon, config.offense_for_bucket,
        )
        self.stereotype = PatternMatcher(config.stereotype)
        for b in self.buckets:
            logger.debug(
                "Compiled bucket %s", b.bucket,
                extra={"bucket": b.bucket, "alternatives": len(b.alternatives)},
            )

    def normalize(self, text: str) -> NormalizedText:
        return normalize(text, self.config.normalize)

    def build_hints(self, text: str) -> list[Hint]:
        """Detect on canonical text, report on raw text.

        Order: every bucket in configuration order (matches left to right
        within a bucket), then stereotype matches.
        """
        norm = self.normalize(text)
        hints: list[Hint] = []

        for bucket in self.buckets:
            for ns, ne in bucket.finditer(norm.text):
                hints.append(self._hint(text, norm, ns, ne, bucket.offense))

        for ns, ne in self.stereotype.finditer(norm.text):
            hints.append(self._hint(text, norm, ns, ne, self.stereotype.kind))

        return hints

    @staticmethod
    def _hint(text: str, norm: NormalizedText, ns: int, ne: int, kind: str) -> Hint:
        start, end = to_raw_span(ns, ne, norm.index_map)
        return Hint(start=start, end=end, kind=kind, quote=text[start:end])

    def describe(self) -> list[dict]:
        """Summary of the compiled detection surface."""
        surface = [
            {
                "bucket": b.bucket,
                "offense": b.offense,
                "alternatives": list(b.alternatives),
            }
            for b in self.buckets
        ]
        surface.append({
            "bucket": "stereotype_window",
            "offense": self.stereotype.kind,
            "alternatives": [],
        })
        return surface


# ============================================================
# SINGLETON — built once from settings, never mutated
# ============================================================

hint_engine = HintEngine(EngineConfig.from_settings())
