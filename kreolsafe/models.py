"""
Core data structures shared by the hint engine and the reconciler.

All offsets are half-open ``[start, end)`` indices into the RAW text,
counted in code points (Python ``str`` indices).
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field


# ============================================================
# VOCABULARIES
# ============================================================

OFFENSE_KINDS: tuple[str, ...] = (
    "toxicity",
    "harassment",
    "hate",
    "violence",
    "sexual",
    "self-harm",
    "bullying",
    "spam",
    "misinformation",
    "bias",
    "stereotype",
)

OVERALL_LABELS: tuple[str, ...] = ("safe", "risky", "unsafe")

SEVERITIES: tuple[int, ...] = (0, 1, 2, 3)


def coerce_severity(value: object) -> int:
    """Turn an oracle severity ("0".."3", int or float) into an int in [0, 3].

    Anything non-numeric becomes 0.
    """
    if isinstance(value, bool):
        return int(value)
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(number):
        return 0
    return max(0, min(3, int(number)))


# ============================================================
# DATA STRUCTURES
# ============================================================

@dataclass(frozen=True)
class Hint:
    """A locally detected candidate span, in raw offsets."""
    start: int
    end: int
    kind: str      # one of OFFENSE_KINDS
    quote: str

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class Issue:
    """A reconciled, user-facing span with one offense label."""
    start: int
    end: int
    quote: str
    offense: str
    severity: int
    rationale: str = ""

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class AnalysisResult:
    """Final verdict plus sorted, mutually non-overlapping issues."""
    overall_label: str
    issues: list[Issue] = field(default_factory=list)
    source: str = "local"  # "local" | "oracle+local" | "local_fallback"

    def to_dict(self) -> dict:
        return {
            "overall_label": self.overall_label,
            "issues": [i.to_dict() for i in self.issues],
            "source": self.source,
        }
