"""
Reconciler — candidate spans to one deterministic, minimal cover.

Steps:
  1. Validate & clamp every candidate against the raw text, re-anchoring
     quotes that do not sit at their offsets.
  2. Stable sort by start.
  3. Merge touching/overlapping spans. Highest severity wins the label.
  4. Derive the overall verdict from the merged issues only.
  5. Fallback floor: with no surviving candidates, promote the first
     few local hints so local evidence is never reported as "safe"
     by omission.

Every function here is total: no input shape raises.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterable, Optional, Sequence

from kreolsafe.models import AnalysisResult, Hint, Issue, coerce_severity

logger = logging.getLogger(__name__)

FALLBACK_RATIONALE = "Heuristic lexicon/stereotype flag"
FALLBACK_SEVERITY = 1
RATIONALE_SEPARATOR = "\n— "


def _clamp(n: int, lo: int, hi: int) -> int:
    return max(lo, min(hi, n))


def _as_int(value: object) -> int:
    try:
        return int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError, OverflowError):
        return 0


# ============================================================
# 1. VALIDATE & CLAMP
# ============================================================

def clamp_candidate(candidate: Issue, text: str) -> Optional[Issue]:
    """Clamp a candidate onto ``text``; None if it cannot be anchored.

    - offsets clamped into [0, len(text)], swapped if reversed
    - a supplied quote missing from the clamped slice is re-anchored to
      its FIRST occurrence in the text; a quote found nowhere drops the
      candidate
    - the quote is always recomputed from the final offsets
    - empty spans and whitespace-only quotes are dropped
    """
    n = len(text)
    start = _clamp(_as_int(candidate.start), 0, n)
    end = _clamp(_as_int(candidate.end), 0, n)
    if end < start:
        start, end = end, start

    supplied = candidate.quote if isinstance(candidate.quote, str) else ""
    if supplied and supplied not in text[start:end]:
        idx = text.find(supplied)
        if idx < 0:
            logger.debug("Dropping candidate: quote not found in text")
            return None
        start, end = idx, idx + len(supplied)

    quote = text[start:end]
    if end <= start or not quote.strip():
        logger.debug("Dropping candidate: empty span")
        return None

    return Issue(
        start=start,
        end=end,
        quote=quote,
        offense=candidate.offense,
        severity=coerce_severity(candidate.severity),
        rationale=candidate.rationale.strip() if isinstance(candidate.rationale, str) else "",
    )


def clamp_candidates(candidates: Iterable[Issue], text: str) -> list[Issue]:
    out = []
    for c in candidates:
        fixed = clamp_candidate(c, text)
        if fixed is not None:
            out.append(fixed)
    return out


# ============================================================
# 2-3. SORT & MERGE
# ============================================================

def merge_overlaps(issues: Sequence[Issue], text: Optional[str] = None) -> list[Issue]:
    """Merge touching or overlapping issues into a sorted, disjoint list.

    ``start <= open.end`` merges (touching spans merge). On merge the end
    and severity take the max; a strictly higher severity replaces the
    offense; rationales are joined. With ``text`` the quote is recomputed
    from the final span, otherwise the longer quote is kept.

    Idempotent: merging an already merged list returns an equal list.
    """
    ordered = sorted(issues, key=lambda i: i.start)  # stable
    out: list[Issue] = []

    for cur in ordered:
        last = out[-1] if out else None
        if last is None or cur.start > last.end:
            out.append(replace(cur))
            continue

        last.end = max(last.end, cur.end)
        if cur.severity > last.severity:
            last.offense = cur.offense
            last.severity = cur.severity
        if cur.rationale:
            last.rationale = (
                f"{last.rationale}{RATIONALE_SEPARATOR}{cur.rationale}".strip()
                if last.rationale else cur.rationale
            )
        if len(cur.quote) > len(last.quote):
            last.quote = cur.quote

    if text is not None:
        for issue in out:
            issue.quote = text[issue.start:issue.end]
    return out


# ============================================================
# 4. VERDICT
# ============================================================

def overall_label(issues: Sequence[Issue]) -> str:
    """safe / risky / unsafe, purely from the merged issues."""
    if not issues:
        return "safe"
    max_sev = max(i.severity for i in issues)
    if max_sev >= 3:
        return "unsafe"
    if max_sev >= 2 or len(issues) >= 2:
        return "risky"
    return "safe"


# ============================================================
# 5. FALLBACK FLOOR
# ============================================================

def promote_hints(hints: Sequence[Hint], limit: int = 3) -> list[Issue]:
    """First ``limit`` hints, in detection order, as severity-1 issues."""
    return [
        Issue(
            start=h.start,
            end=h.end,
            quote=h.quote,
            offense=h.kind,
            severity=FALLBACK_SEVERITY,
            rationale=FALLBACK_RATIONALE,
        )
        for h in list(hints)[:max(0, limit)]
    ]


# ============================================================
# PIPELINE
# ============================================================

def reconcile(
    candidates: Sequence[Issue],
    text: str,
    hints: Sequence[Hint] = (),
    fallback_limit: int = 3,
) -> AnalysisResult:
    """Clamp, merge and grade candidates; fall back to hints if none survive."""
    survivors = clamp_candidates(candidates, text)
    source = "oracle+local"

    if not survivors:
        promoted = clamp_candidates(promote_hints(hints, fallback_limit), text)
        # Fallback issues keep the fixed rationale, not a joined one
        merged = [
            replace(i, rationale=FALLBACK_RATIONALE)
            for i in merge_overlaps(promoted, text)
        ]
        source = "local_fallback" if merged else "local"
    else:
        merged = merge_overlaps(survivors, text)

    return AnalysisResult(
        overall_label=overall_label(merged),
        issues=merged,
        source=source,
    )
