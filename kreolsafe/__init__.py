"""
KreolSafe — Harmful Span Detection for Kreol Morisien Text

Normalizes informal text, detects offending spans with a lexicon and a
stereotype pattern, and reconciles local hints with candidate spans from
an external generative model into one deterministic verdict.

Public API:
  - normalize / to_raw_span: canonical text with a map back to raw offsets
  - expand:         abbreviation variants of a lexicon term
  - HintEngine:     compiled lexicon + stereotype matchers (hint_engine singleton)
  - reconcile:      clamp, merge and grade candidate issues
  - analyze_local:  local-only analysis, no oracle
  - analyze:        local hints + oracle candidates, bounded by a timeout
  - LLMProvider:    abstract oracle interface for provider swapping

Usage:
    from kreolsafe import analyze_local
    result = analyze_local("Twa to enn bourik")
    result.overall_label, result.issues
"""

__version__ = "0.3.0"

from kreolsafe.models import (
    AnalysisResult,
    Hint,
    Issue,
    OFFENSE_KINDS,
    OVERALL_LABELS,
)
from kreolsafe.normalize import NormalizeOptions, NormalizedText, normalize
from kreolsafe.spans import to_raw_span
from kreolsafe.abbreviations import expand
from kreolsafe.engine import EngineConfig, HintEngine, hint_engine
from kreolsafe.reconciler import merge_overlaps, overall_label, reconcile
from kreolsafe.detector import analyze, analyze_local
from kreolsafe.llm import LLMProvider, OracleError
from kreolsafe.llm.factory import get_provider

__all__ = [
    "AnalysisResult",
    "Hint",
    "Issue",
    "OFFENSE_KINDS",
    "OVERALL_LABELS",
    "NormalizeOptions",
    "NormalizedText",
    "normalize",
    "to_raw_span",
    "expand",
    "EngineConfig",
    "HintEngine",
    "hint_engine",
    "merge_overlaps",
    "overall_label",
    "reconcile",
    "analyze",
    "analyze_local",
    "LLMProvider",
    "OracleError",
    "get_provider",
]
