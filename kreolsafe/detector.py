"""
Detector — Analysis Orchestrator

Two analysis modes:
  - local:  Hint engine + reconciler only. No oracle call. Deterministic.
  - full:   Hints are forwarded to the oracle as guidance, the oracle's
            candidate spans are reconciled, and local hints are the
            fallback floor when the oracle returns nothing or fails.

The oracle call is the only suspending step. It is bounded by a timeout;
on timeout or failure the analysis degrades to local evidence instead
of failing.
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from typing import Optional, Sequence

from kreolsafe.config import settings
from kreolsafe.engine import HintEngine, hint_engine
from kreolsafe.llm import (
    LLMProvider,
    OracleError,
    OracleResponseError,
    OracleTimeout,
    OracleUnavailable,
)
from kreolsafe.models import AnalysisResult, Hint, Issue
from kreolsafe.reconciler import reconcile
from kreolsafe.schemas.analysis import RESPONSE_SCHEMA, parse_candidates

logger = logging.getLogger(__name__)


# ============================================================
# ORACLE PROMPTS
# ============================================================

SYSTEM_INSTRUCTION = (
    "Ou pou fer enn klasifikasion sekirite/justis. Retourne JSON VALID ki swiv "
    "schema (AUCUN lot text). Donne spans [start,end) 0-indexed lor TEXT ORIZINAL. "
    "Severity: 0..3. Si pena problem: issues: []."
)

ORACLE_PROMPT = """TEXT:
{text}

HINTS_JSON:
{hints_json}"""


# ============================================================
# HELPERS
# ============================================================

def clip_text(text: str, max_chars: int = settings.MAX_TEXT_CHARS) -> str:
    """Bound input size before normalization."""
    if max_chars > 0 and len(text) > max_chars:
        return text[:max_chars]
    return text


def build_prompt(text: str, hints: Sequence[Hint], max_hints: int = settings.MAX_HINTS) -> str:
    hints_json = json.dumps(
        [h.to_dict() for h in list(hints)[:max(0, max_hints)]],
        ensure_ascii=False,
    )
    return ORACLE_PROMPT.format(text=text, hints_json=hints_json)


async def request_candidates(
    text: str,
    hints: Sequence[Hint],
    llm: LLMProvider,
    max_hints: int = settings.MAX_HINTS,
) -> list[Issue]:
    """Ask the oracle for candidate issues.

    An unparseable answer is retried once with the identical request.
    """
    prompt = build_prompt(text, hints, max_hints)

    async def _ask() -> dict:
        return await llm.generate_json(
            prompt,
            system_instruction=SYSTEM_INSTRUCTION,
            temperature=0.0,
            response_schema=RESPONSE_SCHEMA,
        )

    try:
        payload = await _ask()
    except OracleResponseError as e:
        logger.warning("Oracle returned invalid JSON, retrying once: %s", e)
        payload = await _ask()

    candidates, skipped = parse_candidates(payload)
    if skipped:
        logger.debug("Skipped %d invalid oracle issues", skipped)
    return candidates


# ============================================================
# ANALYSIS FUNCTIONS
# ============================================================

def analyze_local(
    text: str,
    engine: HintEngine = hint_engine,
    fallback_limit: int = settings.FALLBACK_HINTS,
) -> AnalysisResult:
    """
    Local-only analysis. Hints promoted through the fallback floor.
    Zero API cost. Deterministic.
    """
    clipped = clip_text(text)
    hints = engine.build_hints(clipped)
    result = reconcile([], clipped, hints, fallback_limit=fallback_limit)
    result.source = "local"
    return result


async def analyze(
    text: str,
    llm: Optional[LLMProvider],
    engine: HintEngine = hint_engine,
    candidates: Optional[Sequence[Issue]] = None,
    timeout: float = settings.ORACLE_TIMEOUT_S,
    max_hints: int = settings.MAX_HINTS,
    fallback_limit: int = settings.FALLBACK_HINTS,
    strict: bool = False,
) -> AnalysisResult:
    """
    Full analysis. Local hints + oracle candidates reconciled.

    ``candidates`` are externally supplied issues reconciled together
    with whatever the oracle returns. With ``llm=None`` only those and
    the local hints are used.

    With ``strict=True`` an oracle failure is re-raised as an
    OracleError after logging; otherwise it degrades to the fallback.
    """
    started = time.monotonic()
    clipped = clip_text(text)
    hints = engine.build_hints(clipped)
    all_candidates: list[Issue] = list(candidates or [])

    if llm is not None and clipped.strip():
        try:
            oracle_candidates = await asyncio.wait_for(
                request_candidates(clipped, hints, llm, max_hints=max_hints),
                timeout=timeout,
            )
            all_candidates.extend(oracle_candidates)
        except asyncio.TimeoutError as e:
            logger.warning(
                "Oracle timed out after %.1fs, using local hints", timeout,
                extra={"error_type": "OracleTimeout"},
            )
            if strict:
                raise OracleTimeout(f"Oracle timed out after {timeout}s") from e
        except OracleError as e:
            logger.warning(
                "Oracle call failed: %s", e,
                extra={"error": str(e), "error_type": type(e).__name__},
            )
            if strict:
                raise
        except Exception as e:
            logger.warning(
                "Oracle call failed: %s", e,
                extra={"error": str(e), "error_type": type(e).__name__},
            )
            if strict:
                raise OracleUnavailable(str(e)) from e

    result = reconcile(all_candidates, clipped, hints, fallback_limit=fallback_limit)

    logger.info(
        "Analysis complete",
        extra={
            "text_chars": len(clipped),
            "hints_count": len(hints),
            "candidates_count": len(all_candidates),
            "issues_count": len(result.issues),
            "overall_label": result.overall_label,
            "source": result.source,
            "duration_ms": round((time.monotonic() - started) * 1000, 1),
        },
    )
    return result
