"""
Oracle Schemas — structured output contract for the generative model.

RESPONSE_SCHEMA is sent to the model as its response_schema. The pydantic
models validate what comes back before it reaches the reconciler.
Severity travels as a string enum ("0".."3") because not every provider
accepts integer enums.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from kreolsafe.models import OFFENSE_KINDS, OVERALL_LABELS, Issue, coerce_severity


# ============================================================
# RESPONSE SCHEMA (sent to the oracle)
# ============================================================

RESPONSE_SCHEMA: dict = {
    "type": "OBJECT",
    "properties": {
        "overall_label": {"type": "STRING", "enum": list(OVERALL_LABELS)},
        "issues": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "start": {"type": "INTEGER"},
                    "end": {"type": "INTEGER"},
                    "quote": {"type": "STRING"},
                    "offense": {"type": "STRING", "enum": list(OFFENSE_KINDS)},
                    "severity": {"type": "STRING", "enum": ["0", "1", "2", "3"]},
                    "rationale": {"type": "STRING"},
                },
                "required": ["start", "end", "quote", "offense", "severity", "rationale"],
            },
        },
    },
    "required": ["overall_label", "issues"],
}


# ============================================================
# VALIDATION MODELS (what the oracle sends back)
# ============================================================

class OracleIssue(BaseModel):
    """One candidate issue as returned by the oracle."""
    start: int = 0
    end: int = 0
    quote: str = ""
    offense: str
    severity: int = Field(0, ge=0, le=3)
    rationale: str = ""

    @field_validator("offense")
    @classmethod
    def _known_offense(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in OFFENSE_KINDS:
            raise ValueError(f"unknown offense kind: {v!r}")
        return v

    @field_validator("severity", mode="before")
    @classmethod
    def _coerce_severity(cls, v: Any) -> int:
        return coerce_severity(v)

    @field_validator("start", "end", mode="before")
    @classmethod
    def _none_offset(cls, v: Any) -> Any:
        return 0 if v is None else v

    @field_validator("quote", "rationale", mode="before")
    @classmethod
    def _none_text(cls, v: Any) -> Any:
        return "" if v is None else v

    def to_issue(self) -> Issue:
        return Issue(
            start=self.start,
            end=self.end,
            quote=self.quote,
            offense=self.offense,
            severity=self.severity,
            rationale=self.rationale.strip(),
        )


class OracleAnalysis(BaseModel):
    """Top-level oracle payload. ``overall_label`` is accepted but never trusted."""
    overall_label: Optional[str] = None
    issues: list[Any] = Field(default_factory=list)


def parse_candidates(payload: dict) -> tuple[list[Issue], int]:
    """Validate an oracle payload into candidate issues.

    Invalid issues are skipped one by one. Returns (issues, skipped_count).
    """
    try:
        analysis = OracleAnalysis.model_validate(payload)
    except ValidationError:
        return [], 0

    issues: list[Issue] = []
    skipped = 0
    for raw in analysis.issues:
        try:
            issues.append(OracleIssue.model_validate(raw).to_issue())
        except ValidationError:
            skipped += 1
    return issues, skipped
