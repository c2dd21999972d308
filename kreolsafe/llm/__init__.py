"""
LLM Provider — Abstract Interface

The generative model is an opaque oracle that returns candidate spans.
All calls go through this interface. Swap providers by changing
KREOLSAFE_LLM_PROVIDER in env.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from typing import Optional


class OracleError(Exception):
    """Base class for oracle failures. Never raised by the core itself."""


class OracleUnavailable(OracleError):
    """Provider unreachable, not configured, or circuit open."""


class OracleTimeout(OracleError):
    """The oracle did not answer within the wall-clock bound."""


class OracleResponseError(OracleError):
    """The oracle answered with something that is not valid JSON."""


class LLMProvider(ABC):
    """Abstract base for LLM providers."""

    @abstractmethod
    async def generate(
        self,
        prompt: str,
        system_instruction: Optional[str] = None,
        temperature: float = 0.0,
        json_mode: bool = False,
        response_schema: Optional[dict] = None,
    ) -> str:
        """Generate a text response from the LLM."""
        ...

    async def generate_json(
        self,
        prompt: str,
        system_instruction: Optional[str] = None,
        temperature: float = 0.0,
        response_schema: Optional[dict] = None,
    ) -> dict:
        """Generate and parse a JSON response."""
        text = await self.generate(
            prompt=prompt,
            system_instruction=system_instruction,
            temperature=temperature,
            json_mode=True,
            response_schema=response_schema,
        )
        # Strip markdown fences if the LLM wraps JSON in ```json blocks
        cleaned = (text or "").strip()
        if cleaned.startswith("```"):
            cleaned = cleaned.split("\n", 1)[-1].rsplit("```", 1)[0].strip()
        try:
            parsed = json.loads(cleaned)
        except json.JSONDecodeError as e:
            raise OracleResponseError(
                f"LLM returned invalid JSON: {e}. Raw response: {(text or '')[:300]}"
            ) from e
        if not isinstance(parsed, dict):
            raise OracleResponseError(
                f"LLM returned JSON {type(parsed).__name__}, expected object"
            )
        return parsed
